"""
Image utilities for NFT pixel grids.

Handles conversion of 9×9 palette-index buffers to images.
"""
import base64
import io
from typing import Optional, Sequence

import numpy as np
from PIL import Image

from pixelnft.palette import resolve_palette, u32_to_rgb
from pixelnft.pixels import NFT_COLORS, NFT_PIXELS, NFT_SIZE

_SCALE = 28  # 9 * 28 = 252px, fits a 256px frame


def _validate_pixels(pixels: Sequence[int]) -> None:
    """Validate that pixels is 81 entries with values 0-31"""
    if pixels is None or len(pixels) != NFT_PIXELS:
        raise ValueError(f"Pixels must be {NFT_PIXELS} bytes (9×9).")
    if any(not 0 <= p < NFT_COLORS for p in pixels):
        raise ValueError(f"Pixel indices must be integers 0–{NFT_COLORS - 1}.")


def pixels_to_image(
    pixels: Sequence[int],
    palette: Optional[Sequence[int]] = None,
    scale: int = _SCALE,
) -> Image.Image:
    """
    Convert a 9×9 pixel buffer to an upscaled RGB Pillow Image.

    Args:
        pixels: 81 palette indices (0-31), row-major
        palette: 32 packed 0xRRGGBB colors; the default palette is used when
            missing or malformed
        scale: Upscale factor per pixel

    Returns:
        PIL Image ((9*scale)x(9*scale) RGB)
    """
    _validate_pixels(pixels)
    if scale < 1:
        raise ValueError("scale must be >= 1")
    colors = resolve_palette(palette)

    lut = np.array([u32_to_rgb(c) for c in colors], dtype=np.uint8)
    indices = np.frombuffer(bytes(pixels), dtype=np.uint8).reshape(NFT_SIZE, NFT_SIZE)
    img = Image.fromarray(lut[indices])
    # Nearest-neighbor upscale keeps crisp pixel art
    return img.resize((NFT_SIZE * scale, NFT_SIZE * scale), Image.NEAREST)


def image_to_base64(img: Image.Image) -> str:
    """
    Return a base-64 encoded PNG (no data-URL prefix).

    Args:
        img: PIL Image

    Returns:
        Base64 encoded string
    """
    buffer = io.BytesIO()
    img.save(buffer, format="PNG", optimize=True)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def display_image_in_terminal(img: Image.Image, width: int = 18) -> None:
    """
    Display an image in the terminal using Unicode blocks and ANSI colors.

    Args:
        img: PIL Image to display
        width: Display width in characters (default: 18)
    """
    # Calculate height maintaining aspect ratio
    aspect_ratio = img.height / img.width
    height = int(width * aspect_ratio / 2)  # /2 because terminal chars are taller

    img_resized = img.resize((width, height * 2), Image.NEAREST)
    pixels = np.array(img_resized.convert("RGB"))

    # Use half blocks: top half and bottom half
    for y in range(0, height * 2, 2):
        line = ""
        for x in range(width):
            top_r, top_g, top_b = pixels[y, x]
            bottom_r, bottom_g, bottom_b = pixels[y + 1, x]

            # Lower half block (▄) with top color as background, bottom as foreground
            line += f"\033[38;2;{bottom_r};{bottom_g};{bottom_b}m\033[48;2;{top_r};{top_g};{top_b}m▄\033[0m"

        print(line)
    print("\033[0m")  # Reset colors
