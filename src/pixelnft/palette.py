"""
32-color palettes for rendering NFT pixel indices.

The authoritative palette lives in the contract. When it can't be read or
comes back with an unexpected shape, callers pass DEFAULT_PALETTE instead.
"""
import logging
import numbers
from typing import List, Optional, Sequence, Tuple

from pixelnft.pixels import NFT_COLORS

logger = logging.getLogger(__name__)

# Packed 0xRRGGBB values, index 0..31
DEFAULT_PALETTE: Tuple[int, ...] = (
    0x000000, 0x222034, 0x45283C, 0x663931, 0x8F563B, 0xDF7126, 0xD9A066, 0xEEC39A,
    0xFBF236, 0x99E550, 0x6ABE30, 0x37946E, 0x4B692F, 0x524B24, 0x323C39, 0x3F3F74,
    0x306082, 0x5B6EE1, 0x639BFF, 0x5FCDE4, 0xCBDBFC, 0xFFFFFF, 0x9BADB7, 0x847E87,
    0x696A6A, 0x595652, 0x76428A, 0xAC3232, 0xD95763, 0xD77BBA, 0x8F974A, 0x8A6F30,
)


def u32_to_rgb(n: int) -> Tuple[int, int, int]:
    """Unpack 0xRRGGBB into an (r, g, b) tuple."""
    return (n >> 16) & 0xFF, (n >> 8) & 0xFF, n & 0xFF


def validate_palette(palette: Sequence[int]) -> List[int]:
    """
    Check that a palette has exactly 32 colors, each 0..0xFFFFFF.

    Returns:
        The palette as a list of ints

    Raises:
        ValueError: If the palette has the wrong length or a bad entry
    """
    if palette is None or len(palette) != NFT_COLORS:
        raise ValueError(f"Palette must have exactly {NFT_COLORS} colors.")
    out = []
    for i, color in enumerate(palette):
        if isinstance(color, bool) or not isinstance(color, numbers.Integral):
            raise ValueError(f"Palette color {i} is not an integer: {color!r}")
        if not 0 <= int(color) <= 0xFFFFFF:
            raise ValueError(f"Palette color {i} is outside 0x000000..0xFFFFFF: {color!r}")
        out.append(int(color))
    return out


def resolve_palette(candidate: Optional[Sequence[int]]) -> List[int]:
    """Return the candidate palette if valid, otherwise DEFAULT_PALETTE."""
    if candidate is None:
        return list(DEFAULT_PALETTE)
    try:
        return validate_palette(candidate)
    except (ValueError, TypeError) as e:
        logger.warning(f"Falling back to default palette: {e}")
        return list(DEFAULT_PALETTE)
