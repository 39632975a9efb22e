"""Utility functions for the pixel NFT client."""

from .formatting import format_batch_table, format_raw_amount, pixels_to_text_grid
from .image import image_to_base64, pixels_to_image

__all__ = [
    "format_batch_table",
    "format_raw_amount",
    "pixels_to_text_grid",
    "pixels_to_image",
    "image_to_base64",
]
