"""
Shared types used across the pixel NFT client.

Pixel input arrives in one of three shapes. Each shape is a small frozen
variant so the parser can pick a routine per variant instead of inspecting
raw values all over the place.
"""

from dataclasses import dataclass
from typing import Sequence, Union

# Canonical 9×9 pixel buffer: 81 bytes, each a palette index 0..31.
PixelGrid = bytes

# 32 packed 0xRRGGBB colors.
Palette = Sequence[int]


@dataclass(frozen=True)
class BinaryInput:
    """An already-binary pixel buffer (bytes, bytearray, memoryview)."""

    data: bytes


@dataclass(frozen=True)
class NumericArrayInput:
    """A flat sequence of numbers, one per pixel."""

    values: Sequence[object]


@dataclass(frozen=True)
class TextInput:
    """Hex-162 text or a freeform grid (CSV, tabs, spaces, newlines)."""

    text: str


PixelInput = Union[BinaryInput, NumericArrayInput, TextInput]
