"""
Flexible 9×9 pixel grid parsing.

Accepts hex-162 strings, CSV / whitespace grids, flat numeric arrays and
raw byte buffers, and normalizes them into the canonical 81-byte buffer the
contract stores (one palette index 0..31 per pixel, row-major).

Grids authored with 1-based palette indices (1..32) are detected globally
and shifted down by one.
"""
import logging
import numbers
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from pixelnft.errors import ErrorKind, PixelError, PixelGridError
from pixelnft.types import (BinaryInput, NumericArrayInput, PixelGrid,
                            PixelInput, TextInput)

logger = logging.getLogger(__name__)

NFT_SIZE = 9
NFT_PIXELS = NFT_SIZE * NFT_SIZE  # 81
NFT_COLORS = 32
HEX_LENGTH = NFT_PIXELS * 2  # 162

_HEX_CHARS = frozenset("0123456789abcdefABCDEF")
_SEPARATOR_RE = re.compile(r"[\s,]")
_COMMA_TAB_RE = re.compile(r"[,\t]+")
_LINE_RE = re.compile(r"\r?\n")
# ASCII digits with an optional all-zero fraction: "7", "-1", "3.0", "3."
_INT_TOKEN_RE = re.compile(r"[+-]?(?:[0-9]+\.?0*|\.0+)")
# A lone palette value, e.g. "7" or "31"
_SINGLE_VALUE_RE = re.compile(r"[+-]?[0-9]{1,2}(?:\.0*)?")


@dataclass(frozen=True)
class PixelsOk:
    pixels: PixelGrid

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class PixelsErr:
    error: PixelError

    @property
    def ok(self) -> bool:
        return False


PixelParseResult = Union[PixelsOk, PixelsErr]


class _Reject(Exception):
    """Internal short-circuit carrying the first violation found."""

    def __init__(self, error: PixelError):
        super().__init__(error.message)
        self.error = error


def _length_mismatch(actual: int) -> _Reject:
    return _Reject(PixelError(
        kind=ErrorKind.LENGTH_MISMATCH,
        message=f"Expected exactly {NFT_PIXELS} values (9×9), got {actual}.",
        expected=NFT_PIXELS,
        actual=actual,
    ))


def _out_of_range(index: int, value: int) -> _Reject:
    return _Reject(PixelError(
        kind=ErrorKind.OUT_OF_RANGE,
        message=f"Pixel {index} is out of range 0..{NFT_COLORS - 1}: {value}",
        index=index,
        token=str(value),
    ))


def _malformed_hex(message: str, index=None, token=None, actual=None) -> _Reject:
    return _Reject(PixelError(
        kind=ErrorKind.MALFORMED_HEX,
        message=message,
        index=index,
        token=token,
        expected=HEX_LENGTH if actual is not None else None,
        actual=actual,
    ))


def classify_pixel_input(value) -> PixelInput:
    """
    Wrap a raw Python value in the matching input variant.

    Args:
        value: bytes-like, str, or a sequence of numbers (lists, tuples,
            numpy arrays). Existing variants are returned as-is.

    Returns:
        BinaryInput, TextInput or NumericArrayInput

    Raises:
        TypeError: If the value has none of the supported shapes
    """
    if isinstance(value, (BinaryInput, NumericArrayInput, TextInput)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BinaryInput(bytes(value))
    if isinstance(value, str):
        return TextInput(value)
    if isinstance(value, Sequence) or hasattr(value, "__array__"):
        return NumericArrayInput(list(value))
    raise TypeError(f"Unsupported pixel input type: {type(value).__name__}")


def _check_range(values: Sequence[int]) -> PixelGrid:
    for i, v in enumerate(values):
        if v < 0 or v >= NFT_COLORS:
            raise _out_of_range(i, v)
    return bytes(values)


def _normalize_one_based(values: List[int]) -> List[int]:
    # Single global decision: the whole grid is 1-based when every value fits 1..32.
    if min(values) >= 1 and max(values) <= NFT_COLORS:
        logger.debug("Detected 1-based palette indices, shifting grid down by one")
        return [v - 1 for v in values]
    return values


def _as_integer(value, index: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise _Reject(PixelError(
            kind=ErrorKind.MALFORMED_TOKEN,
            message=f"Invalid value at {index}: {value!r}",
            index=index,
            token=repr(value),
        ))
    if isinstance(value, numbers.Integral):
        return int(value)
    as_float = float(value)
    if not as_float.is_integer():
        raise _Reject(PixelError(
            kind=ErrorKind.MALFORMED_TOKEN,
            message=f"Invalid value at {index}: {value!r}",
            index=index,
            token=repr(value),
        ))
    return int(as_float)


def _parse_token(token: str, index: int) -> int:
    # int() alone would also take "1_0" and non-ASCII digits
    if not _INT_TOKEN_RE.fullmatch(token):
        raise _Reject(PixelError(
            kind=ErrorKind.MALFORMED_TOKEN,
            message=f"Invalid value: {token}",
            index=index,
            token=token,
        ))
    whole = token.partition(".")[0]
    return int(whole) if whole.lstrip("+-") else 0


def _parse_binary(inp: BinaryInput) -> PixelGrid:
    data = bytes(inp.data)
    if len(data) != NFT_PIXELS:
        raise _length_mismatch(len(data))
    return _check_range(data)


def _parse_numeric(inp: NumericArrayInput) -> PixelGrid:
    values = list(inp.values)
    if len(values) != NFT_PIXELS:
        raise _length_mismatch(len(values))
    ints = [_as_integer(v, i) for i, v in enumerate(values)]
    return _check_range(_normalize_one_based(ints))


def _parse_hex(text: str) -> PixelGrid:
    if len(text) != HEX_LENGTH:
        raise _malformed_hex(
            f"Hex pixels must be exactly {HEX_LENGTH} characters, got {len(text)}.",
            actual=len(text),
        )
    for pos, ch in enumerate(text):
        if ch not in _HEX_CHARS:
            raise _malformed_hex(
                f"Invalid hex character {ch!r} at position {pos}",
                index=pos,
                token=ch,
            )
    return _check_range([int(text[i * 2:i * 2 + 2], 16) for i in range(NFT_PIXELS)])


def _parse_grid(text: str) -> PixelGrid:
    rows = [_COMMA_TAB_RE.sub(" ", r).strip() for r in _LINE_RE.split(text)]
    nums: List[int] = []
    for row in rows:
        if not row:
            continue
        for token in row.split():
            nums.append(_parse_token(token, len(nums)))
    if len(nums) != NFT_PIXELS:
        raise _length_mismatch(len(nums))
    return _check_range(_normalize_one_based(nums))


def _parse_text(inp: TextInput) -> PixelGrid:
    s = inp.text.strip()
    # Separator-free text is hex, unless it is a lone palette value (a one-value grid).
    if s and not _SEPARATOR_RE.search(s) and not _SINGLE_VALUE_RE.fullmatch(s):
        return _parse_hex(s)
    return _parse_grid(s)


_PARSERS = {
    BinaryInput: _parse_binary,
    NumericArrayInput: _parse_numeric,
    TextInput: _parse_text,
}


def parse_pixels(value) -> PixelParseResult:
    """
    Normalize any supported pixel input into a canonical 81-byte buffer.

    Parsing stops at the first violation.

    Args:
        value: An input variant or a raw value accepted by classify_pixel_input

    Returns:
        PixelsOk with the buffer, or PixelsErr with the structured error
    """
    inp = classify_pixel_input(value)
    try:
        return PixelsOk(_PARSERS[type(inp)](inp))
    except _Reject as rejection:
        logger.debug(f"Rejected pixel input: {rejection.error.message}")
        return PixelsErr(rejection.error)


def parse_pixels_or_raise(value) -> PixelGrid:
    """Like parse_pixels, but raises PixelGridError on invalid input."""
    result = parse_pixels(value)
    if isinstance(result, PixelsErr):
        raise PixelGridError(result.error)
    return result.pixels


def assert_pixels(pixels: bytes) -> None:
    """Require exactly 81 bytes, each 0..31. No normalization is applied."""
    result = parse_pixels(BinaryInput(bytes(pixels)))
    if isinstance(result, PixelsErr):
        raise PixelGridError(result.error)


def pixels_to_hex(pixels: bytes) -> str:
    """Encode a canonical buffer as a 162-character lowercase hex string."""
    assert_pixels(pixels)
    return bytes(pixels).hex()


def pixels_to_rows(pixels: bytes) -> List[List[int]]:
    """Return the buffer as 9 rows of 9 palette indices."""
    assert_pixels(pixels)
    return [list(pixels[r * NFT_SIZE:(r + 1) * NFT_SIZE]) for r in range(NFT_SIZE)]


def to_pixels_9x9(values: Sequence[int]) -> PixelGrid:
    """
    Build a buffer from a number list, truncating or zero-padding to 81.

    Values are masked to a byte before the range check, so anything above
    31 is still rejected.
    """
    out = bytes((int(values[i]) & 0xFF) if i < len(values) else 0 for i in range(NFT_PIXELS))
    assert_pixels(out)
    return out


def index_ranges(batch: int = 27) -> List[Tuple[int, int]]:
    """Split the 81 pixel positions into [start, end) chunks of ``batch``."""
    if batch <= 0:
        raise ValueError("batch must be positive")
    ranges = []
    start = 0
    while start < NFT_PIXELS:
        end = min(start + batch, NFT_PIXELS)
        ranges.append((start, end))
        start = end
    return ranges


__all__ = [
    "NFT_SIZE",
    "NFT_PIXELS",
    "NFT_COLORS",
    "HEX_LENGTH",
    "PixelsOk",
    "PixelsErr",
    "PixelParseResult",
    "classify_pixel_input",
    "parse_pixels",
    "parse_pixels_or_raise",
    "assert_pixels",
    "pixels_to_hex",
    "pixels_to_rows",
    "to_pixels_9x9",
    "index_ranges",
]
