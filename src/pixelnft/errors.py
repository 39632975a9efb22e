"""Custom exceptions and error kinds for the pixel NFT client"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of input problems reported by the parsers."""

    LENGTH_MISMATCH = "length_mismatch"
    OUT_OF_RANGE = "out_of_range"
    MALFORMED_TOKEN = "malformed_token"
    MALFORMED_HEX = "malformed_hex"
    MISSING_FIELD = "missing_field"


@dataclass(frozen=True)
class PixelError:
    """
    Structured description of why a pixel grid was rejected.

    ``index`` is the 0-based element (or hex character) position and
    ``token`` the offending text or value, when they apply.
    """

    kind: ErrorKind
    message: str
    index: Optional[int] = None
    token: Optional[str] = None
    expected: Optional[int] = None
    actual: Optional[int] = None

    def __str__(self) -> str:
        return self.message


class PixelGridError(ValueError):
    """Raised when pixel input cannot be normalized into a 9×9 grid."""

    def __init__(self, error: PixelError):
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


class ContractClientError(Exception):
    """Raised when there's an error communicating with the RPC server or contract."""

    pass
