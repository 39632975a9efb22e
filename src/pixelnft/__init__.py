"""Pixel NFT client: 9×9 pixel grids, batch token transfers and a small marketplace"""

from .batch import parse_batch_text, submit_batch
from .dapp import PixelNftDapp
from .errors import ContractClientError, ErrorKind, PixelError, PixelGridError
from .palette import DEFAULT_PALETTE, resolve_palette
from .pixels import (PixelsErr, PixelsOk, parse_pixels, parse_pixels_or_raise,
                     pixels_to_hex)
from .schemas import (BatchReport, BatchResult, Listing, RowError, RowOutcome,
                      TransferRow)

__version__ = "0.1.0"

__all__ = [
    # Parsers
    "parse_pixels",
    "parse_pixels_or_raise",
    "pixels_to_hex",
    "PixelsOk",
    "PixelsErr",
    "parse_batch_text",
    "submit_batch",
    # Contract workflows
    "PixelNftDapp",
    "DEFAULT_PALETTE",
    "resolve_palette",
    # Schemas
    "TransferRow",
    "BatchResult",
    "BatchReport",
    "RowOutcome",
    "RowError",
    "Listing",
    # Errors
    "ErrorKind",
    "PixelError",
    "PixelGridError",
    "ContractClientError",
]
