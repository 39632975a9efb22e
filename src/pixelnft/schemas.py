from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, computed_field

from pixelnft.errors import ErrorKind

# ============================================================================
# Batch Transfer Schemas
# ============================================================================

class RowError(str, Enum):
    """Per-line problems found while parsing batch transfer text"""
    MISSING_AMOUNT = "missing amount column"
    INVALID_AMOUNT = "invalid amount"
    INVALID_ADDRESS = "invalid address"
    NON_POSITIVE_AMOUNT = "amount must be positive"

    @property
    def kind(self) -> ErrorKind:
        return _ROW_ERROR_KINDS[self]


_ROW_ERROR_KINDS = {
    RowError.MISSING_AMOUNT: ErrorKind.MISSING_FIELD,
    RowError.INVALID_AMOUNT: ErrorKind.MALFORMED_TOKEN,
    RowError.INVALID_ADDRESS: ErrorKind.OUT_OF_RANGE,
    RowError.NON_POSITIVE_AMOUNT: ErrorKind.OUT_OF_RANGE,
}


class TransferRow(BaseModel):
    """One parsed line of batch transfer input"""
    line: int  # 1-based position in the original text
    to: str
    amount_raw: int
    original: str
    error: Optional[RowError] = None

    model_config = {'frozen': True}

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchResult(BaseModel):
    """All parsed rows plus the raw total of the error-free ones"""
    rows: Tuple[TransferRow, ...] = ()
    total: int = 0

    model_config = {'frozen': True}

    @computed_field
    @property
    def ok_count(self) -> int:
        return sum(1 for r in self.rows if r.error is None)

    @computed_field
    @property
    def error_count(self) -> int:
        return len(self.rows) - self.ok_count

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def ok_rows(self) -> List[TransferRow]:
        return [r for r in self.rows if r.error is None]


class OutcomeStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


class RowOutcome(BaseModel):
    """Result of attempting (or skipping) one batch row"""
    line: int
    to: str
    amount_raw: int
    status: OutcomeStatus
    detail: Optional[str] = None
    response: Optional[Any] = None


class BatchReport(BaseModel):
    """Outcome of submitting a whole batch, one entry per row"""
    outcomes: List[RowOutcome] = []

    @computed_field
    @property
    def ok(self) -> int:
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.OK)

    @computed_field
    @property
    def failed(self) -> int:
        # Skipped rows count as failures
        return len(self.outcomes) - self.ok


# ============================================================================
# Contract Read Schemas
# ============================================================================

class TokenInfo(BaseModel):
    name: str
    symbol: str
    decimals: int
    total_supply: int


class Listing(BaseModel):
    """A marketplace listing: NFT id, seller address and raw asking price"""
    nft_id: int
    seller: str
    price: int
