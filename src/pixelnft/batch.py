"""
Batch token transfer parsing and submission.

Input is one transfer per line: ``<address> <amount>``, separated by tabs,
commas or spaces. Each line becomes a TransferRow; a bad line only marks its
own row, it never stops the rest of the batch from parsing.
"""
import logging
import re
from typing import Any, Callable, List, Optional

from pixelnft.schemas import (BatchReport, BatchResult, OutcomeStatus,
                              RowError, RowOutcome, TransferRow)

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^G[A-Z0-9]{55}$")
_LINE_RE = re.compile(r"\r?\n")
_FIELD_SEP_RE = re.compile(r"[\t, ]+")
_DIGITS_RE = re.compile(r"^[0-9]+$")


def is_valid_address(address: str) -> bool:
    """Shape check only: ``G`` plus 55 uppercase letters or digits. No checksum."""
    return bool(ADDRESS_RE.match(address or ""))


def _parse_amount(amount: str, as_token: bool, decimals: int) -> Optional[int]:
    """Return the raw amount, or None when the text isn't a valid number."""
    mul = 10 ** decimals if as_token else 1
    if as_token and "." in amount:
        int_part, _, frac_part = amount.partition(".")
        int_part = int_part or "0"
        if not _DIGITS_RE.match(int_part) or not _DIGITS_RE.match(frac_part or "0"):
            return None
        frac_padded = (frac_part + "0" * decimals)[:decimals]
        return int(int_part) * mul + int(frac_padded or "0")
    if not _DIGITS_RE.match(amount):
        return None
    return int(amount) * mul


def parse_batch_text(text: str, as_token: bool = False, decimals: int = 0) -> BatchResult:
    """
    Parse multi-line transfer instructions.

    Args:
        text: One ``address amount`` pair per line; blank lines are skipped
        as_token: Amounts are whole tokens (scaled by 10^decimals, may hold a
            decimal point) instead of raw units
        decimals: Token decimals, used only when as_token is set

    Returns:
        BatchResult with one row per non-blank line and the raw total of
        the error-free rows
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    rows: List[TransferRow] = []
    total = 0

    for i, line in enumerate(_LINE_RE.split(text or "")):
        raw = line.strip()
        if not raw:
            continue
        line_no = i + 1

        parts = [p for p in _FIELD_SEP_RE.split(raw) if p]
        if len(parts) < 2:
            rows.append(TransferRow(line=line_no, to="", amount_raw=0, original=raw,
                                    error=RowError.MISSING_AMOUNT))
            continue

        to = parts[0].strip()
        amount_raw = _parse_amount(parts[1].replace("_", "").strip(), as_token, decimals)
        if amount_raw is None:
            rows.append(TransferRow(line=line_no, to=to, amount_raw=0, original=raw,
                                    error=RowError.INVALID_AMOUNT))
            continue

        if not is_valid_address(to):
            rows.append(TransferRow(line=line_no, to=to, amount_raw=amount_raw, original=raw,
                                    error=RowError.INVALID_ADDRESS))
            continue

        if amount_raw <= 0:
            rows.append(TransferRow(line=line_no, to=to, amount_raw=amount_raw, original=raw,
                                    error=RowError.NON_POSITIVE_AMOUNT))
            continue

        rows.append(TransferRow(line=line_no, to=to, amount_raw=amount_raw, original=raw))
        total += amount_raw

    result = BatchResult(rows=tuple(rows), total=total)
    logger.debug(
        f"Parsed {len(result.rows)} rows ({result.ok_count} OK, "
        f"{result.error_count} errors), total raw {result.total}"
    )
    return result


def submit_batch(
    batch: BatchResult,
    transfer: Callable[[TransferRow], Any],
) -> BatchReport:
    """
    Submit every error-free row, one at a time, in original order.

    Rows carrying a parse error are skipped and reported as failures. A
    failing transfer is recorded and the loop moves on to the next row.

    Args:
        batch: Parsed batch
        transfer: Performs one transfer and returns its response; it must
            finish before the next row starts

    Returns:
        BatchReport with one outcome per row
    """
    outcomes: List[RowOutcome] = []

    for row in batch.rows:
        if row.error is not None:
            logger.info(f"SKIP line {row.line}: {row.error.value}")
            outcomes.append(RowOutcome(line=row.line, to=row.to, amount_raw=row.amount_raw,
                                       status=OutcomeStatus.SKIPPED, detail=row.error.value))
            continue
        try:
            response = transfer(row)
        except Exception as e:
            logger.warning(f"FAIL line {row.line}: {row.to} <- {row.amount_raw} (raw) | {e}")
            outcomes.append(RowOutcome(line=row.line, to=row.to, amount_raw=row.amount_raw,
                                       status=OutcomeStatus.FAILED, detail=str(e) or type(e).__name__))
            continue
        logger.info(f"OK line {row.line}: {row.to} <- {row.amount_raw} (raw)")
        outcomes.append(RowOutcome(line=row.line, to=row.to, amount_raw=row.amount_raw,
                                   status=OutcomeStatus.OK, response=response))

    report = BatchReport(outcomes=outcomes)
    logger.info(f"Batch finished: {report.ok} succeeded, {report.failed} failed")
    return report
