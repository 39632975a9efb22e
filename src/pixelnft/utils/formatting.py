"""
Utility functions for formatting amounts, grids and batch tables.
"""
from typing import List

from pixelnft.pixels import pixels_to_rows
from pixelnft.schemas import BatchResult


def format_raw_amount(raw: int, decimals: int) -> str:
    """
    Render a raw amount as a token amount with ``decimals`` places.

    Trailing fractional zeros are dropped, e.g. 1500 with 3 decimals -> "1.5".
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10 ** decimals)
    if decimals == 0 or frac == 0:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{str(frac).rjust(decimals, '0').rstrip('0')}"


def pixels_to_text_grid(pixels: bytes) -> str:
    """
    Convert a pixel buffer to 9 lines of 9 space-aligned indices.

    The output parses back to the same buffer (unless every index is
    1..31, where the grid reads as 1-based).
    """
    return "\n".join(" ".join(f"{v:>2}" for v in row) for row in pixels_to_rows(pixels))


def format_batch_table(batch: BatchResult) -> str:
    """Plain-text table of parsed batch rows plus a one-line summary."""
    lines: List[str] = [f"{'#':>5}  {'Address':<56}  {'Amount (raw)':>20}  Status"]
    for row in batch.rows:
        status = row.error.value if row.error else "OK"
        lines.append(f"{row.line:>5}  {row.to or '(n/a)':<56}  {row.amount_raw:>20}  {status}")
    lines.append(
        f"{len(batch.rows)} rows | {batch.ok_count} OK, {batch.error_count} errors | "
        f"Total (raw): {batch.total}"
    )
    return "\n".join(lines)
