
from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import HTTPError, Timeout

from pixelnft.errors import ContractClientError, ErrorKind, PixelGridError

_PIXEL_FIXES = {
    ErrorKind.LENGTH_MISMATCH: [
        "Provide exactly 81 values (9 rows of 9).",
        "Check for missing or extra values on each row.",
    ],
    ErrorKind.MALFORMED_TOKEN: [
        "Use whole numbers only, separated by spaces, tabs or commas.",
    ],
    ErrorKind.OUT_OF_RANGE: [
        "Use palette indices 0..31 (or 1..32 for the whole grid).",
    ],
    ErrorKind.MALFORMED_HEX: [
        "Hex input must be exactly 162 characters (0-9, a-f), two per pixel.",
    ],
}


def _classify_exception(exc: Exception) -> Tuple[str, str, str, List[str]]:
    message = str(exc) or exc.__class__.__name__
    message_lower = message.lower()

    if isinstance(exc, PixelGridError):
        return (
            "InvalidPixels",
            "Pixel grid is invalid.",
            message,
            _PIXEL_FIXES.get(exc.kind, []),
        )

    if isinstance(exc, FileNotFoundError):
        return (
            "MissingFile",
            "Required file not found.",
            "A file or path referenced by the command could not be located.",
            [
                "Verify the path exists and is readable.",
                "Check for typos in file names or arguments.",
            ],
        )

    if isinstance(exc, (Timeout, TimeoutError)):
        return (
            "Timeout",
            "Operation timed out.",
            "The RPC server did not answer within the expected time.",
            ["Retry the command.", "Check your network connection or RPC provider status."],
        )

    if isinstance(exc, (RequestsConnectionError, ConnectionError)):
        return (
            "NetworkError",
            "Network connection failed.",
            "The client could not reach the RPC server.",
            [
                "Check SOROBAN_RPC_URL and network access.",
                "Retry after confirming the server is reachable.",
            ],
        )

    if isinstance(exc, HTTPError):
        return (
            "HttpError",
            "RPC server returned an HTTP error.",
            message,
            ["Verify SOROBAN_RPC_URL points at a Soroban RPC endpoint."],
        )

    if isinstance(exc, ContractClientError):
        return (
            "ContractError",
            "RPC or contract call failed.",
            message,
            ["Check NETWORK_PASSPHRASE and CONTRACT_ID match the deployed contract."],
        )

    if "not found in environment" in message_lower:
        return (
            "MissingConfig",
            "Required configuration is missing.",
            message,
            ["Set the variable in your environment or `.env` file."],
        )

    if isinstance(exc, ValueError):
        return (
            "InvalidInput",
            "Invalid input or configuration.",
            message,
            ["Double-check the command arguments and input file."],
        )

    return (
        "RuntimeError",
        "Unexpected runtime error.",
        "An unexpected error occurred while running the command.",
        ["Review the stack trace for details.", "Retry with `--verbose` for more logs."],
    )


def build_error_payload(
    exc: Exception,
    *,
    context: Optional[Dict[str, Any]] = None,
    trace: Optional[str] = None,
) -> Dict[str, Any]:
    error_type, summary, explanation, suggested_fixes = _classify_exception(exc)
    payload = {
        "error_type": error_type,
        "exception_type": exc.__class__.__name__,
        "message": str(exc),
        "summary": summary,
        "explanation": explanation,
        "suggested_fixes": suggested_fixes,
        "context": context or {},
        "traceback": trace or traceback.format_exc(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return payload


def format_user_message(payload: Dict[str, Any]) -> str:
    lines = [
        f"Error: {payload.get('summary')}",
        payload.get("explanation", ""),
    ]
    fixes = payload.get("suggested_fixes") or []
    if fixes:
        lines.append("Suggested fixes:")
        lines.extend([f"- {fix}" for fix in fixes])
    return "\n".join(line for line in lines if line)
