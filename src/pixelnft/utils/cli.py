import logging
import os
import sys
from pathlib import Path
from typing import Optional

from pixelnft.batch import parse_batch_text
from pixelnft.config import DEFAULT_DECIMALS, ClientConfig
from pixelnft.pixels import parse_pixels_or_raise, pixels_to_hex
from pixelnft.rpc_client import RpcClient
from pixelnft.utils.formatting import (format_batch_table, format_raw_amount,
                                       pixels_to_text_grid)
from pixelnft.utils.image import (display_image_in_terminal, image_to_base64,
                                  pixels_to_image)

logger = logging.getLogger(__name__)

# ============================================================================
# CLI Arguments
# ============================================================================

def _bool_env(env_var: str, default: str = "false") -> bool:
    """Helper to parse boolean environment variable."""
    return os.getenv(env_var, default).lower() in ("true", "1", "yes")

def _int_env(env_var: str, default: int) -> int:
    """Helper to parse integer environment variable."""
    val = os.getenv(env_var)
    return int(val) if val else default

def _str_env(env_var: str, default: Optional[str] = None) -> Optional[str]:
    """Helper to parse string environment variable."""
    return os.getenv(env_var, default)

def configure_args(parser):
    parser.add_argument(
        "--log-level",
        type=str,
        default=_str_env("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO). Can be set via LOG_LEVEL env var."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=_bool_env("VERBOSE"),
        help="Enable verbose output (DEBUG level for app, WARNING for libraries). Can be set via VERBOSE env var (true/1/yes)."
    )


def configure_pixels_args(parser):
    parser.add_argument(
        "source",
        type=str,
        help="File holding the pixel grid (hex-162, CSV or 9×9 grid), or '-' for stdin"
    )
    parser.add_argument(
        "--png",
        type=str,
        metavar="PATH",
        help="Write a rendered PNG of the grid to PATH"
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=28,
        help="Upscale factor for --png (default: 28)"
    )
    parser.add_argument(
        "--base64",
        action="store_true",
        help="Print the rendered PNG as base-64 (no data-URL prefix)"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the rendered grid in the terminal"
    )


def configure_batch_args(parser):
    parser.add_argument(
        "source",
        type=str,
        help="File with one '<address> <amount>' per line, or '-' for stdin"
    )
    parser.add_argument(
        "--as-token",
        action="store_true",
        help="Amounts are whole tokens (may contain a decimal point) rather than raw units"
    )
    parser.add_argument(
        "--decimals",
        type=int,
        default=_int_env("DECIMALS", DEFAULT_DECIMALS),
        help=f"Token decimals used with --as-token (default: {DEFAULT_DECIMALS}). Can be set via DECIMALS env var."
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any row has an error"
    )


# ============================================================================
# CLI Configurers
# ============================================================================

def configure_logging(args):
    if args.verbose:
        # Verbose mode: Show DEBUG for our code, WARNING+ for libraries
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        for lib_logger in ('urllib3', 'requests', 'PIL'):
            logging.getLogger(lib_logger).setLevel(logging.WARNING)

        logging.getLogger('pixelnft').setLevel(logging.DEBUG)
        logging.getLogger('__main__').setLevel(logging.DEBUG)

        logger.info("Verbose mode enabled")
    else:
        logging.basicConfig(
            level=getattr(logging, args.log_level.upper()),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


def read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


# ============================================================================
# CLI Handlers
# ============================================================================

def handle_pixels(args) -> int:
    pixels = parse_pixels_or_raise(read_source(args.source))
    print(pixels_to_hex(pixels))
    print(pixels_to_text_grid(pixels))

    if args.png or args.show or args.base64:
        img = pixels_to_image(pixels, scale=args.scale)
        if args.base64:
            print(image_to_base64(img))
        if args.png:
            img.save(args.png, format="PNG")
            logger.info(f"Wrote {args.png}")
        if args.show:
            display_image_in_terminal(img)
    return 0


def handle_batch(args) -> int:
    batch = parse_batch_text(read_source(args.source), as_token=args.as_token, decimals=args.decimals)
    if not batch.rows:
        logger.warning("No rows found.")
        return 0

    print(format_batch_table(batch))
    logger.info(
        f"Parsed {len(batch.rows)} rows ({batch.ok_count} OK, {batch.error_count} errors), "
        f"total {batch.total} raw ({format_raw_amount(batch.total, args.decimals)} tokens)"
    )
    if args.strict and batch.has_errors:
        return 1
    return 0


def handle_network(args) -> int:
    config = ClientConfig.from_env()
    with RpcClient.from_config(config) as rpc:
        health = rpc.get_health()
        logger.info(f"RPC status: {health.get('status')} (latest ledger {health.get('latestLedger')})")
        rpc.assert_network(config.network_passphrase)
        logger.info(f"✓ Network passphrase matches: {config.network_passphrase}")
    return 0
