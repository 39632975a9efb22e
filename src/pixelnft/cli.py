"""
CLI for the pixel NFT client.

Usage:
    # Normalize a pixel grid and print it as hex + 9×9 grid
    python -m pixelnft.cli pixels grid.txt --png out.png

    # Analyze a batch transfer file in token units
    python -m pixelnft.cli batch payouts.csv --as-token --decimals 3

    # Check the configured RPC node
    python -m pixelnft.cli network
"""
import argparse
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from pixelnft.utils.cli import (configure_args, configure_batch_args,
                                configure_logging, configure_pixels_args,
                                handle_batch, handle_network, handle_pixels)
from pixelnft.utils.errors import build_error_payload, format_user_message

load_dotenv()
logger = logging.getLogger(__name__)


def main_cli(cli_args: Optional[list] = None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Pixel NFT client tools: pixel grids, batch transfers, RPC checks"
    )
    configure_args(parser)

    subparsers = parser.add_subparsers(dest="command", required=True)

    pixels_parser = subparsers.add_parser("pixels", help="Parse and render a 9×9 pixel grid")
    configure_pixels_args(pixels_parser)
    pixels_parser.set_defaults(handler=handle_pixels)

    batch_parser = subparsers.add_parser("batch", help="Analyze batch transfer text")
    configure_batch_args(batch_parser)
    batch_parser.set_defaults(handler=handle_batch)

    network_parser = subparsers.add_parser("network", help="Check RPC health and network passphrase")
    network_parser.set_defaults(handler=handle_network)

    args = parser.parse_args(cli_args)

    configure_logging(args)

    try:
        return args.handler(args)
    except Exception as e:
        payload = build_error_payload(e, context={"command": args.command})
        logger.debug(payload["traceback"])
        print(format_user_message(payload), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main_cli())
