"""
Validated workflows on top of a ContractClient.

Every argument is checked client-side before the contract is called, so bad
pixels, addresses or ranges fail fast with a readable error instead of a
failed transaction.
"""
import logging
from typing import Any, List, Optional, Sequence, Tuple

from pixelnft.batch import is_valid_address, submit_batch
from pixelnft.contract import ContractClient
from pixelnft.palette import resolve_palette, validate_palette
from pixelnft.pixels import (NFT_COLORS, NFT_PIXELS, assert_pixels,
                             index_ranges, parse_pixels_or_raise)
from pixelnft.schemas import BatchReport, BatchResult, Listing, TokenInfo

logger = logging.getLogger(__name__)


def _require_address(address: str, label: str = "address") -> str:
    address = (address or "").strip()
    if not is_valid_address(address):
        raise ValueError(f"Invalid {label}: {address!r}")
    return address


class PixelNftDapp:
    """Client-side operations for one connected account"""

    def __init__(self, client: ContractClient, account: str):
        """
        Args:
            client: Contract client that signs as ``account``
            account: The connected wallet's public address
        """
        self.client = client
        self.account = _require_address(account, "account")

    # ------------------------------------------------------------------
    # Token
    # ------------------------------------------------------------------

    def token_info(self) -> TokenInfo:
        return TokenInfo(
            name=self.client.name(),
            symbol=self.client.symbol(),
            decimals=self.client.decimals(),
            total_supply=self.client.total_supply(),
        )

    def balance(self, owner: Optional[str] = None) -> int:
        return self.client.balance_of(_require_address(owner or self.account, "owner"))

    def token_transfer(self, to: str, amount: int) -> Any:
        to = _require_address(to, "recipient")
        if amount <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")
        return self.client.transfer(self.account, to, amount)

    def batch_transfer(self, batch: BatchResult) -> BatchReport:
        """Send every error-free row of a parsed batch, sequentially."""
        logger.info(
            f"Submitting batch: {batch.ok_count} transfers, {batch.error_count} skipped, "
            f"total {batch.total} (raw)"
        )
        return submit_batch(batch, lambda row: self.client.transfer(self.account, row.to, row.amount_raw))

    # ------------------------------------------------------------------
    # NFT
    # ------------------------------------------------------------------

    def read_palette(self) -> List[int]:
        """Contract palette, or the default one if the read fails or looks wrong."""
        try:
            palette = self.client.palette_get()
        except Exception as e:
            logger.warning(f"Failed to read palette from contract: {e}")
            palette = None
        return resolve_palette(palette)

    def set_palette(self, palette: Sequence[int]) -> Any:
        return self.client.palette_set(validate_palette(palette))

    def nft_value(self, nft_id: int) -> bytes:
        return bytes(self.client.nft_value(nft_id))

    def nft_owner_and_pixels(self, nft_id: int) -> Tuple[str, bytes]:
        owner, pixels = self.client.nft_get(nft_id)
        return owner, bytes(pixels)

    def my_nft_ids(self) -> List[int]:
        return list(self.client.nft_ids_of(self.account) or [])

    def nft_total(self) -> int:
        return self.client.nft_total()

    def find_nft_by_value(self, pixels: bytes) -> Optional[int]:
        assert_pixels(pixels)
        return self.client.nft_find_by_value(bytes(pixels))

    def search_by_pos_color(self, pos: int, color: int) -> List[int]:
        if not 0 <= pos < NFT_PIXELS:
            raise ValueError(f"Position must be 0..{NFT_PIXELS - 1}, got {pos}")
        if not 0 <= color < NFT_COLORS:
            raise ValueError(f"Color must be 0..{NFT_COLORS - 1}, got {color}")
        return list(self.client.nft_search_pos_color(pos, color) or [])

    def nft_transfer(self, to: str, nft_id: int) -> Any:
        return self.client.nft_transfer(self.account, _require_address(to, "recipient"), nft_id)

    def mint_nft(self, pixels: bytes, to: Optional[str] = None) -> Any:
        """Mint from an already-canonical 81-byte buffer."""
        assert_pixels(pixels)
        return self.client.mint_nft(_require_address(to or self.account, "recipient"), bytes(pixels))

    def mint_nft_flex(self, pixels_input, to: Optional[str] = None) -> Any:
        """Mint from any input the pixel parser accepts (hex, grid, list, bytes)."""
        return self.mint_nft(parse_pixels_or_raise(pixels_input), to)

    def nft_index_range(self, nft_id: int, start: int, end: int) -> Any:
        if start < 0 or start >= end or end > NFT_PIXELS:
            raise ValueError(f"Bad index range [{start}, {end})")
        return self.client.nft_index_range(nft_id, start, end)

    def index_all_batches(self, nft_id: int, batch: int = 27) -> List[Any]:
        return [self.nft_index_range(nft_id, start, end) for start, end in index_ranges(batch)]

    # ------------------------------------------------------------------
    # Marketplace
    # ------------------------------------------------------------------

    def listing_fee(self) -> int:
        return self.client.listing_fee_get()

    def set_listing_fee(self, fee: int) -> Any:
        if fee < 0:
            raise ValueError(f"Listing fee must be >= 0, got {fee}")
        return self.client.listing_fee_set(fee)

    def market_list(self, nft_id: int, price: int) -> Any:
        if price <= 0:
            raise ValueError(f"Price must be positive, got {price}")
        return self.client.market_list_nft(self.account, nft_id, price)

    def market_cancel(self, nft_id: int) -> Any:
        return self.client.market_cancel(self.account, nft_id)

    def market_buy(self, nft_id: int) -> Any:
        return self.client.market_buy(self.account, nft_id)

    def market_get(self, nft_id: int) -> Optional[Listing]:
        entry = self.client.market_get(nft_id)
        if not entry or len(entry) != 2:
            return None
        seller, price = entry
        return Listing(nft_id=nft_id, seller=seller, price=int(price))

    def market_list_ids(self) -> List[int]:
        return list(self.client.market_list_ids() or [])

    def fetch_listings(self) -> List[Listing]:
        """All current listings; ids whose details can't be read are left out."""
        listings = []
        for nft_id in self.market_list_ids():
            try:
                listing = self.market_get(nft_id)
            except Exception as e:
                logger.warning(f"Failed to load listing #{nft_id}: {e}")
                continue
            if listing:
                listings.append(listing)
        return listings
