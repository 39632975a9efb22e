import abc
from typing import Any, List, Optional, Sequence, Tuple


class ContractClient(abc.ABC):
    """
    Base class for talking to the NFT / token / marketplace contract.

    Implementations own transaction building, signing and submission for a
    single source account. Arguments arrive already validated by
    PixelNftDapp; implementations only encode them. Write methods return
    whatever the implementation reports for the submitted transaction.
    """

    # ---- Token (FT) ----

    @abc.abstractmethod
    def name(self) -> str:
        pass

    @abc.abstractmethod
    def symbol(self) -> str:
        pass

    @abc.abstractmethod
    def decimals(self) -> int:
        pass

    @abc.abstractmethod
    def total_supply(self) -> int:
        pass

    @abc.abstractmethod
    def balance_of(self, owner: str) -> int:
        pass

    @abc.abstractmethod
    def transfer(self, from_: str, to: str, amount: int) -> Any:
        pass

    # ---- NFT ----

    @abc.abstractmethod
    def palette_get(self) -> Sequence[int]:
        pass

    @abc.abstractmethod
    def palette_set(self, palette: List[int]) -> Any:
        pass

    @abc.abstractmethod
    def nft_value(self, nft_id: int) -> bytes:
        pass

    @abc.abstractmethod
    def nft_get(self, nft_id: int) -> Tuple[str, bytes]:
        """Return (owner, pixels)."""
        pass

    @abc.abstractmethod
    def nft_ids_of(self, owner: str) -> List[int]:
        pass

    @abc.abstractmethod
    def nft_total(self) -> int:
        pass

    @abc.abstractmethod
    def nft_find_by_value(self, pixels: bytes) -> Optional[int]:
        pass

    @abc.abstractmethod
    def nft_search_pos_color(self, pos: int, color: int) -> List[int]:
        pass

    @abc.abstractmethod
    def nft_transfer(self, from_: str, to: str, nft_id: int) -> Any:
        pass

    @abc.abstractmethod
    def mint_nft(self, to: str, pixels: bytes) -> Any:
        pass

    @abc.abstractmethod
    def nft_index_range(self, nft_id: int, start: int, end: int) -> Any:
        pass

    # ---- Marketplace ----

    @abc.abstractmethod
    def listing_fee_get(self) -> int:
        pass

    @abc.abstractmethod
    def listing_fee_set(self, fee: int) -> Any:
        pass

    @abc.abstractmethod
    def market_list_nft(self, seller: str, nft_id: int, price: int) -> Any:
        pass

    @abc.abstractmethod
    def market_cancel(self, seller: str, nft_id: int) -> Any:
        pass

    @abc.abstractmethod
    def market_buy(self, buyer: str, nft_id: int) -> Any:
        pass

    @abc.abstractmethod
    def market_get(self, nft_id: int) -> Optional[Tuple[str, int]]:
        """Return (seller, price) for a listed NFT, or None."""
        pass

    @abc.abstractmethod
    def market_list_ids(self) -> List[int]:
        pass
