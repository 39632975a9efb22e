from typing import Any, Dict, List, Optional, Tuple

import pytest

from pixelnft.batch import parse_batch_text
from pixelnft.contract import ContractClient
from pixelnft.dapp import PixelNftDapp
from pixelnft.errors import ErrorKind, PixelGridError
from pixelnft.palette import DEFAULT_PALETTE
from pixelnft.schemas import Listing, OutcomeStatus

ME = "GBKBACMKBLAQQOYB2CGJHS3ONDI73SXSJWNJ5MNVHOXEGKZSUXC3E47P"
BOB = "GB7VCPT6EEMK3ZKE2SGI5BA7YDGFUX6F7QU47W2TFIHPBGPG7GWRBSJJ"
CAROL = "GAMY3VPG5SFCXM26AA5AMLJKN64Y7GJUNVRUO5VFKHV6OZGVS76YVJBH"


class FakeContractClient(ContractClient):
    """In-memory stand-in that records every write call."""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []
        self.palette: Any = list(range(32))
        self.palette_error: Optional[Exception] = None
        self.fail_transfers_to: set = set()
        self.nfts: Dict[int, Tuple[str, bytes]] = {1: (ME, bytes(81))}
        self.listings: Dict[int, Tuple[str, int]] = {}
        self.broken_listing_ids: set = set()

    def _record(self, name, *args):
        self.calls.append((name, args))
        return {"method": name, "status": "SUCCESS"}

    def name(self):
        return "Pixel Token"

    def symbol(self):
        return "PXT"

    def decimals(self):
        return 3

    def total_supply(self):
        return 10 ** 12

    def balance_of(self, owner):
        return 5000 if owner == ME else 0

    def transfer(self, from_, to, amount):
        if to in self.fail_transfers_to:
            raise RuntimeError("INSUFFICIENT_BALANCE_WITH_FEE")
        return self._record("transfer", from_, to, amount)

    def palette_get(self):
        if self.palette_error:
            raise self.palette_error
        return self.palette

    def palette_set(self, palette):
        return self._record("palette_set", palette)

    def nft_value(self, nft_id):
        return self.nfts[nft_id][1]

    def nft_get(self, nft_id):
        return self.nfts[nft_id]

    def nft_ids_of(self, owner):
        return [i for i, (o, _) in self.nfts.items() if o == owner]

    def nft_total(self):
        return len(self.nfts)

    def nft_find_by_value(self, pixels):
        for i, (_, px) in self.nfts.items():
            if px == pixels:
                return i
        return None

    def nft_search_pos_color(self, pos, color):
        return [i for i, (_, px) in self.nfts.items() if px[pos] == color]

    def nft_transfer(self, from_, to, nft_id):
        return self._record("nft_transfer", from_, to, nft_id)

    def mint_nft(self, to, pixels):
        return self._record("mint_nft", to, pixels)

    def nft_index_range(self, nft_id, start, end):
        return self._record("nft_index_range", nft_id, start, end)

    def listing_fee_get(self):
        return 100

    def listing_fee_set(self, fee):
        return self._record("listing_fee_set", fee)

    def market_list_nft(self, seller, nft_id, price):
        return self._record("market_list_nft", seller, nft_id, price)

    def market_cancel(self, seller, nft_id):
        return self._record("market_cancel", seller, nft_id)

    def market_buy(self, buyer, nft_id):
        return self._record("market_buy", buyer, nft_id)

    def market_get(self, nft_id):
        if nft_id in self.broken_listing_ids:
            raise RuntimeError("simulation failed")
        return self.listings.get(nft_id)

    def market_list_ids(self):
        return sorted(set(self.listings) | self.broken_listing_ids)


@pytest.fixture
def client():
    return FakeContractClient()


@pytest.fixture
def dapp(client):
    return PixelNftDapp(client, ME)


def test_rejects_invalid_account(client):
    with pytest.raises(ValueError):
        PixelNftDapp(client, "not-an-address")


def test_token_info_and_balance(dapp):
    info = dapp.token_info()
    assert info.symbol == "PXT"
    assert info.decimals == 3
    assert dapp.balance() == 5000
    assert dapp.balance(BOB) == 0


def test_token_transfer_validates(dapp, client):
    dapp.token_transfer(f"  {BOB} ", 10)
    assert client.calls == [("transfer", (ME, BOB, 10))]
    with pytest.raises(ValueError):
        dapp.token_transfer("GBAD", 10)
    with pytest.raises(ValueError):
        dapp.token_transfer(BOB, 0)


def test_batch_transfer_skips_errors_and_continues_after_failure(dapp, client):
    client.fail_transfers_to.add(BOB)
    batch = parse_batch_text(f"{BOB} 1\n{CAROL} x\n{CAROL} 2.5", as_token=True, decimals=3)

    report = dapp.batch_transfer(batch)

    assert [o.status for o in report.outcomes] == [
        OutcomeStatus.FAILED,
        OutcomeStatus.SKIPPED,
        OutcomeStatus.OK,
    ]
    assert client.calls == [("transfer", (ME, CAROL, 2500))]
    assert report.ok == 1
    assert report.failed == 2


def test_read_palette_prefers_contract(dapp, client):
    assert dapp.read_palette() == list(range(32))


def test_read_palette_falls_back_on_error_or_bad_shape(dapp, client):
    client.palette = [1, 2, 3]
    assert dapp.read_palette() == list(DEFAULT_PALETTE)
    client.palette_error = RuntimeError("simulation failed")
    assert dapp.read_palette() == list(DEFAULT_PALETTE)


def test_set_palette_requires_32(dapp, client):
    with pytest.raises(ValueError):
        dapp.set_palette([0] * 31)
    dapp.set_palette(DEFAULT_PALETTE)
    assert client.calls == [("palette_set", (list(DEFAULT_PALETTE),))]


def test_mint_nft_flex_parses_one_based_grid(dapp, client):
    grid = "\n".join(" ".join(["2"] * 9) for _ in range(9))
    dapp.mint_nft_flex(grid)
    assert client.calls == [("mint_nft", (ME, bytes([1] * 81)))]


def test_mint_nft_flex_to_other_recipient_with_hex(dapp, client):
    dapp.mint_nft_flex("1f" * 81, to=BOB)
    assert client.calls == [("mint_nft", (BOB, bytes([31] * 81)))]


def test_mint_nft_flex_invalid_input_never_reaches_contract(dapp, client):
    with pytest.raises(PixelGridError) as excinfo:
        dapp.mint_nft_flex("00" * 80)
    assert excinfo.value.kind == ErrorKind.MALFORMED_HEX
    assert client.calls == []


def test_mint_nft_requires_canonical_bytes(dapp, client):
    with pytest.raises(PixelGridError):
        dapp.mint_nft(bytes([40] * 81))
    with pytest.raises(ValueError):
        dapp.mint_nft(bytes(81), to="nope")
    assert client.calls == []


def test_nft_reads(dapp):
    assert dapp.nft_value(1) == bytes(81)
    assert dapp.nft_owner_and_pixels(1) == (ME, bytes(81))
    assert dapp.my_nft_ids() == [1]
    assert dapp.nft_total() == 1
    assert dapp.find_nft_by_value(bytes(81)) == 1
    assert dapp.find_nft_by_value(bytes([3] * 81)) is None


def test_find_nft_by_value_validates(dapp):
    with pytest.raises(PixelGridError):
        dapp.find_nft_by_value(bytes(10))


def test_search_by_pos_color_ranges(dapp):
    assert dapp.search_by_pos_color(80, 0) == [1]
    with pytest.raises(ValueError):
        dapp.search_by_pos_color(81, 0)
    with pytest.raises(ValueError):
        dapp.search_by_pos_color(0, 32)
    with pytest.raises(ValueError):
        dapp.search_by_pos_color(-1, 0)


def test_nft_transfer_validates_recipient(dapp, client):
    with pytest.raises(ValueError):
        dapp.nft_transfer("g" * 56, 1)
    dapp.nft_transfer(BOB, 1)
    assert client.calls == [("nft_transfer", (ME, BOB, 1))]


def test_index_ranges(dapp, client):
    with pytest.raises(ValueError):
        dapp.nft_index_range(1, 10, 10)
    with pytest.raises(ValueError):
        dapp.nft_index_range(1, 0, 82)
    dapp.index_all_batches(7)
    assert client.calls == [
        ("nft_index_range", (7, 0, 27)),
        ("nft_index_range", (7, 27, 54)),
        ("nft_index_range", (7, 54, 81)),
    ]


def test_marketplace_calls(dapp, client):
    with pytest.raises(ValueError):
        dapp.market_list(1, 0)
    with pytest.raises(ValueError):
        dapp.set_listing_fee(-1)
    dapp.set_listing_fee(0)
    dapp.market_list(1, 2500)
    dapp.market_cancel(1)
    dapp.market_buy(2)
    assert dapp.listing_fee() == 100
    assert client.calls == [
        ("listing_fee_set", (0,)),
        ("market_list_nft", (ME, 1, 2500)),
        ("market_cancel", (ME, 1)),
        ("market_buy", (ME, 2)),
    ]


def test_market_get_and_fetch_listings(dapp, client):
    client.listings = {3: (BOB, 700), 5: (CAROL, 10 ** 20)}
    client.broken_listing_ids = {4}

    assert dapp.market_get(3) == Listing(nft_id=3, seller=BOB, price=700)
    assert dapp.market_get(99) is None
    assert dapp.market_list_ids() == [3, 4, 5]

    listings = dapp.fetch_listings()
    assert [listing.nft_id for listing in listings] == [3, 5]
    assert listings[1].price == 10 ** 20
