import pytest
import requests

from pixelnft.config import TESTNET_PASSPHRASE, ClientConfig
from pixelnft.errors import ContractClientError
from pixelnft.rpc_client import RpcClient

RPC_URL = "https://soroban-testnet.example.org"


class FakeResponse:
    def __init__(self, body=None, status_code=200):
        self._body = body or {}
        self.status_code = status_code
        self.text = str(body)

    def json(self):
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


@pytest.fixture
def fake_post(monkeypatch):
    """Replace Session.post with a queue of canned responses."""
    sent = []
    replies = []

    def post(self, url, json=None, timeout=None):
        sent.append({"url": url, "json": json, "timeout": timeout})
        return replies.pop(0)

    monkeypatch.setattr(requests.Session, "post", post)
    return sent, replies


def test_get_health_posts_json_rpc_payload(fake_post):
    sent, replies = fake_post
    replies.append(FakeResponse({"jsonrpc": "2.0", "id": 1, "result": {"status": "healthy"}}))

    with RpcClient(RPC_URL, timeout=3) as rpc:
        assert rpc.get_health() == {"status": "healthy"}

    assert sent == [{
        "url": RPC_URL,
        "json": {"jsonrpc": "2.0", "id": 1, "method": "getHealth"},
        "timeout": 3,
    }]


def test_request_ids_increase(fake_post):
    sent, replies = fake_post
    replies.extend([FakeResponse({"result": {}}), FakeResponse({"result": {"sequence": 7}})])

    rpc = RpcClient(RPC_URL)
    rpc.get_health()
    assert rpc.get_latest_ledger() == {"sequence": 7}
    assert [s["json"]["id"] for s in sent] == [1, 2]
    assert sent[1]["json"]["method"] == "getLatestLedger"


def test_json_rpc_error_raises(fake_post):
    _, replies = fake_post
    replies.append(FakeResponse({"error": {"code": -32601, "message": "method not found"}}))

    with pytest.raises(ContractClientError, match="method not found"):
        RpcClient(RPC_URL).get_network()


def test_http_error_raises(fake_post):
    _, replies = fake_post
    replies.append(FakeResponse({}, status_code=503))

    with pytest.raises(requests.HTTPError):
        RpcClient(RPC_URL).get_health()


def test_assert_network(fake_post):
    _, replies = fake_post
    replies.append(FakeResponse({"result": {"passphrase": TESTNET_PASSPHRASE}}))
    replies.append(FakeResponse({"result": {"passphrase": "Public Global Stellar Network ; September 2015"}}))

    rpc = RpcClient.from_config(ClientConfig(rpc_url=RPC_URL, contract_id="C1"))
    rpc.assert_network(TESTNET_PASSPHRASE)
    with pytest.raises(ContractClientError, match="expected"):
        rpc.assert_network(TESTNET_PASSPHRASE)


def test_requires_url():
    with pytest.raises(ValueError):
        RpcClient("")


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("SOROBAN_RPC_URL", RPC_URL)
    monkeypatch.setenv("CONTRACT_ID", "CABC")
    monkeypatch.delenv("NETWORK_PASSPHRASE", raising=False)

    config = ClientConfig.from_env()
    assert config.rpc_url == RPC_URL
    assert config.contract_id == "CABC"
    assert config.network_passphrase == TESTNET_PASSPHRASE


def test_config_from_env_requires_contract(monkeypatch):
    monkeypatch.setenv("SOROBAN_RPC_URL", RPC_URL)
    monkeypatch.delenv("CONTRACT_ID", raising=False)

    with pytest.raises(ValueError, match="CONTRACT_ID not found in environment"):
        ClientConfig.from_env()
