"""
Soroban RPC client for read-only node queries.

Based on https://developers.stellar.org/docs/data/apis/rpc/api-reference/methods
Only the methods that need no transaction envelope are covered here; contract
calls go through a ContractClient implementation.
"""
import itertools
import logging
from typing import Any, Dict, Optional

from requests import Session

from pixelnft.config import ClientConfig
from pixelnft.errors import ContractClientError

logger = logging.getLogger(__name__)


class RpcClient:
    """Client for the JSON-RPC endpoint of a Soroban RPC server"""

    def __init__(self, rpc_url: str, timeout: float = 10.0):
        """
        Initialize the RPC client.

        Args:
            rpc_url: Soroban RPC endpoint URL
            timeout: Per-request timeout in seconds
        """
        if not rpc_url:
            raise ValueError("rpc_url is required")
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._ids = itertools.count(1)
        self._session = Session()
        self._session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_config(cls, config: ClientConfig) -> "RpcClient":
        return cls(config.rpc_url)

    def _call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        payload: Dict[str, Any] = {"jsonrpc": "2.0", "id": next(self._ids), "method": method}
        if params:
            payload["params"] = params
        response = self._session.post(self.rpc_url, json=payload, timeout=self.timeout)
        if response.status_code != 200:
            logger.error(f"RPC {method} failed: {response.text}")
            response.raise_for_status()
        body = response.json()
        if "error" in body:
            error = body["error"] or {}
            logger.error(f"RPC {method} returned error: {error}")
            raise ContractClientError(
                f"RPC {method} error {error.get('code')}: {error.get('message')}"
            )
        return body.get("result")

    def get_health(self) -> Dict[str, Any]:
        """
        Check node health.

        Example response:
            {"status": "healthy", "latestLedger": 51583040, ...}
        """
        return self._call("getHealth")

    def get_network(self) -> Dict[str, Any]:
        """
        Get the network the node is connected to.

        Example response:
            {"passphrase": "Test SDF Network ; September 2015", "protocolVersion": 22, ...}
        """
        return self._call("getNetwork")

    def get_latest_ledger(self) -> Dict[str, Any]:
        return self._call("getLatestLedger")

    def assert_network(self, expected_passphrase: str) -> None:
        """
        Make sure the node is on the network the app is configured for.

        Raises:
            ContractClientError: If the passphrases differ
        """
        passphrase = (self.get_network() or {}).get("passphrase")
        if passphrase != expected_passphrase:
            raise ContractClientError(
                f"RPC node is on network '{passphrase}', expected '{expected_passphrase}'"
            )

    def close(self):
        """Close the session"""
        if hasattr(self, "_session"):
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
