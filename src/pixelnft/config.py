"""
Environment-driven configuration.

Values come from the process environment, optionally populated from a
``.env`` file by ``load_dotenv()`` at CLI startup.
"""
import os
from dataclasses import dataclass

TESTNET_PASSPHRASE = "Test SDF Network ; September 2015"
DEFAULT_DECIMALS = 3


@dataclass(frozen=True)
class ClientConfig:
    rpc_url: str
    contract_id: str
    network_passphrase: str = TESTNET_PASSPHRASE

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Build the config from SOROBAN_RPC_URL, CONTRACT_ID and NETWORK_PASSPHRASE.

        Raises:
            ValueError: If a required variable is not set
        """
        rpc_url = os.getenv("SOROBAN_RPC_URL")
        if not rpc_url:
            raise ValueError("SOROBAN_RPC_URL not found in environment")
        contract_id = os.getenv("CONTRACT_ID")
        if not contract_id:
            raise ValueError("CONTRACT_ID not found in environment")
        return cls(
            rpc_url=rpc_url,
            contract_id=contract_id,
            network_passphrase=os.getenv("NETWORK_PASSPHRASE") or TESTNET_PASSPHRASE,
        )
