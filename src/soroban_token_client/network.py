"""
Network configuration.

A NetworkConfig is selected by the caller and threaded explicitly through
every operation; nothing in the package keeps a process-wide client.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

from stellar_sdk import Network


@dataclass(frozen=True)
class NetworkConfig:
    """Endpoints and identity of one Stellar network."""

    name: str
    rpc_url: str
    horizon_url: str
    network_passphrase: str
    request_timeout: float = 30.0

    @classmethod
    def named(cls, name: str) -> NetworkConfig:
        """
        Look up a well-known network.

        Raises:
            KeyError: If the name is not one of NETWORKS
        """
        try:
            return NETWORKS[name.lower()]
        except KeyError:
            raise KeyError(f"Unknown network {name!r}; expected one of {sorted(NETWORKS)}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> NetworkConfig:
        """
        Build a config from environment variables.

        ``STELLAR_NETWORK`` picks the base network (default ``testnet``);
        ``SOROBAN_RPC_URL``, ``HORIZON_URL`` and ``NETWORK_PASSPHRASE``
        override individual fields.
        """
        env = os.environ if environ is None else environ
        base = cls.named(env.get("STELLAR_NETWORK", "testnet"))
        overrides = {}
        if env.get("SOROBAN_RPC_URL"):
            overrides["rpc_url"] = env["SOROBAN_RPC_URL"]
        if env.get("HORIZON_URL"):
            overrides["horizon_url"] = env["HORIZON_URL"]
        if env.get("NETWORK_PASSPHRASE"):
            overrides["network_passphrase"] = env["NETWORK_PASSPHRASE"]
        if env.get("SOROBAN_REQUEST_TIMEOUT"):
            overrides["request_timeout"] = float(env["SOROBAN_REQUEST_TIMEOUT"])
        return replace(base, **overrides) if overrides else base

    @property
    def is_mainnet(self) -> bool:
        return self.network_passphrase == Network.PUBLIC_NETWORK_PASSPHRASE


TESTNET = NetworkConfig(
    name="testnet",
    rpc_url="https://soroban-testnet.stellar.org",
    horizon_url="https://horizon-testnet.stellar.org",
    network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
)

MAINNET = NetworkConfig(
    name="mainnet",
    rpc_url="https://mainnet.stellar.org:443",
    horizon_url="https://horizon.stellar.org",
    network_passphrase=Network.PUBLIC_NETWORK_PASSPHRASE,
)

FUTURENET = NetworkConfig(
    name="futurenet",
    rpc_url="https://rpc-futurenet.stellar.org",
    horizon_url="https://horizon-futurenet.stellar.org",
    network_passphrase=Network.FUTURENET_NETWORK_PASSPHRASE,
)

LOCAL = NetworkConfig(
    name="local",
    rpc_url="http://localhost:8000/soroban/rpc",
    horizon_url="http://localhost:8000",
    network_passphrase=Network.STANDALONE_NETWORK_PASSPHRASE,
)

NETWORKS: Dict[str, NetworkConfig] = {
    "testnet": TESTNET,
    "mainnet": MAINNET,
    "futurenet": FUTURENET,
    "local": LOCAL,
}


__all__ = [
    "NetworkConfig",
    "TESTNET",
    "MAINNET",
    "FUTURENET",
    "LOCAL",
    "NETWORKS",
]
