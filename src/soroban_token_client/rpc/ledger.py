"""
Soroban RPC (ledger service) client.

Thin async wrapper over ``stellar_sdk.SorobanServerAsync`` that translates
transport failures into LedgerServiceError so callers only ever see the
package's error taxonomy.

Example:
    ```python
    async with LedgerClient.for_network(TESTNET) as ledger:
        sequence = await ledger.latest_ledger()
        sim = await ledger.simulate(envelope)
    ```
"""

from __future__ import annotations
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, TypeVar

import aiohttp
from stellar_sdk import SorobanServerAsync, TransactionEnvelope
from stellar_sdk.client.aiohttp_client import AiohttpClient
from stellar_sdk.exceptions import SdkError, SorobanRpcErrorResponse
from stellar_sdk.soroban_rpc import (
    GetTransactionResponse,
    SendTransactionResponse,
    SimulateTransactionResponse,
)

from ..network import NetworkConfig
from ..runtime.errors import AssemblyError, ErrorCode, LedgerServiceError, error_from_rpc


logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerClient:
    """
    Ledger service client bound to one Soroban RPC endpoint.

    Provides typed methods for:
    - Transaction simulation (dry run)
    - Transaction assembly from a simulation
    - Transaction submission
    - Transaction status lookup
    - Latest ledger sequence
    """

    def __init__(self, server: SorobanServerAsync, endpoint: Optional[str] = None):
        """
        Initialize the ledger client.

        Args:
            server: Soroban RPC server to delegate to
            endpoint: Endpoint URL, used in error details and logs
        """
        self._server = server
        self._endpoint = endpoint or getattr(server, "server_url", "")

    @classmethod
    def for_network(cls, network: NetworkConfig) -> LedgerClient:
        """Create a client with its own aiohttp session for the given network."""
        client = AiohttpClient(request_timeout=network.request_timeout)
        return cls(SorobanServerAsync(network.rpc_url, client=client), network.rpc_url)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def close(self) -> None:
        await self._server.close()

    async def __aenter__(self) -> LedgerClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Low-level call
    # =========================================================================

    async def _call(self, method: str, call: Callable[[], Awaitable[T]]) -> T:
        """
        Run one RPC call, translating SDK and transport errors.

        Raises:
            LedgerServiceError: If the call fails at the transport or RPC level
        """
        logger.debug(f"{method} -> {self._endpoint}")
        try:
            return await call()
        except SorobanRpcErrorResponse as e:
            raise error_from_rpc(
                {"code": e.code, "message": e.message, "data": e.data}, method
            ) from e
        except asyncio.TimeoutError as e:
            raise LedgerServiceError(
                f"{method} timed out", ErrorCode.TIMEOUT,
                details={"endpoint": self._endpoint}, cause=e,
            ) from e
        except (SdkError, aiohttp.ClientError) as e:
            raise LedgerServiceError(
                f"{method} failed: {e}",
                details={"endpoint": self._endpoint}, cause=e,
            ) from e

    # =========================================================================
    # Ledger service operations
    # =========================================================================

    async def simulate(self, envelope: TransactionEnvelope) -> SimulateTransactionResponse:
        """Dry-run an unsigned envelope."""
        return await self._call(
            "simulateTransaction", lambda: self._server.simulate_transaction(envelope)
        )

    async def send(self, envelope: TransactionEnvelope) -> SendTransactionResponse:
        """Submit a signed envelope. Returns immediately with hash and status."""
        return await self._call(
            "sendTransaction", lambda: self._server.send_transaction(envelope)
        )

    async def prepare(
        self, envelope: TransactionEnvelope, simulation: SimulateTransactionResponse
    ) -> TransactionEnvelope:
        """
        Assemble an envelope from an already-obtained simulation response.

        Delegates to the server's ``prepare_transaction``, which makes no
        request when the simulation is supplied.

        Raises:
            AssemblyError: If the SDK refuses to assemble the envelope
        """
        try:
            return await self._server.prepare_transaction(envelope, simulation)
        except (SdkError, ValueError) as e:
            raise AssemblyError(f"Transaction assembly failed: {e}", cause=e) from e

    async def get_transaction(self, tx_hash: str) -> GetTransactionResponse:
        return await self._call(
            "getTransaction", lambda: self._server.get_transaction(tx_hash)
        )

    async def latest_ledger(self) -> int:
        """Current ledger sequence number."""
        response: Any = await self._call(
            "getLatestLedger", lambda: self._server.get_latest_ledger()
        )
        return int(response.sequence)


@asynccontextmanager
async def ledger_session(
    network: NetworkConfig, ledger: Optional[LedgerClient] = None
) -> AsyncIterator[LedgerClient]:
    """Yield the given client, or open (and later close) one for the network."""
    if ledger is not None:
        yield ledger
        return
    async with LedgerClient.for_network(network) as owned:
        yield owned


async def fetch_current_ledger(
    network: NetworkConfig, ledger: Optional[LedgerClient] = None
) -> int:
    """Latest ledger sequence, the time axis for vesting math."""
    async with ledger_session(network, ledger) as client:
        return await client.latest_ledger()


__all__ = ["LedgerClient", "ledger_session", "fetch_current_ledger"]
