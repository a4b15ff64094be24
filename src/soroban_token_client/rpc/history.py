"""
Horizon (historical-ledger query service) client.

Used for two things only: loading a real source account's sequence number
for the write path, and best-effort classic-asset holder enumeration.
"""

from __future__ import annotations
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import aiohttp
from stellar_sdk import Account, Asset, ServerAsync
from stellar_sdk.client.aiohttp_client import AiohttpClient
from stellar_sdk.exceptions import NotFoundError, SdkError

from ..network import NetworkConfig
from ..runtime.errors import ErrorCode, HolderLookupUnavailable, LedgerServiceError


logger = logging.getLogger(__name__)


class HistoryClient:
    """Historical query client bound to one Horizon endpoint."""

    def __init__(self, server: ServerAsync, endpoint: Optional[str] = None):
        self._server = server
        self._endpoint = endpoint or getattr(server, "horizon_url", "")

    @classmethod
    def for_network(cls, network: NetworkConfig) -> HistoryClient:
        client = AiohttpClient(request_timeout=network.request_timeout)
        return cls(ServerAsync(network.horizon_url, client=client), network.horizon_url)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def close(self) -> None:
        await self._server.close()

    async def __aenter__(self) -> HistoryClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def load_account(self, account_id: str) -> Account:
        """
        Load an account with its current sequence number.

        Raises:
            LedgerServiceError: If the account does not exist or Horizon fails
        """
        logger.debug(f"load_account {account_id} -> {self._endpoint}")
        try:
            return await self._server.load_account(account_id)
        except NotFoundError as e:
            raise LedgerServiceError(
                f"Account {account_id} not found",
                ErrorCode.INVALID_ADDRESS,
                details={"account": account_id},
                cause=e,
            ) from e
        except (SdkError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LedgerServiceError(
                f"Failed to load account {account_id}: {e}",
                details={"endpoint": self._endpoint},
                cause=e,
            ) from e

    async def accounts_for_asset(
        self,
        asset_code: str,
        asset_issuer: str,
        limit: int = 10,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Fetch one page of accounts holding a classic asset.

        Raises:
            HolderLookupUnavailable: On any query failure
        """
        logger.debug(f"accounts_for_asset {asset_code}:{asset_issuer} limit={limit}")
        try:
            asset = Asset(asset_code, asset_issuer)
            response = await (
                self._server.accounts()
                .for_asset(asset)
                .limit(limit)
                .order(desc=descending)
                .call()
            )
        except (SdkError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise HolderLookupUnavailable(
                f"Holder query failed for {asset_code}: {e}",
                details={"assetCode": asset_code, "assetIssuer": asset_issuer},
                cause=e,
            ) from e

        try:
            return list(response["_embedded"]["records"])
        except (KeyError, TypeError) as e:
            raise HolderLookupUnavailable(
                "Unexpected holder query response shape",
                details={"assetCode": asset_code},
                cause=e,
            ) from e


@asynccontextmanager
async def history_session(
    network: NetworkConfig, history: Optional[HistoryClient] = None
) -> AsyncIterator[HistoryClient]:
    """Yield the given client, or open (and later close) one for the network."""
    if history is not None:
        yield history
        return
    async with HistoryClient.for_network(network) as owned:
        yield owned


__all__ = ["HistoryClient", "history_session"]
