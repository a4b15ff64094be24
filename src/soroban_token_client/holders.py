"""
Best-effort holder enumeration for tokens that are also classic assets.

Soroban token contracts have no holder index. When a token wraps a classic
asset, Horizon can list accounts holding the asset, which is the closest
thing available. The result is always a HolderLookup; nothing here raises
for a service failure.
"""

from __future__ import annotations
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from .formatting import format_amount
from .models import HolderLookup, HolderLookupStatus, TokenHolder
from .network import NetworkConfig
from .rpc.history import HistoryClient, history_session
from .runtime.errors import HolderLookupUnavailable


logger = logging.getLogger(__name__)

# Classic assets always carry seven decimal places.
CLASSIC_DECIMALS = 7


def _raw_balance(record: Dict[str, Any], asset_code: str, asset_issuer: str) -> int:
    for entry in record.get("balances", []):
        if entry.get("asset_code") == asset_code and entry.get("asset_issuer") == asset_issuer:
            try:
                return int(Decimal(entry.get("balance", "0")) * 10 ** CLASSIC_DECIMALS)
            except InvalidOperation:
                logger.debug(f"Unparseable balance for {record.get('account_id')}: {entry}")
                return 0
    return 0


def _share(raw: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return (raw * 10000 // total) / 100


def build_holders(
    records: List[Dict[str, Any]], asset_code: str, asset_issuer: str
) -> List[TokenHolder]:
    """
    Turn Horizon account records into holders, largest first.

    Shares are relative to the sum over these records only.
    """
    balances = [
        (
            record.get("account_id") or record.get("id", ""),
            _raw_balance(record, asset_code, asset_issuer),
        )
        for record in records
    ]
    total = sum(raw for _, raw in balances)
    holders = [
        TokenHolder(
            address=address,
            raw_balance=raw,
            balance=format_amount(raw, CLASSIC_DECIMALS),
            share_percent=_share(raw, total),
        )
        for address, raw in balances
    ]
    holders.sort(key=lambda h: h.raw_balance, reverse=True)
    return holders


async def fetch_top_holders(
    network: NetworkConfig,
    asset_code: Optional[str] = None,
    asset_issuer: Optional[str] = None,
    limit: int = 10,
    history: Optional[HistoryClient] = None,
) -> HolderLookup:
    """
    Fetch up to ``limit`` holders of a classic asset.

    Returns:
        HolderLookup with status NOT_APPLICABLE when no asset is given,
        UNAVAILABLE when the query service fails, OK otherwise
    """
    if not asset_code or not asset_issuer:
        return HolderLookup(
            status=HolderLookupStatus.NOT_APPLICABLE,
            reason="Token has no classic asset counterpart",
        )

    try:
        async with history_session(network, history) as horizon:
            records = await horizon.accounts_for_asset(asset_code, asset_issuer, limit=limit)
    except HolderLookupUnavailable as e:
        logger.warning(f"Holder lookup for {asset_code} unavailable: {e.message}")
        return HolderLookup(status=HolderLookupStatus.UNAVAILABLE, reason=e.message)

    return HolderLookup(
        status=HolderLookupStatus.OK,
        holders=build_holders(records, asset_code, asset_issuer),
        truncated=len(records) >= limit,
    )


__all__ = [
    "CLASSIC_DECIMALS",
    "build_holders",
    "fetch_top_holders",
]
