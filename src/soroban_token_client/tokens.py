"""
SEP-41 token reads and admin writes.

Reads go through the probe-account simulation path and never need a
signer. Writes run the full prepare/sign/submit/poll path.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Optional, Union

from .codec.scval import (
    decode_address,
    decode_i128,
    decode_option_i128,
    decode_string,
    decode_u32,
    encode_address,
    encode_i128,
)
from .formatting import format_amount
from .models import UNAVAILABLE, SupplyBreakdown, TokenInfo, TransactionOutcome
from .network import NetworkConfig
from .rpc.ledger import LedgerClient, ledger_session
from .runtime.address import ContractId
from .signers.authority import SigningAuthority
from .tx.execute import invoke_contract
from .tx.simulate import simulate_call, simulate_optional


logger = logging.getLogger(__name__)


# =============================================================================
# Reads
# =============================================================================

async def fetch_token_info(
    contract_id: Union[str, ContractId],
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> TokenInfo:
    """
    Read token metadata.

    name, symbol and decimals are required; admin and total_supply are
    optional and come back as UNAVAILABLE when the contract does not
    expose them. Circulating supply is reported equal to total supply.

    Raises:
        SimulationError: A required read was rejected
        LedgerServiceError: Transport failure
    """
    contract = ContractId.parse(contract_id)
    async with ledger_session(network, ledger) as client:
        name, symbol, decimals, admin = await asyncio.gather(
            simulate_call(contract, "name", [], network, client),
            simulate_call(contract, "symbol", [], network, client),
            simulate_call(contract, "decimals", [], network, client),
            simulate_optional(contract, "admin", [], network, client),
        )
        supply = await simulate_optional(contract, "total_supply", [], network, client)

    token_decimals = decode_u32(decimals)
    total_supply = (
        format_amount(decode_i128(supply), token_decimals) if supply is not None else UNAVAILABLE
    )
    return TokenInfo(
        name=decode_string(name),
        symbol=decode_string(symbol),
        decimals=token_decimals,
        total_supply=total_supply,
        circulating_supply=total_supply,
        admin=decode_address(admin) if admin is not None else UNAVAILABLE,
        contract_id=contract,
    )


async def fetch_balance(
    contract_id: Union[str, ContractId],
    holder: str,
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> int:
    """Balance of ``holder`` in smallest units."""
    result = await simulate_call(
        contract_id, "balance", [encode_address(holder)], network, ledger
    )
    return decode_i128(result)


async def fetch_max_supply(
    contract_id: Union[str, ContractId],
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> Optional[int]:
    """Supply cap, or None when uncapped or not exposed by the contract."""
    result = await simulate_optional(contract_id, "max_supply", [], network, ledger)
    if result is None:
        return None
    return decode_option_i128(result)


async def fetch_supply_breakdown(
    token_contract_id: Union[str, ContractId],
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
    vesting_contract_id: Optional[Union[str, ContractId]] = None,
) -> SupplyBreakdown:
    """
    Split total supply into circulating, locked and burned.

    Locked and burned are reported as 0. ``vesting_contract_id`` is
    accepted so callers can pass it already, but vesting balances are not
    subtracted yet.

    Raises:
        SimulationError: The contract has no total_supply
        LedgerServiceError: Transport failure
    """
    total = decode_i128(
        await simulate_call(token_contract_id, "total_supply", [], network, ledger)
    )
    if vesting_contract_id is not None:
        logger.debug(f"Locked supply in {vesting_contract_id} is not counted")
    return SupplyBreakdown(circulating=total, total=total)


# =============================================================================
# Writes
# =============================================================================

async def mint(
    contract_id: Union[str, ContractId],
    admin: str,
    to: str,
    amount: int,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    """Mint ``amount`` smallest units to ``to``; ``admin`` signs."""
    args = [encode_address(to), encode_i128(amount)]
    return await invoke_contract(admin, contract_id, "mint", args, network, signer, **options)


async def burn(
    contract_id: Union[str, ContractId],
    admin: str,
    from_: str,
    amount: int,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    """Burn ``amount`` from ``from_``. Burning is admin-only, so ``admin`` sources and signs."""
    args = [encode_address(from_), encode_i128(amount)]
    return await invoke_contract(admin, contract_id, "burn", args, network, signer, **options)


async def set_admin(
    contract_id: Union[str, ContractId],
    admin: str,
    new_admin: str,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    outcome = await invoke_contract(
        admin, contract_id, "set_admin", [encode_address(new_admin)], network, signer, **options
    )
    logger.info(f"Admin of {contract_id} set to {new_admin}")
    return outcome


async def transfer(
    contract_id: Union[str, ContractId],
    from_: str,
    to: str,
    amount: int,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    args = [encode_address(from_), encode_address(to), encode_i128(amount)]
    return await invoke_contract(from_, contract_id, "transfer", args, network, signer, **options)


__all__ = [
    "fetch_token_info",
    "fetch_balance",
    "fetch_max_supply",
    "fetch_supply_breakdown",
    "mint",
    "burn",
    "set_admin",
    "transfer",
]
