"""
Vesting schedules: the cliff + linear unlock calculator and the contract
calls around it.

Ledger sequence numbers are the time axis. The calculator mirrors the
vesting contract: nothing before the cliff, everything at or after the end,
linear in between with multiply-before-divide floor division.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Optional

from .codec.scval import (
    decode_address,
    decode_bool,
    decode_i128,
    decode_map,
    decode_u32,
    encode_address,
    encode_i128,
    encode_u32,
    get_struct_field,
)
from .models import TransactionOutcome, VestingProgress, VestingScheduleInfo, VestingStatus
from .network import NetworkConfig
from .rpc.ledger import LedgerClient, fetch_current_ledger, ledger_session
from .signers.authority import SigningAuthority
from .tx.execute import invoke_contract
from .tx.simulate import simulate_call


logger = logging.getLogger(__name__)


# =============================================================================
# Calculator
# =============================================================================

def vested_amount(total: int, cliff_ledger: int, end_ledger: int, current_ledger: int) -> int:
    """
    Amount vested at ``current_ledger``.

    ``cliff_ledger <= end_ledger`` is assumed, not checked. When they are
    equal the schedule is a step: 0 before, ``total`` from then on.
    """
    if current_ledger < cliff_ledger:
        return 0
    if current_ledger >= end_ledger:
        return total
    return total * (current_ledger - cliff_ledger) // (end_ledger - cliff_ledger)


def _percent(amount: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return (amount * 10000 // total) / 100


def vested_percent(vested: int, total: int) -> float:
    """Vested share of total, two-decimal precision, 0 for an empty schedule."""
    return _percent(vested, total)


def released_percent(released: int, total: int) -> float:
    return _percent(released, total)


def timeline_position(cliff_ledger: int, end_ledger: int, current_ledger: int) -> float:
    """Cursor position on a cliff-to-end timeline, clamped to [0, 100]."""
    if current_ledger >= end_ledger:
        return 100.0
    span = end_ledger - cliff_ledger
    if current_ledger <= cliff_ledger or span <= 0:
        return 0.0
    position = (current_ledger - cliff_ledger) / span * 100
    return min(max(position, 0.0), 100.0)


def vesting_status(schedule: VestingScheduleInfo, current_ledger: int) -> VestingStatus:
    if schedule.revoked:
        return VestingStatus.REVOKED
    if current_ledger < schedule.cliff_ledger:
        return VestingStatus.CLIFF_PENDING
    if current_ledger >= schedule.end_ledger:
        return VestingStatus.FULLY_VESTED
    return VestingStatus.VESTING


def vesting_progress(schedule: VestingScheduleInfo, current_ledger: int) -> VestingProgress:
    """Bundle every derived figure for one schedule at one ledger."""
    vested = vested_amount(
        schedule.total_amount, schedule.cliff_ledger, schedule.end_ledger, current_ledger
    )
    return VestingProgress(
        schedule=schedule,
        current_ledger=current_ledger,
        vested=vested,
        vested_percent=vested_percent(vested, schedule.total_amount),
        released_percent=released_percent(schedule.released, schedule.total_amount),
        timeline_position=timeline_position(
            schedule.cliff_ledger, schedule.end_ledger, current_ledger
        ),
        status=vesting_status(schedule, current_ledger),
    )


# =============================================================================
# Contract reads
# =============================================================================

async def fetch_vesting_schedule(
    vesting_contract_id: str,
    recipient: str,
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> VestingScheduleInfo:
    """
    Read a recipient's schedule via ``get_schedule``.

    Always a fresh read; a revoke or release makes any earlier snapshot stale.

    Raises:
        SimulationError: No schedule for this recipient, or contract error
        DecodeError: The struct did not have the expected shape
    """
    result = await simulate_call(
        vesting_contract_id, "get_schedule", [encode_address(recipient)], network, ledger
    )
    fields = decode_map(result)
    return VestingScheduleInfo(
        recipient=decode_address(get_struct_field(fields, "recipient")),
        total_amount=decode_i128(get_struct_field(fields, "total_amount")),
        cliff_ledger=decode_u32(get_struct_field(fields, "cliff_ledger")),
        end_ledger=decode_u32(get_struct_field(fields, "end_ledger")),
        released=decode_i128(get_struct_field(fields, "released")),
        revoked=decode_bool(get_struct_field(fields, "revoked")),
    )


async def fetch_vested_amount(
    vesting_contract_id: str,
    recipient: str,
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> int:
    """The contract's own view of the vested amount."""
    result = await simulate_call(
        vesting_contract_id, "vested_amount", [encode_address(recipient)], network, ledger
    )
    return decode_i128(result)


async def fetch_released_amount(
    vesting_contract_id: str,
    recipient: str,
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> int:
    result = await simulate_call(
        vesting_contract_id, "released_amount", [encode_address(recipient)], network, ledger
    )
    return decode_i128(result)


async def fetch_vesting_progress(
    vesting_contract_id: str,
    recipient: str,
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> VestingProgress:
    """Fetch the schedule and the current ledger concurrently and combine them."""
    async with ledger_session(network, ledger) as client:
        schedule, current = await asyncio.gather(
            fetch_vesting_schedule(vesting_contract_id, recipient, network, client),
            fetch_current_ledger(network, client),
        )
    return vesting_progress(schedule, current)


# =============================================================================
# Contract writes
# =============================================================================

async def create_schedule(
    vesting_contract_id: str,
    admin: str,
    recipient: str,
    total_amount: int,
    cliff_ledger: int,
    end_ledger: int,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    """
    Create a schedule; ``admin`` signs and must have funded the contract.

    The contract rejects ``end_ledger <= cliff_ledger`` and non-positive
    amounts; those surface as SimulationError before anything is signed.
    """
    args = [
        encode_address(recipient),
        encode_i128(total_amount),
        encode_u32(cliff_ledger),
        encode_u32(end_ledger),
    ]
    return await invoke_contract(
        admin, vesting_contract_id, "create_schedule", args, network, signer, **options
    )


async def release(
    vesting_contract_id: str,
    recipient: str,
    source_account_id: str,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    """Release vested tokens to ``recipient``. Anyone may submit this."""
    return await invoke_contract(
        source_account_id, vesting_contract_id, "release",
        [encode_address(recipient)], network, signer, **options
    )


async def revoke(
    vesting_contract_id: str,
    recipient: str,
    admin: str,
    network: NetworkConfig,
    signer: SigningAuthority,
    **options: Any,
) -> TransactionOutcome:
    """Revoke a schedule. Previously fetched snapshots must be re-fetched."""
    outcome = await invoke_contract(
        admin, vesting_contract_id, "revoke",
        [encode_address(recipient)], network, signer, **options
    )
    logger.info(f"Schedule for {recipient} on {vesting_contract_id} revoked")
    return outcome


__all__ = [
    "vested_amount",
    "vested_percent",
    "released_percent",
    "timeline_position",
    "vesting_status",
    "vesting_progress",
    "fetch_vesting_schedule",
    "fetch_vested_amount",
    "fetch_released_amount",
    "fetch_vesting_progress",
    "create_schedule",
    "release",
    "revoke",
]
