"""
Dry-run simulation of contract invocations.

Read path: build against the read-only probe account, simulate, decode.
No retries here; callers decide whether a failed read is worth repeating.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from stellar_sdk import TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.soroban_rpc import SimulateTransactionResponse

from ..codec.scval import scval_from_xdr
from ..network import NetworkConfig
from ..rpc.ledger import LedgerClient, ledger_session
from ..runtime.address import ContractId
from ..runtime.errors import SimulationError, SimulationIncomplete
from .builder import build_invocation


logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """What a successful dry run tells us."""
    return_value: stellar_xdr.SCVal
    transaction_data: Optional[str] = None
    min_resource_fee: int = 0
    auth: List[str] = field(default_factory=list)
    latest_ledger: Optional[int] = None
    restore_required: bool = False
    result_count: int = 1
    response: Any = field(default=None, repr=False)


def interpret_simulation(
    response: SimulateTransactionResponse, method: Optional[str] = None
) -> SimulationResult:
    """
    Turn a raw simulation response into a SimulationResult.

    Raises:
        SimulationError: The service reported an error
        SimulationIncomplete: Success without a result payload
    """
    label = method or "invocation"
    if response.error:
        raise SimulationError(
            f"Soroban simulation error ({label}): {response.error}",
            method,
            details={"error": response.error, "latestLedger": response.latest_ledger},
        )

    results = response.results or []
    if not results or not results[0].xdr:
        raise SimulationIncomplete(
            f"Soroban simulation returned no result for {label}",
            method,
            details={"latestLedger": response.latest_ledger},
        )

    restore_required = response.restore_preamble is not None
    if restore_required:
        logger.warning(f"Simulation of {label} touches archived state; restore required")

    return SimulationResult(
        return_value=scval_from_xdr(results[0].xdr),
        transaction_data=response.transaction_data,
        min_resource_fee=int(response.min_resource_fee or 0),
        auth=list(results[0].auth or []),
        latest_ledger=response.latest_ledger,
        restore_required=restore_required,
        result_count=len(results),
        response=response,
    )


async def simulate(
    envelope: TransactionEnvelope,
    ledger: LedgerClient,
    method: Optional[str] = None,
) -> SimulationResult:
    """Simulate an already-built envelope."""
    response = await ledger.simulate(envelope)
    return interpret_simulation(response, method)


async def simulate_call(
    contract_id: Union[str, ContractId],
    method: str,
    args: Sequence[stellar_xdr.SCVal],
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> stellar_xdr.SCVal:
    """
    Read-only contract call through the probe account.

    Returns:
        The contract's return value

    Raises:
        SimulationError: The contract or service rejected the call
        SimulationIncomplete: Success without a result payload
        LedgerServiceError: Transport failure
    """
    envelope = build_invocation(contract_id, method, args, network)
    async with ledger_session(network, ledger) as client:
        result = await simulate(envelope, client, method)
    return result.return_value


async def simulate_optional(
    contract_id: Union[str, ContractId],
    method: str,
    args: Sequence[stellar_xdr.SCVal],
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
) -> Optional[stellar_xdr.SCVal]:
    """
    Like simulate_call, but None when the contract does not support the call.

    Only simulation rejections mean "feature absent"; transport errors
    still propagate so a flaky network is not mistaken for a missing method.
    """
    try:
        return await simulate_call(contract_id, method, args, network, ledger)
    except SimulationError as e:
        logger.debug(f"{contract_id}.{method} unavailable: {e.message}")
        return None


__all__ = [
    "SimulationResult",
    "interpret_simulation",
    "simulate",
    "simulate_call",
    "simulate_optional",
]
