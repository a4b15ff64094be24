"""
Transaction assembly for the write path.

Takes a real source account's invocation through simulation and merges the
simulated resource footprint, resource fee and authorization entries into
the envelope. The result is simulation-validated but unsigned: nothing has
touched the chain yet.
"""

from __future__ import annotations
import copy
import logging
from typing import Optional, Sequence, Union

from stellar_sdk import InvokeHostFunction, TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr

from ..network import NetworkConfig
from ..rpc.history import HistoryClient, history_session
from ..rpc.ledger import LedgerClient, ledger_session
from ..runtime.address import ContractId
from ..runtime.errors import AssemblyError
from .builder import BASE_FEE, build_invocation
from .simulate import SimulationResult, simulate


logger = logging.getLogger(__name__)


async def assemble_transaction(
    envelope: TransactionEnvelope,
    simulation: SimulationResult,
    ledger: LedgerClient,
) -> TransactionEnvelope:
    """
    Merge a simulation's resource estimate into a copy of the envelope.

    The merge itself is the SDK's ``prepare_transaction``; the checks here
    reject simulations it would assemble into an envelope that cannot land.

    Raises:
        AssemblyError: If archived state must be restored first, the
            simulation carries no usable footprint, or it does not return
            exactly one result for the invocation
    """
    if simulation.restore_required:
        raise AssemblyError(
            "Simulation requires restoring archived ledger entries first",
            details={"latestLedger": simulation.latest_ledger},
        )
    if not simulation.transaction_data:
        raise AssemblyError("Simulation returned no transaction data")
    if simulation.result_count != 1:
        raise AssemblyError(
            f"Expected exactly one simulation result, got {simulation.result_count}",
            details={"resultCount": simulation.result_count},
        )
    if simulation.response is None:
        raise AssemblyError("Simulation result carries no service response")

    try:
        stellar_xdr.SorobanTransactionData.from_xdr(simulation.transaction_data)
    except Exception as e:
        raise AssemblyError("Simulation footprint is not valid XDR", cause=e) from e

    assembled = await ledger.prepare(copy.deepcopy(envelope), simulation.response)
    assembled.signatures = []

    op = assembled.transaction.operations[0]
    logger.debug(
        f"Assembled transaction: fee={assembled.transaction.fee} "
        f"resource_fee={simulation.min_resource_fee} "
        f"auth_entries={len(op.auth) if isinstance(op, InvokeHostFunction) else 0}"
    )
    return assembled


async def prepare_invocation(
    source_account_id: str,
    contract_id: Union[str, ContractId],
    method: str,
    args: Sequence[stellar_xdr.SCVal],
    network: NetworkConfig,
    ledger: Optional[LedgerClient] = None,
    history: Optional[HistoryClient] = None,
    base_fee: int = BASE_FEE,
) -> str:
    """
    Build, simulate and assemble a state-changing invocation.

    Args:
        source_account_id: Real account that will sign and pay
        contract_id: Target contract
        method: Contract function name
        args: Already-encoded arguments
        network: Network configuration
        ledger: Optional open ledger client
        history: Optional open Horizon client
        base_fee: Inclusion fee in stroops

    Returns:
        Base64 XDR of the unsigned, fee-assembled envelope

    Raises:
        LedgerServiceError: Source account could not be loaded
        SimulationError: The dry run was rejected
        AssemblyError: The dry run carried no usable footprint or needs a
            restore first
    """
    async with history_session(network, history) as horizon:
        source = await horizon.load_account(source_account_id)

    envelope = build_invocation(
        contract_id, method, args, network, source,
        for_submission=True, base_fee=base_fee,
    )

    async with ledger_session(network, ledger) as client:
        simulation = await simulate(envelope, client, method)
        assembled = await assemble_transaction(envelope, simulation, client)

    logger.info(f"Prepared {contract_id}.{method} for {source_account_id}")
    return assembled.to_xdr()


__all__ = [
    "assemble_transaction",
    "prepare_invocation",
]
