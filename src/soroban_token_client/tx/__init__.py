"""
Transaction infrastructure for Soroban contract invocations.

Read path: build_invocation -> simulate_call.
Write path: prepare_invocation -> sign_envelope -> TransactionPoller.
"""

from .builder import (
    READ_ONLY_PROBE_ACCOUNT,
    build_invocation,
    probe_account,
)
from .simulate import SimulationResult, simulate, simulate_call, simulate_optional
from .assemble import assemble_transaction, prepare_invocation
from .execute import (
    SubmissionState,
    Submission,
    TransactionPoller,
    invoke_contract,
)

__all__ = [
    "READ_ONLY_PROBE_ACCOUNT",
    "build_invocation",
    "probe_account",
    "SimulationResult",
    "simulate",
    "simulate_call",
    "simulate_optional",
    "assemble_transaction",
    "prepare_invocation",
    "SubmissionState",
    "Submission",
    "TransactionPoller",
    "invoke_contract",
]
