"""
Invocation builder for Soroban contract calls.

Produces unsigned transaction envelopes carrying a single
InvokeHostFunction operation. Read-only calls are addressed to the
read-only probe account; state-changing calls to a real, loaded account.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence, Union

from stellar_sdk import Account, TransactionBuilder, TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr

from ..network import NetworkConfig
from ..runtime.address import ContractId
from ..runtime.errors import InvalidAddressError


logger = logging.getLogger(__name__)

# The all-zero ed25519 key. Never funded and never eligible for submission;
# it exists only so read-only simulations have a syntactically valid source.
READ_ONLY_PROBE_ACCOUNT = "GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF"
READ_ONLY_PROBE_SEQUENCE = 0

BASE_FEE = 100
TX_TIMEOUT = 30


def probe_account() -> Account:
    """A fresh read-only probe account at sequence zero."""
    return Account(READ_ONLY_PROBE_ACCOUNT, READ_ONLY_PROBE_SEQUENCE)


def is_probe_account(account: Account) -> bool:
    return account.account.account_id == READ_ONLY_PROBE_ACCOUNT


def build_invocation(
    contract_id: Union[str, ContractId],
    method: str,
    args: Sequence[stellar_xdr.SCVal],
    network: NetworkConfig,
    source: Optional[Account] = None,
    *,
    for_submission: bool = False,
    base_fee: int = BASE_FEE,
    timeout: int = TX_TIMEOUT,
) -> TransactionEnvelope:
    """
    Build an unsigned contract invocation envelope.

    Args:
        contract_id: Target contract
        method: Contract function name
        args: Already-encoded arguments
        network: Network whose passphrase the envelope is bound to
        source: Source account; the probe account when omitted
        for_submission: Refuse the probe account when True
        base_fee: Inclusion fee in stroops
        timeout: Validity window in seconds

    Returns:
        Unsigned TransactionEnvelope

    Raises:
        InvalidAddressError: If the contract id is malformed or the probe
            account is used for a submission
    """
    contract = ContractId.parse(contract_id)
    if source is None:
        source = probe_account()
    if for_submission and is_probe_account(source):
        raise InvalidAddressError(
            "The read-only probe account cannot source a submitted transaction"
        )

    envelope = (
        TransactionBuilder(
            source_account=source,
            network_passphrase=network.network_passphrase,
            base_fee=base_fee,
        )
        .append_invoke_contract_function_op(
            contract_id=str(contract),
            function_name=method,
            parameters=list(args),
        )
        .set_timeout(timeout)
        .build()
    )
    logger.debug(f"Built invocation {contract}.{method} with {len(args)} args from {source.account.account_id}")
    return envelope


__all__ = [
    "READ_ONLY_PROBE_ACCOUNT",
    "READ_ONLY_PROBE_SEQUENCE",
    "BASE_FEE",
    "TX_TIMEOUT",
    "probe_account",
    "is_probe_account",
    "build_invocation",
]
