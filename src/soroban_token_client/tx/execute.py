"""
Transaction submission and finality polling.

State machine:

    SUBMITTED -> PENDING -> SUCCESS | FAILED | TIMED_OUT | CANCELLED
    SUBMITTED -> FAILED                  (immediate rejection)

Polling is bounded (``max_attempts`` polls, ``interval`` seconds apart)
and cancellable between intervals through an ``asyncio.Event``. A timeout
is not a failure: the transaction may still land and the caller can
re-check with :meth:`TransactionPoller.check`.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from stellar_sdk import TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.soroban_rpc import (
    GetTransactionResponse,
    GetTransactionStatus,
    SendTransactionStatus,
)

from ..codec.scval import decode
from ..models import TransactionOutcome
from ..network import NetworkConfig
from ..rpc.history import HistoryClient
from ..rpc.ledger import LedgerClient, ledger_session
from ..runtime.address import ContractId
from ..runtime.errors import (
    DecodeError,
    LedgerServiceError,
    PollCancelled,
    PollTimeout,
    SubmissionError,
    TransactionFailed,
)
from ..signers.authority import SigningAuthority, sign_envelope
from .assemble import prepare_invocation


logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0
MAX_POLL_ATTEMPTS = 30


class SubmissionState(str, Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({
    SubmissionState.SUCCESS,
    SubmissionState.FAILED,
    SubmissionState.TIMED_OUT,
    SubmissionState.CANCELLED,
})


@dataclass
class Submission:
    """Tracks one signed transaction through the state machine."""
    tx_hash: Optional[str] = None
    state: SubmissionState = SubmissionState.SUBMITTED
    attempts: int = 0
    transitions: List[SubmissionState] = field(
        default_factory=lambda: [SubmissionState.SUBMITTED]
    )

    def advance(self, state: SubmissionState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Submission {self.tx_hash} already {self.state.value}")
        self.state = state
        self.transitions.append(state)
        if state in TERMINAL_STATES:
            logger.info(f"Transaction {self.tx_hash} {state.value} after {self.attempts} polls")
        else:
            logger.debug(f"Transaction {self.tx_hash} -> {state.value}")

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES


def extract_return_value(result_meta_xdr: Optional[str]) -> Any:
    """
    Decode the contract return value from transaction meta, if present.

    Returns None for void, for meta versions without Soroban data, and for
    return types the codec does not support.
    """
    if not result_meta_xdr:
        return None
    try:
        meta = stellar_xdr.TransactionMeta.from_xdr(result_meta_xdr)
    except Exception as e:
        logger.debug(f"Unreadable transaction meta: {e}")
        return None

    body = getattr(meta, f"v{meta.v}", None)
    soroban_meta = getattr(body, "soroban_meta", None)
    return_value = getattr(soroban_meta, "return_value", None)
    if return_value is None:
        return None
    try:
        return decode(return_value)
    except DecodeError as e:
        logger.debug(f"Return value not decodable: {e.message}")
        return None


class TransactionPoller:
    """
    Submits signed envelopes and polls them to a terminal status.

    Example:
        ```python
        poller = TransactionPoller(ledger)
        outcome = await poller.submit_and_wait(signed_xdr, TESTNET, cancel=stop)
        ```
    """

    def __init__(
        self,
        ledger: LedgerClient,
        interval: float = POLL_INTERVAL,
        max_attempts: int = MAX_POLL_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.ledger = ledger
        self.interval = interval
        self.max_attempts = max_attempts

    async def _pause(self, cancel: Optional[asyncio.Event]) -> bool:
        """Sleep one interval. True if cancellation was requested meanwhile."""
        if cancel is None:
            await asyncio.sleep(self.interval)
            return False
        if cancel.is_set():
            return True
        try:
            await asyncio.wait_for(cancel.wait(), timeout=self.interval)
        except asyncio.TimeoutError:
            return False
        return True

    async def submit(
        self,
        signed_xdr: Union[str, TransactionEnvelope],
        network: NetworkConfig,
        submission: Optional[Submission] = None,
    ) -> Submission:
        """
        Send a signed envelope.

        Raises:
            SubmissionError: If the service rejects it immediately or
                cannot be reached
        """
        if isinstance(signed_xdr, TransactionEnvelope):
            envelope = signed_xdr
        else:
            try:
                envelope = TransactionEnvelope.from_xdr(signed_xdr, network.network_passphrase)
            except Exception as e:
                raise SubmissionError("Signed envelope is not valid XDR", cause=e) from e

        submission = submission or Submission()
        submission.tx_hash = envelope.hash_hex()

        try:
            response = await self.ledger.send(envelope)
        except LedgerServiceError as e:
            submission.advance(SubmissionState.FAILED)
            raise SubmissionError(
                f"Transaction {submission.tx_hash} could not be sent: {e.message}",
                tx_hash=submission.tx_hash,
                details=dict(e.details or {}),
                cause=e,
            ) from e
        if response.hash:
            submission.tx_hash = response.hash

        if response.status in (SendTransactionStatus.ERROR, SendTransactionStatus.TRY_AGAIN_LATER):
            submission.advance(SubmissionState.FAILED)
            raise SubmissionError(
                f"Transaction {submission.tx_hash} rejected: {response.status.value}",
                tx_hash=submission.tx_hash,
                result_xdr=response.error_result_xdr,
                details={"status": response.status.value},
            )

        submission.advance(SubmissionState.PENDING)
        return submission

    async def check(self, tx_hash: str) -> GetTransactionResponse:
        """Single status lookup, for a manual re-check after a timeout."""
        return await self.ledger.get_transaction(tx_hash)

    async def wait(
        self,
        submission: Submission,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        """
        Poll a pending submission until it is terminal.

        A failed status lookup uses up one attempt and polling goes on; the
        transaction is already on its way and may still land.

        Raises:
            TransactionFailed: Terminal FAILED status
            PollTimeout: Attempt budget exhausted
            PollCancelled: ``cancel`` was set
        """
        tx_hash = submission.tx_hash
        while submission.attempts < self.max_attempts:
            if await self._pause(cancel):
                submission.advance(SubmissionState.CANCELLED)
                raise PollCancelled(tx_hash, submission.attempts)

            submission.attempts += 1
            try:
                response = await self.ledger.get_transaction(tx_hash)
            except LedgerServiceError as e:
                logger.warning(f"Status lookup {submission.attempts} for {tx_hash} failed: {e.message}")
                continue

            if response.status == GetTransactionStatus.NOT_FOUND:
                continue

            if response.status == GetTransactionStatus.SUCCESS:
                submission.advance(SubmissionState.SUCCESS)
                return TransactionOutcome(
                    tx_hash=tx_hash,
                    state=SubmissionState.SUCCESS.value,
                    attempts=submission.attempts,
                    ledger=response.ledger,
                    return_value=extract_return_value(response.result_meta_xdr),
                    result_xdr=response.result_xdr,
                )

            submission.advance(SubmissionState.FAILED)
            raise TransactionFailed(
                tx_hash,
                result_xdr=response.result_xdr,
                details={"status": str(getattr(response.status, "value", response.status)),
                         "ledger": response.ledger},
            )

        submission.advance(SubmissionState.TIMED_OUT)
        raise PollTimeout(tx_hash, submission.attempts)

    async def submit_and_wait(
        self,
        signed_xdr: Union[str, TransactionEnvelope],
        network: NetworkConfig,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        """Submit, then poll to a terminal status."""
        submission = await self.submit(signed_xdr, network)
        return await self.wait(submission, cancel)


async def invoke_contract(
    source_account_id: str,
    contract_id: Union[str, ContractId],
    method: str,
    args: Sequence[stellar_xdr.SCVal],
    network: NetworkConfig,
    signer: SigningAuthority,
    ledger: Optional[LedgerClient] = None,
    history: Optional[HistoryClient] = None,
    *,
    poller: Optional[TransactionPoller] = None,
    cancel: Optional[asyncio.Event] = None,
) -> TransactionOutcome:
    """
    Full write path: prepare, sign, submit, poll.

    Steps run strictly in order. Do not run two of these concurrently for
    the same source account: the second would be built on a stale sequence.

    Raises:
        SimulationError, AssemblyError: Preparation failed
        SigningRejected: The authority refused
        SubmissionError, TransactionFailed: The network refused
        PollTimeout, PollCancelled: No terminal status observed
    """
    async with ledger_session(network, ledger) as client:
        prepared = await prepare_invocation(
            source_account_id, contract_id, method, args, network, client, history
        )
        signed = await sign_envelope(signer, prepared, network)
        active = poller or TransactionPoller(client)
        return await active.submit_and_wait(signed, network, cancel)


__all__ = [
    "POLL_INTERVAL",
    "MAX_POLL_ATTEMPTS",
    "SubmissionState",
    "Submission",
    "TransactionPoller",
    "extract_return_value",
    "invoke_contract",
]
