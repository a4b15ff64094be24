"""
In-memory stand-ins for the ledger service, Horizon and a wallet.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

from stellar_sdk import Account, Keypair, SorobanServerAsync, TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr

from soroban_token_client.rpc.ledger import LedgerClient
from soroban_token_client.signers.authority import SigningAuthority

from .factories import mk_get_response, mk_send_response, mk_simulation


def invoked_method(envelope: TransactionEnvelope) -> str:
    """Contract function name carried by an invocation envelope."""
    op = envelope.transaction.operations[0]
    return op.host_function.invoke_contract.function_name.sc_symbol.decode("utf-8")


class FakeLedger:
    """
    Ledger service that answers simulations by contract method name.

    ``responses`` maps a method name to an SCVal (successful result), a
    prepared simulation response, or an exception to raise. Unknown methods
    simulate as a contract error. Assembly runs through a real LedgerClient
    whose server never goes over the network.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None, latest: int = 1000):
        self.responses = dict(responses or {})
        self.latest = latest
        self.simulated: List[str] = []
        self.envelopes: List[TransactionEnvelope] = []
        self.send = AsyncMock(return_value=mk_send_response())
        self.get_transaction = AsyncMock(return_value=mk_get_response())
        self.close = AsyncMock()
        self._assembler = LedgerClient(
            SorobanServerAsync("https://rpc.invalid", client=AsyncMock()), "https://rpc.invalid"
        )

    async def simulate(self, envelope: TransactionEnvelope):
        method = invoked_method(envelope)
        self.simulated.append(method)
        self.envelopes.append(envelope)
        response = self.responses.get(method)
        if response is None:
            return mk_simulation(error=f"HostError: Error(WasmVm, MissingValue) calling {method}")
        if isinstance(response, Exception):
            raise response
        if isinstance(response, stellar_xdr.SCVal):
            return mk_simulation(response)
        return response

    async def prepare(self, envelope: TransactionEnvelope, simulation: Any) -> TransactionEnvelope:
        return await self._assembler.prepare(envelope, simulation)

    async def latest_ledger(self) -> int:
        return self.latest


class FakeHistory:
    """Horizon stand-in with a single known account."""

    def __init__(self, account_id: str, sequence: int = 100):
        self.load_account = AsyncMock(return_value=Account(account_id, sequence))
        self.accounts_for_asset = AsyncMock(return_value=[])
        self.close = AsyncMock()


class KeypairAuthority(SigningAuthority):
    """Signs locally with a keypair, the way a wallet would remotely."""

    def __init__(self, keypair: Keypair):
        self.keypair = keypair
        self.requests: List[str] = []

    async def sign(self, envelope_xdr: str, network_passphrase: str) -> str:
        self.requests.append(network_passphrase)
        envelope = TransactionEnvelope.from_xdr(envelope_xdr, network_passphrase)
        envelope.sign(self.keypair)
        return envelope.to_xdr()
