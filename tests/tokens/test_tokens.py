"""
Tests for token reads and admin writes.
"""

import pytest
from stellar_sdk.soroban_rpc import GetTransactionStatus

from helpers import mk_get_response, mk_simulation, mk_soroban_data
from soroban_token_client.codec.scval import (
    encode_address,
    encode_i128,
    encode_string,
    encode_symbol,
    encode_u32,
    encode_void,
)
from soroban_token_client.models import UNAVAILABLE
from soroban_token_client.runtime.errors import LedgerServiceError, SimulationError
from soroban_token_client.tokens import (
    burn,
    fetch_balance,
    fetch_max_supply,
    fetch_supply_breakdown,
    fetch_token_info,
    mint,
    set_admin,
    transfer,
)
from soroban_token_client.tx.execute import TransactionPoller


@pytest.fixture
def token_ledger(ledger, keypair):
    ledger.responses.update({
        "name": encode_string("Test Token"),
        "symbol": encode_symbol("TT"),
        "decimals": encode_u32(7),
        "admin": encode_address(keypair.public_key),
        "total_supply": encode_i128(10_000_000_000_000),
    })
    return ledger


class TestTokenInfo:

    @pytest.mark.asyncio
    async def test_full_metadata(self, token_ledger, token_id, network, keypair):
        info = await fetch_token_info(token_id, network, token_ledger)

        assert info.name == "Test Token"
        assert info.symbol == "TT"
        assert info.decimals == 7
        assert info.total_supply == "1,000,000"
        assert info.circulating_supply == "1,000,000"
        assert info.admin == keypair.public_key
        assert str(info.contract_id) == token_id
        assert info.has_total_supply

    @pytest.mark.asyncio
    async def test_small_supply(self, token_ledger, token_id, network):
        token_ledger.responses["total_supply"] = encode_i128(10_000_000_0)
        info = await fetch_token_info(token_id, network, token_ledger)
        assert info.total_supply == "10"

    @pytest.mark.asyncio
    async def test_optional_fields_unavailable(self, token_ledger, token_id, network):
        del token_ledger.responses["admin"]
        del token_ledger.responses["total_supply"]

        info = await fetch_token_info(token_id, network, token_ledger)

        assert info.admin == UNAVAILABLE
        assert info.total_supply == UNAVAILABLE
        assert info.circulating_supply == UNAVAILABLE
        assert not info.has_total_supply

    @pytest.mark.asyncio
    async def test_required_field_missing(self, token_ledger, token_id, network):
        del token_ledger.responses["decimals"]
        with pytest.raises(SimulationError):
            await fetch_token_info(token_id, network, token_ledger)

    @pytest.mark.asyncio
    async def test_transport_failure_not_masked(self, token_ledger, token_id, network):
        token_ledger.responses["admin"] = LedgerServiceError("connection reset")
        with pytest.raises(LedgerServiceError):
            await fetch_token_info(token_id, network, token_ledger)

    @pytest.mark.asyncio
    async def test_serialized_with_aliases(self, token_ledger, token_id, network):
        info = await fetch_token_info(token_id, network, token_ledger)
        data = info.model_dump(by_alias=True)
        assert data["totalSupply"] == "1,000,000"
        assert data["contractId"] == token_id


class TestSupply:

    @pytest.mark.asyncio
    async def test_balance(self, ledger, token_id, network, recipient):
        ledger.responses["balance"] = encode_i128(15_000_000)
        assert await fetch_balance(token_id, recipient, network, ledger) == 15_000_000

    @pytest.mark.asyncio
    async def test_max_supply(self, ledger, token_id, network):
        ledger.responses["max_supply"] = encode_i128(21_000_000)
        assert await fetch_max_supply(token_id, network, ledger) == 21_000_000

    @pytest.mark.asyncio
    async def test_max_supply_uncapped(self, ledger, token_id, network):
        ledger.responses["max_supply"] = encode_void()
        assert await fetch_max_supply(token_id, network, ledger) is None

    @pytest.mark.asyncio
    async def test_max_supply_not_exposed(self, ledger, token_id, network):
        assert await fetch_max_supply(token_id, network, ledger) is None

    @pytest.mark.asyncio
    async def test_breakdown(self, ledger, token_id, vesting_id, network):
        ledger.responses["total_supply"] = encode_i128(5_000)
        breakdown = await fetch_supply_breakdown(token_id, network, ledger, vesting_id)
        assert breakdown.total == 5_000
        assert breakdown.circulating == 5_000
        assert breakdown.locked == 0
        assert breakdown.burned == 0

    @pytest.mark.asyncio
    async def test_breakdown_without_total_supply(self, ledger, token_id, network):
        with pytest.raises(SimulationError):
            await fetch_supply_breakdown(token_id, network, ledger)
        assert ledger.simulated == ["total_supply"]

    @pytest.mark.asyncio
    async def test_breakdown_real_zero_supply(self, ledger, token_id, network):
        ledger.responses["total_supply"] = encode_i128(0)
        breakdown = await fetch_supply_breakdown(token_id, network, ledger)
        assert breakdown.total == 0


class TestAdminWrites:

    @pytest.fixture
    def ready(self, ledger):
        def _ready(method):
            ledger.responses[method] = mk_simulation(
                encode_void(), transaction_data=mk_soroban_data(), min_resource_fee=50
            )
            ledger.get_transaction.return_value = mk_get_response(GetTransactionStatus.SUCCESS, ledger=3)
        return _ready

    def _args(self, ledger):
        return ledger.envelopes[-1].transaction.operations[0].host_function.invoke_contract.args

    @pytest.mark.asyncio
    async def test_mint(self, ready, ledger, history, signer, keypair, token_id, network, recipient):
        ready("mint")
        outcome = await mint(
            token_id, keypair.public_key, recipient, 10_000_000, network, signer,
            ledger=ledger, history=history, poller=TransactionPoller(ledger, interval=0),
        )
        assert outcome.state == "success"
        assert list(self._args(ledger)) == [encode_address(recipient), encode_i128(10_000_000)]

    @pytest.mark.asyncio
    async def test_burn_sourced_from_admin(self, ready, ledger, history, signer, keypair, token_id, network, recipient):
        ready("burn")
        await burn(
            token_id, keypair.public_key, recipient, 5, network, signer,
            ledger=ledger, history=history, poller=TransactionPoller(ledger, interval=0),
        )
        history.load_account.assert_awaited_once_with(keypair.public_key)
        assert ledger.envelopes[-1].transaction.source.account_id == keypair.public_key
        assert list(self._args(ledger)) == [encode_address(recipient), encode_i128(5)]

    @pytest.mark.asyncio
    async def test_set_admin(self, ready, ledger, history, signer, keypair, token_id, network, recipient):
        ready("set_admin")
        await set_admin(
            token_id, keypair.public_key, recipient, network, signer,
            ledger=ledger, history=history, poller=TransactionPoller(ledger, interval=0),
        )
        assert list(self._args(ledger)) == [encode_address(recipient)]

    @pytest.mark.asyncio
    async def test_transfer(self, ready, ledger, history, signer, keypair, token_id, network, recipient):
        ready("transfer")
        await transfer(
            token_id, keypair.public_key, recipient, 7, network, signer,
            ledger=ledger, history=history, poller=TransactionPoller(ledger, interval=0),
        )
        assert list(self._args(ledger)) == [
            encode_address(keypair.public_key), encode_address(recipient), encode_i128(7)
        ]

    @pytest.mark.asyncio
    async def test_rejected_simulation_sends_nothing(self, ledger, history, signer, keypair, token_id, network, recipient):
        with pytest.raises(SimulationError):
            await mint(
                token_id, keypair.public_key, recipient, 1, network, signer,
                ledger=ledger, history=history,
            )
        ledger.send.assert_not_awaited()
