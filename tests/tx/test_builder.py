"""
Tests for invocation envelope building.
"""

import pytest
from stellar_sdk import Account, InvokeHostFunction

from helpers import invoked_method
from soroban_token_client.codec.scval import encode_address, encode_i128
from soroban_token_client.runtime.errors import InvalidAddressError
from soroban_token_client.tx.builder import (
    BASE_FEE,
    READ_ONLY_PROBE_ACCOUNT,
    build_invocation,
    is_probe_account,
    probe_account,
)


def test_probe_account_is_zero_key_at_sequence_zero():
    account = probe_account()
    assert account.account.account_id == READ_ONLY_PROBE_ACCOUNT
    assert account.sequence == 0
    assert is_probe_account(account)


def test_read_only_invocation_uses_probe(token_id, network):
    envelope = build_invocation(token_id, "name", [], network)
    tx = envelope.transaction
    assert tx.source.account_id == READ_ONLY_PROBE_ACCOUNT
    assert len(tx.operations) == 1
    assert isinstance(tx.operations[0], InvokeHostFunction)
    assert invoked_method(envelope) == "name"
    assert tx.fee == BASE_FEE
    assert envelope.signatures == []


def test_arguments_carried_in_order(token_id, network, recipient):
    args = [encode_address(recipient), encode_i128(5)]
    envelope = build_invocation(token_id, "mint", args, network)
    carried = envelope.transaction.operations[0].host_function.invoke_contract.args
    assert list(carried) == args


def test_real_source(token_id, network, keypair):
    source = Account(keypair.public_key, 41)
    envelope = build_invocation(token_id, "mint", [], network, source, for_submission=True)
    assert envelope.transaction.source.account_id == keypair.public_key
    assert envelope.transaction.sequence == 42


def test_probe_refused_for_submission(token_id, network):
    with pytest.raises(InvalidAddressError):
        build_invocation(token_id, "mint", [], network, for_submission=True)


def test_explicit_zero_key_source_refused_for_submission(token_id, network):
    source = Account(READ_ONLY_PROBE_ACCOUNT, 7)
    assert is_probe_account(source)
    with pytest.raises(InvalidAddressError):
        build_invocation(token_id, "mint", [], network, source, for_submission=True)


def test_real_account_is_not_read_only_source(keypair):
    assert not is_probe_account(Account(keypair.public_key, 1))


def test_invalid_contract_id(network):
    with pytest.raises(InvalidAddressError):
        build_invocation("CNOTVALID", "name", [], network)
