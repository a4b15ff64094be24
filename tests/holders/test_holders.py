"""
Tests for classic-asset holder enumeration.
"""

import logging

import pytest

from helpers import mk_holder_record, mk_keypair
from soroban_token_client.holders import build_holders, fetch_top_holders
from soroban_token_client.models import HolderLookupStatus
from soroban_token_client.runtime.errors import HolderLookupUnavailable

ISSUER = mk_keypair(20).public_key
ALICE = mk_keypair(21).public_key
BOB = mk_keypair(22).public_key


def test_build_holders_shares_and_order():
    records = [
        mk_holder_record(BOB, "250.0000000", "TT", ISSUER),
        mk_holder_record(ALICE, "750.0000000", "TT", ISSUER),
    ]

    holders = build_holders(records, "TT", ISSUER)

    assert [h.address for h in holders] == [ALICE, BOB]
    assert holders[0].raw_balance == 7_500_000_000
    assert holders[0].balance == "750"
    assert holders[0].share_percent == 75.0
    assert holders[1].share_percent == 25.0


def test_build_holders_exact_decimal_parsing():
    holders = build_holders([mk_holder_record(ALICE, "0.1000001", "TT", ISSUER)], "TT", ISSUER)
    assert holders[0].raw_balance == 1_000_001
    assert holders[0].balance == "0.1000001"


def test_other_issuer_not_counted():
    other_issuer = mk_keypair(23).public_key
    holders = build_holders([mk_holder_record(ALICE, "5.0", "TT", other_issuer)], "TT", ISSUER)
    assert holders[0].raw_balance == 0
    assert holders[0].share_percent == 0.0


@pytest.mark.asyncio
async def test_not_applicable_without_asset(network, history):
    lookup = await fetch_top_holders(network, history=history)
    assert lookup.status == HolderLookupStatus.NOT_APPLICABLE
    assert lookup.holders == []
    history.accounts_for_asset.assert_not_awaited()


@pytest.mark.asyncio
async def test_ok(network, history):
    history.accounts_for_asset.return_value = [
        mk_holder_record(ALICE, "600.0000000", "TT", ISSUER),
        mk_holder_record(BOB, "400.0000000", "TT", ISSUER),
    ]

    lookup = await fetch_top_holders(network, "TT", ISSUER, limit=10, history=history)

    assert lookup.available
    assert [h.share_percent for h in lookup.holders] == [60.0, 40.0]
    assert not lookup.truncated
    history.accounts_for_asset.assert_awaited_once_with("TT", ISSUER, limit=10)


@pytest.mark.asyncio
async def test_full_page_is_truncated(network, history):
    history.accounts_for_asset.return_value = [
        mk_holder_record(ALICE, "1.0", "TT", ISSUER),
        mk_holder_record(BOB, "1.0", "TT", ISSUER),
    ]
    lookup = await fetch_top_holders(network, "TT", ISSUER, limit=2, history=history)
    assert lookup.truncated


@pytest.mark.asyncio
async def test_unavailable_degrades(network, history, caplog):
    history.accounts_for_asset.side_effect = HolderLookupUnavailable("Horizon returned 503")

    with caplog.at_level(logging.WARNING, logger="soroban_token_client.holders"):
        lookup = await fetch_top_holders(network, "TT", ISSUER, history=history)

    assert lookup.status == HolderLookupStatus.UNAVAILABLE
    assert lookup.reason == "Horizon returned 503"
    assert lookup.holders == []
    assert "unavailable" in caplog.text
