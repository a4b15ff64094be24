"""
Tests for amount and address display helpers.
"""

import pytest

from soroban_token_client.formatting import format_amount, parse_amount, truncate_address
from soroban_token_client.models import UNAVAILABLE


@pytest.mark.parametrize("raw,decimals,expected", [
    (10_000_000, 7, "1"),
    (15_000_000, 7, "1.5"),
    (0, 7, "0"),
    (1, 7, "0.0000001"),
    (10_000_000_000_000, 7, "1,000,000"),
    (12_345_678_901_234, 7, "1,234,567.8901234"),
    (1_000, 0, "1,000"),
    (-15_000_000, 7, "-1.5"),
    ("25000000", 7, "2.5"),
])
def test_format_amount(raw, decimals, expected):
    assert format_amount(raw, decimals) == expected


def test_format_unavailable_passthrough():
    assert format_amount(UNAVAILABLE, 7) == UNAVAILABLE


def test_format_negative_decimals():
    with pytest.raises(ValueError):
        format_amount(1, -1)


@pytest.mark.parametrize("text,expected", [
    ("1", 10_000_000),
    ("1.5", 15_000_000),
    ("1,000,000", 10_000_000_000_000),
    ("-0.0000001", -1),
    (".5", 5_000_000),
])
def test_parse_amount(text, expected):
    assert parse_amount(text, 7) == expected


@pytest.mark.parametrize("text", ["", "abc", "1.2.3", "1.00000001"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text, 7)


def test_parse_inverts_format():
    for raw in (0, 1, 999, 10_000_000, 123_456_789_012):
        assert parse_amount(format_amount(raw, 7), 7) == raw


def test_truncate_address():
    assert truncate_address("G" + "A" * 55, 4) == "GAAAA…AAAA"


def test_truncate_short_unchanged():
    assert truncate_address("GABCDEFGHIJ", 4) == "GABCDEFGHIJ"
    assert truncate_address("GABCDEFGHIJK", 4) == "GABCD…HIJK"


def test_truncate_zero_chars():
    assert truncate_address("GABCDEF", 0) == "G…"
