"""
Test bootstrap:
- Make src/ and tests/ importable without an install
- Shared fixtures for networks, accounts, contracts and fake services
"""
import sys
import pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
TESTS = ROOT / "tests"

for path in (SRC, TESTS):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from helpers import (  # noqa: E402
    FakeHistory,
    FakeLedger,
    KeypairAuthority,
    mk_contract_id,
    mk_keypair,
)
from soroban_token_client.network import TESTNET  # noqa: E402


@pytest.fixture
def network():
    return TESTNET


@pytest.fixture
def keypair():
    """Deterministic keypair acting as the source/admin account."""
    return mk_keypair(seed=1)


@pytest.fixture
def recipient():
    return mk_keypair(seed=2).public_key


@pytest.fixture
def token_id():
    return mk_contract_id("token")


@pytest.fixture
def vesting_id():
    return mk_contract_id("vesting")


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def history(keypair):
    return FakeHistory(keypair.public_key)


@pytest.fixture
def signer(keypair):
    return KeypairAuthority(keypair)
