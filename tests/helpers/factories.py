"""
Test factories for creating test data consistently.

Service responses are built as SimpleNamespace objects carrying the same
attributes as the stellar_sdk response models the client reads.
"""

from __future__ import annotations
import hashlib
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Union

from stellar_sdk import Keypair, SorobanDataBuilder, StrKey
from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.soroban_rpc import GetTransactionStatus, SendTransactionStatus

from soroban_token_client.codec.scval import (
    encode_address,
    encode_bool,
    encode_i128,
    encode_map,
    encode_u32,
)


def mk_keypair(seed: Union[int, bytes] = 1) -> Keypair:
    """Deterministic ed25519 keypair."""
    if isinstance(seed, int):
        seed = seed.to_bytes(32, "big")
    return Keypair.from_raw_ed25519_seed(seed)


def mk_contract_id(name: str = "token") -> str:
    """Deterministic C... contract strkey derived from a name."""
    return StrKey.encode_contract(hashlib.sha256(name.encode("utf-8")).digest())


def mk_soroban_data(resource_fee: int = 50) -> str:
    return SorobanDataBuilder().set_resource_fee(resource_fee).build().to_xdr()


def mk_simulation(
    return_value: Optional[stellar_xdr.SCVal] = None,
    *,
    error: Optional[str] = None,
    transaction_data: Optional[str] = None,
    min_resource_fee: int = 0,
    auth: Optional[List[str]] = None,
    latest_ledger: int = 1000,
    restore_preamble: Any = None,
    results: Optional[List[Any]] = None,
) -> SimpleNamespace:
    """Simulation response; a return value makes a single successful result."""
    if results is None and return_value is not None and error is None:
        results = [SimpleNamespace(xdr=return_value.to_xdr(), auth=auth or [])]
    return SimpleNamespace(
        error=error,
        results=results,
        transaction_data=transaction_data,
        min_resource_fee=min_resource_fee,
        latest_ledger=latest_ledger,
        restore_preamble=restore_preamble,
    )


def mk_send_response(
    status: SendTransactionStatus = SendTransactionStatus.PENDING,
    tx_hash: str = "ab" * 32,
    error_result_xdr: Optional[str] = None,
) -> SimpleNamespace:
    return SimpleNamespace(status=status, hash=tx_hash, error_result_xdr=error_result_xdr)


def mk_get_response(
    status: GetTransactionStatus = GetTransactionStatus.NOT_FOUND,
    ledger: Optional[int] = None,
    result_xdr: Optional[str] = None,
    result_meta_xdr: Optional[str] = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        status=status,
        ledger=ledger,
        result_xdr=result_xdr,
        result_meta_xdr=result_meta_xdr,
    )


def mk_schedule(
    recipient: str,
    total_amount: int = 1000,
    cliff_ledger: int = 100,
    end_ledger: int = 200,
    released: int = 0,
    revoked: bool = False,
) -> stellar_xdr.SCVal:
    """A VestingSchedule struct as the vesting contract returns it."""
    return encode_map({
        "recipient": encode_address(recipient),
        "total_amount": encode_i128(total_amount),
        "cliff_ledger": encode_u32(cliff_ledger),
        "end_ledger": encode_u32(end_ledger),
        "released": encode_i128(released),
        "revoked": encode_bool(revoked),
    })


def mk_holder_record(
    account_id: str, balance: str, asset_code: str, asset_issuer: str
) -> Dict[str, Any]:
    """Horizon account record holding one classic asset plus XLM."""
    return {
        "id": account_id,
        "account_id": account_id,
        "balances": [
            {
                "balance": balance,
                "asset_type": "credit_alphanum4",
                "asset_code": asset_code,
                "asset_issuer": asset_issuer,
            },
            {"balance": "10.0000000", "asset_type": "native"},
        ],
    }
