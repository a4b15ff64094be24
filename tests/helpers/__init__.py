from .mocks import FakeLedger, FakeHistory, KeypairAuthority, invoked_method
from .factories import (
    mk_keypair,
    mk_contract_id,
    mk_simulation,
    mk_soroban_data,
    mk_send_response,
    mk_get_response,
    mk_schedule,
    mk_holder_record,
)

__all__ = [
    "FakeLedger",
    "FakeHistory",
    "KeypairAuthority",
    "invoked_method",
    "mk_keypair",
    "mk_contract_id",
    "mk_simulation",
    "mk_soroban_data",
    "mk_send_response",
    "mk_get_response",
    "mk_schedule",
    "mk_holder_record",
]
