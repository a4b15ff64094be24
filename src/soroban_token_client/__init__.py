"""
Soroban Token Client

Python client for SEP-41 token and vesting contracts on Stellar Soroban:
ScVal codec, invocation simulation, transaction assembly, delegated
signing, submission polling, vesting math and display helpers.
"""

# Configuration and models
from .network import NetworkConfig, NETWORKS, TESTNET, MAINNET, FUTURENET, LOCAL
from .models import *

# Runtime
from .runtime.errors import *
from .runtime.address import ContractId, validate_address

# Codec
from .codec import *

# Service clients
from .rpc import LedgerClient, HistoryClient, fetch_current_ledger

# Transaction pipeline
from .tx import *
from .signers import *

# Operations
from .tokens import (
    fetch_token_info, fetch_balance, fetch_max_supply, fetch_supply_breakdown,
    mint, burn, set_admin, transfer,
)
from .vesting import (
    vested_amount, vested_percent, released_percent, timeline_position,
    vesting_status, vesting_progress,
    fetch_vesting_schedule, fetch_vested_amount, fetch_released_amount,
    fetch_vesting_progress, create_schedule, release, revoke,
)
from .holders import fetch_top_holders
from .formatting import format_amount, parse_amount, truncate_address

# Facade
from .facade import SorobanToken

__version__ = "0.1.0"
__all__ = [
    # Facade
    "SorobanToken",

    # Configuration
    "NetworkConfig",
    "NETWORKS",
    "TESTNET",
    "MAINNET",
    "FUTURENET",
    "LOCAL",

    # Models
    "UNAVAILABLE",
    "TokenInfo",
    "TokenHolder",
    "HolderLookup",
    "HolderLookupStatus",
    "VestingScheduleInfo",
    "VestingStatus",
    "VestingProgress",
    "SupplyBreakdown",
    "TransactionOutcome",

    # Errors
    "SorobanClientError",
    "ErrorCode",
    "InvalidAddressError",
    "CodecError",
    "EncodeError",
    "DecodeError",
    "MissingFieldError",
    "LedgerServiceError",
    "HolderLookupUnavailable",
    "SimulationError",
    "SimulationIncomplete",
    "AssemblyError",
    "RejectionReason",
    "SigningRejected",
    "SubmissionError",
    "TransactionFailed",
    "PollTimeout",
    "PollCancelled",
    "ErrorHandler",

    # Addresses
    "ContractId",
    "validate_address",

    # Codec
    "ScType",
    "decode",
    "encode",
    "decode_string",
    "decode_i128",
    "decode_u32",
    "decode_bool",
    "decode_address",
    "decode_option_i128",
    "decode_map",
    "get_struct_field",
    "encode_symbol",
    "encode_string",
    "encode_u32",
    "encode_i128",
    "encode_bool",
    "encode_address",
    "encode_void",
    "encode_map",
    "scval_from_xdr",
    "scval_to_xdr",

    # Service clients
    "LedgerClient",
    "HistoryClient",
    "fetch_current_ledger",

    # Transaction pipeline
    "READ_ONLY_PROBE_ACCOUNT",
    "build_invocation",
    "simulate_call",
    "simulate_optional",
    "prepare_invocation",
    "assemble_transaction",
    "SubmissionState",
    "TransactionPoller",
    "invoke_contract",
    "SigningAuthority",
    "CallbackSigningAuthority",
    "sign_envelope",

    # Tokens
    "fetch_token_info",
    "fetch_balance",
    "fetch_max_supply",
    "fetch_supply_breakdown",
    "mint",
    "burn",
    "set_admin",
    "transfer",

    # Vesting
    "vested_amount",
    "vested_percent",
    "released_percent",
    "timeline_position",
    "vesting_status",
    "vesting_progress",
    "fetch_vesting_schedule",
    "fetch_vested_amount",
    "fetch_released_amount",
    "fetch_vesting_progress",
    "create_schedule",
    "release",
    "revoke",

    # Holders and formatting
    "fetch_top_holders",
    "format_amount",
    "parse_amount",
    "truncate_address",
]
