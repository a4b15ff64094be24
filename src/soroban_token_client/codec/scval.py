"""
ScVal Encoding/Decoding

This module maps native Python values to and from the Soroban ``SCVal``
tagged union carried in transaction arguments and simulation results.

Supported variants: symbol, string, u32, i128, bool, address, map, void.
Python ints are arbitrary precision, so i128 values are reconstructed
exactly from their 64-bit halves, negatives included.
"""

from __future__ import annotations
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from stellar_sdk import Address, scval
from stellar_sdk import xdr as stellar_xdr

from ..runtime.address import is_account_address, is_contract_address
from ..runtime.errors import DecodeError, EncodeError, MissingFieldError


logger = logging.getLogger(__name__)

I128_MIN = -(2 ** 127)
I128_MAX = 2 ** 127 - 1
U32_MAX = 2 ** 32 - 1
SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9_]{0,32}$")

_T = stellar_xdr.SCValType


class ScType(str, Enum):
    """ScVal variants understood by the codec."""
    SYMBOL = "symbol"
    STRING = "string"
    U32 = "u32"
    I128 = "i128"
    BOOL = "bool"
    ADDRESS = "address"
    MAP = "map"
    VOID = "void"


def _expect(v: stellar_xdr.SCVal, expected: stellar_xdr.SCValType, what: str) -> None:
    if not isinstance(v, stellar_xdr.SCVal):
        raise DecodeError(f"Expected SCVal for {what}, got {type(v).__name__}")
    if v.type != expected:
        raise DecodeError(
            f"Expected {what}, got {v.type.name}",
            details={"expected": expected.name, "actual": v.type.name},
        )


# =============================================================================
# Decoders
# =============================================================================

def decode_string(v: stellar_xdr.SCVal) -> str:
    """
    Decode a symbol or string value.

    Any other variant is stringified on a best-effort basis rather than
    rejected; token metadata is not always typed the way SEP-41 suggests.
    """
    if v.type == _T.SCV_SYMBOL:
        try:
            return v.sym.sc_symbol.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Symbol is not valid UTF-8", cause=e) from e
    if v.type == _T.SCV_STRING:
        return v.str.sc_string.decode("utf-8", errors="replace")
    try:
        native = decode(v)
    except DecodeError:
        logger.debug(f"Cannot stringify {v.type.name}, returning empty string")
        return ""
    return "" if native is None else str(native)


def decode_i128(v: stellar_xdr.SCVal) -> int:
    """Reconstruct a signed 128-bit integer as ``(hi << 64) + lo``."""
    _expect(v, _T.SCV_I128, "i128")
    return scval.from_int128(v)


def decode_u32(v: stellar_xdr.SCVal) -> int:
    _expect(v, _T.SCV_U32, "u32")
    return v.u32.uint32


def decode_bool(v: stellar_xdr.SCVal) -> bool:
    _expect(v, _T.SCV_BOOL, "bool")
    return bool(v.b)


def decode_address(v: stellar_xdr.SCVal) -> str:
    """Decode an address value to its G... or C... strkey."""
    _expect(v, _T.SCV_ADDRESS, "address")
    try:
        return Address.from_xdr_sc_address(v.address).address
    except (ValueError, TypeError) as e:
        raise DecodeError("Unsupported address encoding", cause=e)


def decode_option_i128(v: stellar_xdr.SCVal) -> Optional[int]:
    """Decode an ``Option<i128>``: void is None."""
    if v.type == _T.SCV_VOID:
        return None
    return decode_i128(v)


def decode_map(v: stellar_xdr.SCVal) -> List[stellar_xdr.SCMapEntry]:
    """Return the ordered entries of a map (contract struct) value."""
    _expect(v, _T.SCV_MAP, "map")
    if v.map is None:
        return []
    return list(v.map.sc_map)


def get_struct_field(entries: Sequence[stellar_xdr.SCMapEntry], name: str) -> stellar_xdr.SCVal:
    """
    Find a named field in a struct's map entries.

    Linear scan, first match wins. Duplicate keys are not validated.

    Raises:
        MissingFieldError: If no entry has the given key
    """
    for entry in entries:
        if decode_string(entry.key) == name:
            return entry.val
    raise MissingFieldError(name)


def decode(v: stellar_xdr.SCVal) -> Any:
    """
    Decode any supported variant to its native value.

    Maps become ordered dicts keyed by their decoded keys.

    Raises:
        DecodeError: For variants outside the supported set
    """
    if not isinstance(v, stellar_xdr.SCVal):
        raise DecodeError(f"Expected SCVal, got {type(v).__name__}")

    if v.type in (_T.SCV_SYMBOL, _T.SCV_STRING):
        return decode_string(v)
    if v.type == _T.SCV_U32:
        return decode_u32(v)
    if v.type == _T.SCV_I128:
        return decode_i128(v)
    if v.type == _T.SCV_BOOL:
        return decode_bool(v)
    if v.type == _T.SCV_ADDRESS:
        return decode_address(v)
    if v.type == _T.SCV_VOID:
        return None
    if v.type == _T.SCV_MAP:
        return {decode(entry.key): decode(entry.val) for entry in decode_map(v)}

    raise DecodeError(f"Unsupported ScVal variant: {v.type.name}", details={"type": v.type.name})


# =============================================================================
# Encoders
# =============================================================================

def encode_symbol(value: str) -> stellar_xdr.SCVal:
    """
    Encode a contract symbol: up to 32 characters from ``[A-Za-z0-9_]``.

    Raises:
        EncodeError: If the text is not a valid symbol
    """
    if not isinstance(value, str) or not SYMBOL_PATTERN.match(value):
        raise EncodeError(f"Invalid symbol: {value!r}", details={"value": str(value)})
    return scval.to_symbol(value)


def encode_string(value: str) -> stellar_xdr.SCVal:
    return scval.to_string(value)


def encode_u32(value: int) -> stellar_xdr.SCVal:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"u32 requires an int, got {type(value).__name__}")
    if value < 0 or value > U32_MAX:
        raise EncodeError(f"Value {value} out of u32 range", details={"value": value})
    return scval.to_uint32(value)


def encode_i128(value: int) -> stellar_xdr.SCVal:
    """
    Encode a signed 128-bit integer as its hi/lo 64-bit halves.

    Raises:
        EncodeError: If the value does not fit in 128 bits signed
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"i128 requires an int, got {type(value).__name__}")
    if value < I128_MIN or value > I128_MAX:
        raise EncodeError(f"Value {value} out of i128 range", details={"value": str(value)})
    return scval.to_int128(value)


def encode_bool(value: bool) -> stellar_xdr.SCVal:
    return scval.to_bool(bool(value))


def encode_address(text: str) -> stellar_xdr.SCVal:
    """Encode a G... account or C... contract strkey."""
    try:
        return scval.to_address(text)
    except (ValueError, TypeError) as e:
        raise EncodeError(f"Invalid address: {text!r}", cause=e)


def encode_void() -> stellar_xdr.SCVal:
    return scval.to_void()


def encode_map(entries: Dict[Any, Any]) -> stellar_xdr.SCVal:
    """
    Encode a dict as an ordered map.

    Keys are encoded as symbols (the contract struct convention) unless they
    are already SCVals; values are encoded with :func:`encode`.
    """
    sc_entries = []
    for key, val in entries.items():
        sc_key = key if isinstance(key, stellar_xdr.SCVal) else encode_symbol(str(key))
        sc_val = val if isinstance(val, stellar_xdr.SCVal) else encode(val)
        sc_entries.append(stellar_xdr.SCMapEntry(key=sc_key, val=sc_val))
    return stellar_xdr.SCVal(_T.SCV_MAP, map=stellar_xdr.SCMap(sc_entries))


def _infer_type(value: Any) -> ScType:
    if value is None:
        return ScType.VOID
    if isinstance(value, bool):
        return ScType.BOOL
    if isinstance(value, int):
        return ScType.I128
    if isinstance(value, dict):
        return ScType.MAP
    if isinstance(value, str):
        if is_account_address(value) or is_contract_address(value):
            return ScType.ADDRESS
        if SYMBOL_PATTERN.match(value):
            return ScType.SYMBOL
        return ScType.STRING
    raise EncodeError(f"Cannot infer ScVal type for {type(value).__name__}")


_ENCODERS = {
    ScType.SYMBOL: encode_symbol,
    ScType.STRING: encode_string,
    ScType.U32: encode_u32,
    ScType.I128: encode_i128,
    ScType.BOOL: encode_bool,
    ScType.ADDRESS: encode_address,
    ScType.MAP: encode_map,
}


def encode(value: Any, sc_type: Optional[ScType] = None) -> stellar_xdr.SCVal:
    """
    Encode a native value.

    Without an explicit type: None is void, bool is bool, int is i128,
    dict is map, a valid strkey is an address, text that is a valid symbol
    is a symbol, and any other str is a string.
    """
    if sc_type is None:
        sc_type = _infer_type(value)
    if sc_type == ScType.VOID:
        return encode_void()
    return _ENCODERS[sc_type](value)


# =============================================================================
# Wire form
# =============================================================================

def scval_from_xdr(data: str) -> stellar_xdr.SCVal:
    """Parse a base64 XDR SCVal."""
    try:
        return stellar_xdr.SCVal.from_xdr(data)
    except Exception as e:
        raise DecodeError("Malformed SCVal XDR", details={"xdr": data}, cause=e)


def scval_to_xdr(v: stellar_xdr.SCVal) -> str:
    return v.to_xdr()


__all__ = [
    "ScType",
    "I128_MIN",
    "I128_MAX",
    "U32_MAX",
    "decode",
    "decode_string",
    "decode_i128",
    "decode_u32",
    "decode_bool",
    "decode_address",
    "decode_option_i128",
    "decode_map",
    "get_struct_field",
    "encode",
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
]
