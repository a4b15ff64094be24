"""Signing delegate interface"""

from .authority import (
    SigningAuthority,
    CallbackSigningAuthority,
    normalize_wallet_response,
    sign_envelope,
)

__all__ = [
    "SigningAuthority",
    "CallbackSigningAuthority",
    "normalize_wallet_response",
    "sign_envelope",
]
