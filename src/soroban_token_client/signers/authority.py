"""
Signing delegate interface.

The client never holds private keys. A SigningAuthority (usually a browser
or hardware wallet behind some bridge) receives the unsigned envelope and
the network passphrase and hands back a signed envelope, or refuses.
Refusal is terminal for the current operation; nothing is retried.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from stellar_sdk import TransactionEnvelope

from ..network import NetworkConfig
from ..runtime.errors import RejectionReason, SigningRejected


logger = logging.getLogger(__name__)

WalletResponse = Union[str, Dict[str, Any], None]
WalletCallback = Callable[[str, str], Awaitable[WalletResponse]]

_DECLINE_MARKERS = ("declin", "reject", "denied", "cancel")


class SigningAuthority(ABC):
    """
    External signing authority boundary.

    Implementations return the signed envelope as base64 XDR or raise
    SigningRejected.
    """

    @abstractmethod
    async def sign(self, envelope_xdr: str, network_passphrase: str) -> str:
        """
        Sign an envelope.

        Args:
            envelope_xdr: Unsigned, assembled envelope (base64 XDR)
            network_passphrase: Network the signature must be bound to

        Returns:
            Signed envelope (base64 XDR)

        Raises:
            SigningRejected: If the user declines or the authority fails
        """
        pass

    def describe(self) -> str:
        return type(self).__name__


def _classify_error(message: str) -> RejectionReason:
    lowered = message.lower()
    if "passphrase" in lowered or "wrong network" in lowered or "network mismatch" in lowered:
        return RejectionReason.INVALID_NETWORK
    if any(marker in lowered for marker in _DECLINE_MARKERS):
        return RejectionReason.DECLINED
    return RejectionReason.UNAVAILABLE


def normalize_wallet_response(response: WalletResponse, network_passphrase: str) -> str:
    """
    Reduce the shapes wallets return to a signed XDR string.

    Accepts a bare string, or a dict with ``signedTxXdr`` (optionally
    ``networkPassphrase``) or ``error``. None means the user closed the
    prompt.
    """
    if response is None:
        raise SigningRejected(RejectionReason.DECLINED, "Signing authority returned nothing")

    if isinstance(response, str):
        return response

    if not isinstance(response, dict):
        raise SigningRejected(
            RejectionReason.UNAVAILABLE,
            f"Unexpected signing response type {type(response).__name__}",
        )

    error = response.get("error")
    if error:
        message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        raise SigningRejected(_classify_error(message), message, details={"error": error})

    reported = response.get("networkPassphrase")
    if reported and reported != network_passphrase:
        raise SigningRejected(
            RejectionReason.INVALID_NETWORK,
            "Signing authority is on a different network",
            details={"expected": network_passphrase, "actual": reported},
        )

    signed = response.get("signedTxXdr") or response.get("signed_tx_xdr")
    if not signed:
        raise SigningRejected(RejectionReason.DECLINED, "No signed envelope in response")
    return signed


class CallbackSigningAuthority(SigningAuthority):
    """
    Adapts an async wallet callback ``(xdr, passphrase) -> response``.

    Exceptions from the callback are reported as UNAVAILABLE.
    """

    def __init__(self, callback: WalletCallback, name: Optional[str] = None):
        self._callback = callback
        self._name = name or getattr(callback, "__name__", "wallet")

    def describe(self) -> str:
        return self._name

    async def sign(self, envelope_xdr: str, network_passphrase: str) -> str:
        try:
            response = await self._callback(envelope_xdr, network_passphrase)
        except SigningRejected:
            raise
        except Exception as e:
            raise SigningRejected(
                RejectionReason.UNAVAILABLE, f"{self._name} failed: {e}", cause=e
            ) from e
        return normalize_wallet_response(response, network_passphrase)


async def sign_envelope(
    authority: SigningAuthority, envelope_xdr: str, network: NetworkConfig
) -> str:
    """
    Delegate signing and check what came back.

    The returned envelope must parse for the requested network and carry
    at least one signature.

    Raises:
        SigningRejected: On refusal or an unusable response
    """
    logger.debug(f"Requesting signature from {authority.describe()} on {network.name}")
    signed = await authority.sign(envelope_xdr, network.network_passphrase)

    try:
        envelope = TransactionEnvelope.from_xdr(signed, network.network_passphrase)
    except Exception as e:
        raise SigningRejected(
            RejectionReason.UNAVAILABLE, "Signing authority returned malformed XDR", cause=e
        ) from e

    if not envelope.signatures:
        raise SigningRejected(
            RejectionReason.UNAVAILABLE, "Signing authority returned an unsigned envelope"
        )
    return signed


__all__ = [
    "SigningAuthority",
    "CallbackSigningAuthority",
    "WalletCallback",
    "normalize_wallet_response",
    "sign_envelope",
]
