"""
Soroban Client Error Model

This module provides the error handling framework for the Soroban token
client. Every failure that crosses a component boundary is translated into
one of the classes below; raw transport exceptions never reach callers.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import Enum, IntEnum


class ErrorCode(IntEnum):
    """Error codes for the Soroban token client."""

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    INVALID_ADDRESS = 3

    # Codec errors (100-199)
    ENCODING_ERROR = 100
    DECODE_ERROR = 101
    MISSING_FIELD = 102

    # Ledger service errors (200-299)
    NETWORK_ERROR = 200
    TIMEOUT = 202
    HOLDER_LOOKUP_UNAVAILABLE = 210

    # Simulation / assembly errors (300-399)
    SIMULATION_FAILED = 300
    SIMULATION_INCOMPLETE = 301
    ASSEMBLY_FAILED = 302

    # Signing errors (400-499)
    SIGNING_REJECTED = 400

    # Submission errors (500-599)
    SUBMISSION_FAILED = 500
    TRANSACTION_FAILED = 501
    POLL_TIMEOUT = 502
    POLL_CANCELLED = 503


class SorobanClientError(Exception):
    """
    Base class for all Soroban client errors.

    Provides structured error information: a code, a message, optional
    details (usually the service payload) and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a Soroban client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class InvalidAddressError(SorobanClientError):
    """Malformed account or contract address."""

    def __init__(self, message: str = "Invalid address",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS, details, cause)


class CodecError(SorobanClientError):
    """ScVal encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class EncodeError(CodecError):
    """A native value cannot be represented in the requested ScVal variant."""

    def __init__(self, message: str = "Encode error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.ENCODING_ERROR, details, cause)


class DecodeError(CodecError):
    """Wire value did not match the expected variant or was malformed."""

    def __init__(self, message: str = "Decode error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.DECODE_ERROR, details, cause)


class MissingFieldError(DecodeError):
    """A struct field was absent from a contract map value."""

    def __init__(self, field_name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Missing struct field: {field_name}", details)
        self.code = ErrorCode.MISSING_FIELD
        self.field_name = field_name


class LedgerServiceError(SorobanClientError):
    """Transport-level failure talking to Soroban RPC or Horizon."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NETWORK_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class HolderLookupUnavailable(LedgerServiceError):
    """The historical query service could not answer a holder lookup."""

    def __init__(self, message: str = "Holder lookup unavailable",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.HOLDER_LOOKUP_UNAVAILABLE, details, cause)


class SimulationError(SorobanClientError):
    """The ledger service rejected a dry run."""

    def __init__(self, message: str, method: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SIMULATION_FAILED, details, cause)
        self.method = method


class SimulationIncomplete(SimulationError):
    """The dry run reported success but carried no result payload."""

    def __init__(self, message: str, method: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, method, details)
        self.code = ErrorCode.SIMULATION_INCOMPLETE


class AssemblyError(SorobanClientError):
    """Simulation succeeded but returned no usable footprint."""

    def __init__(self, message: str = "Simulation returned no usable footprint",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.ASSEMBLY_FAILED, details, cause)


class RejectionReason(str, Enum):
    """Why a signing authority refused to sign."""
    DECLINED = "declined"
    UNAVAILABLE = "unavailable"
    INVALID_NETWORK = "invalid_network"


class SigningRejected(SorobanClientError):
    """The signing authority declined or could not sign. Terminal."""

    def __init__(self, reason: RejectionReason, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message or f"Signing rejected: {reason.value}",
                         ErrorCode.SIGNING_REJECTED, details, cause)
        self.reason = reason


class SubmissionError(SorobanClientError):
    """The ledger service refused a signed transaction."""

    def __init__(self, message: str, tx_hash: Optional[str] = None,
                 result_xdr: Optional[str] = None, code: ErrorCode = ErrorCode.SUBMISSION_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)
        self.tx_hash = tx_hash
        self.result_xdr = result_xdr


class TransactionFailed(SubmissionError):
    """The transaction was included in a ledger with a FAILED status."""

    def __init__(self, tx_hash: str, result_xdr: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Transaction {tx_hash} failed", tx_hash, result_xdr,
                         ErrorCode.TRANSACTION_FAILED, details)


class PollTimeout(SorobanClientError):
    """
    The transaction status never became terminal within the attempt budget.

    Distinct from failure: the transaction may still land later.
    """

    def __init__(self, tx_hash: str, attempts: int):
        super().__init__(
            f"Transaction {tx_hash} not final after {attempts} polls",
            ErrorCode.POLL_TIMEOUT,
            {"txHash": tx_hash, "attempts": attempts},
        )
        self.tx_hash = tx_hash
        self.attempts = attempts


class PollCancelled(SorobanClientError):
    """The caller abandoned the poll loop."""

    def __init__(self, tx_hash: str, attempts: int):
        super().__init__(
            f"Polling for {tx_hash} cancelled after {attempts} polls",
            ErrorCode.POLL_CANCELLED,
            {"txHash": tx_hash, "attempts": attempts},
        )
        self.tx_hash = tx_hash
        self.attempts = attempts


def error_from_rpc(error: Dict[str, Any], method: Optional[str] = None) -> SorobanClientError:
    """
    Create an appropriate error from a JSON-RPC error object.

    Args:
        error: RPC error payload ({"code": ..., "message": ..., "data": ...})
        method: RPC method that produced the error

    Returns:
        LedgerServiceError carrying the service message and payload
    """
    if isinstance(error, str):
        return LedgerServiceError(error)
    if not isinstance(error, dict):
        return LedgerServiceError(str(error))

    message = error.get("message", "Unknown error")
    details: Dict[str, Any] = {"rpcCode": error.get("code")}
    if method:
        details["method"] = method
    if error.get("data") is not None:
        details["data"] = error["data"]
    return LedgerServiceError(message, details=details)


class ErrorHandler:
    """
    Utility class for handling and categorizing errors.
    """

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Check if an error is retryable.

        Only transport failures are. Simulation errors, signing rejections
        and transaction failures are surfaced to the caller as-is.
        """
        if isinstance(error, HolderLookupUnavailable):
            return False
        if isinstance(error, LedgerServiceError):
            return True
        return False

    @staticmethod
    def should_recheck(error: Exception) -> bool:
        """
        Check if the caller should offer a manual status re-check.

        True when the transaction may have reached the network without a
        terminal status being observed, including a send that failed in transit.
        """
        if isinstance(error, (PollTimeout, PollCancelled)):
            return True
        return isinstance(error, SubmissionError) and isinstance(error.cause, LedgerServiceError)

    @staticmethod
    def extract_tx_hash(error: Exception) -> Optional[str]:
        """Extract transaction hash from an error if available."""
        tx_hash = getattr(error, "tx_hash", None)
        if tx_hash:
            return tx_hash
        if isinstance(error, SorobanClientError) and error.details:
            return error.details.get("txHash")
        return None


__all__ = [
    "ErrorCode",
    "SorobanClientError",
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
    "error_from_rpc",
    "ErrorHandler",
]
