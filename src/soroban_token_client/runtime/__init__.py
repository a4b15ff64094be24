"""Runtime helpers for the Soroban token client"""

from .address import ContractId, validate_address
from .errors import SorobanClientError, ErrorCode

__all__ = [
    "ContractId",
    "validate_address",
    "SorobanClientError",
    "ErrorCode",
]
