"""
ContractId Pydantic custom type and address validation helpers.
"""

from typing import Any, Union
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema
from stellar_sdk import StrKey

from .errors import InvalidAddressError


class ContractId:
    """Custom Pydantic type for Soroban contract identifiers (C... strkeys)."""

    __slots__ = ("_value",)

    def __init__(self, value: str):
        if not isinstance(value, str):
            raise InvalidAddressError("ContractId must be a string")

        value = value.strip()
        if not StrKey.is_valid_contract(value):
            raise InvalidAddressError(
                f"Invalid contract id: {value!r}",
                details={"value": value},
            )

        self._value = value

    @property
    def value(self) -> str:
        """The 56-character strkey text."""
        return self._value

    @property
    def raw(self) -> bytes:
        """The underlying 32-byte identifier."""
        return StrKey.decode_contract(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"ContractId('{self._value}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ContractId):
            return self._value == other._value
        elif isinstance(other, str):
            return self._value == other
        return False

    def __hash__(self) -> int:
        return hash(self._value)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_value"):
            raise AttributeError("ContractId is immutable")
        object.__setattr__(self, name, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the ContractId."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any, _info=None) -> "ContractId":
        """Validate and convert the input to a ContractId."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except InvalidAddressError as e:
                raise ValueError(str(e))
        raise ValueError(f"Invalid ContractId: {value}")

    @classmethod
    def parse(cls, value: Union[str, "ContractId"]) -> "ContractId":
        """Parse a string into a ContractId, passing instances through."""
        if isinstance(value, cls):
            return value
        return cls(value)


def is_account_address(value: str) -> bool:
    """True for a G... ed25519 account strkey."""
    return isinstance(value, str) and StrKey.is_valid_ed25519_public_key(value)


def is_contract_address(value: str) -> bool:
    """True for a C... contract strkey."""
    return isinstance(value, str) and StrKey.is_valid_contract(value)


def validate_address(value: str) -> str:
    """
    Validate an account or contract address.

    Raises:
        InvalidAddressError: If the value is neither
    """
    if is_account_address(value) or is_contract_address(value):
        return value
    raise InvalidAddressError(f"Invalid address: {value!r}", details={"value": value})


__all__ = [
    "ContractId",
    "is_account_address",
    "is_contract_address",
    "validate_address",
]
