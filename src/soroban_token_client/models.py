# Snapshot models for Soroban token and vesting reads.
# All models are immutable: every fetch builds a fresh snapshot.

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List, Any

from .runtime.address import ContractId


# Placeholder for values a contract does not expose (e.g. no total_supply).
UNAVAILABLE = "unavailable"


class TokenInfo(BaseModel):
    """SEP-41 token metadata."""
    name: str
    symbol: str
    decimals: int = Field(ge=0, le=255)
    total_supply: str = Field(UNAVAILABLE, alias="totalSupply")
    circulating_supply: str = Field(UNAVAILABLE, alias="circulatingSupply")
    admin: str = UNAVAILABLE
    contract_id: ContractId = Field(alias="contractId")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def has_total_supply(self) -> bool:
        return self.total_supply != UNAVAILABLE


class TokenHolder(BaseModel):
    """One holder's balance; share is relative to the fetched holders only."""
    address: str
    raw_balance: int = Field(alias="rawBalance")
    balance: str
    share_percent: float = Field(ge=0, le=100, alias="sharePercent")

    model_config = {"populate_by_name": True, "frozen": True}


class HolderLookupStatus(str, Enum):
    OK = "ok"
    NOT_APPLICABLE = "not_applicable"
    UNAVAILABLE = "unavailable"


class HolderLookup(BaseModel):
    """
    Result of a best-effort holder enumeration.

    ``truncated`` is True when the page came back full, meaning more holders
    may exist and share percentages over-state each holder's weight.
    """
    status: HolderLookupStatus
    holders: List[TokenHolder] = Field(default_factory=list)
    truncated: bool = False
    reason: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def available(self) -> bool:
        return self.status == HolderLookupStatus.OK


class VestingScheduleInfo(BaseModel):
    """A recipient's vesting schedule as stored by the vesting contract."""
    recipient: str
    total_amount: int = Field(alias="totalAmount")
    cliff_ledger: int = Field(ge=0, alias="cliffLedger")
    end_ledger: int = Field(ge=0, alias="endLedger")
    released: int = 0
    revoked: bool = False

    model_config = {"populate_by_name": True, "frozen": True}


class VestingStatus(str, Enum):
    REVOKED = "revoked"
    CLIFF_PENDING = "cliff_pending"
    VESTING = "vesting"
    FULLY_VESTED = "fully_vested"


class VestingProgress(BaseModel):
    """Derived vesting figures at a given ledger."""
    schedule: VestingScheduleInfo
    current_ledger: int = Field(alias="currentLedger")
    vested: int
    vested_percent: float = Field(alias="vestedPercent")
    released_percent: float = Field(alias="releasedPercent")
    timeline_position: float = Field(alias="timelinePosition")
    status: VestingStatus

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def claimable(self) -> int:
        """Vested but not yet released."""
        return max(self.vested - self.schedule.released, 0)


class SupplyBreakdown(BaseModel):
    """
    Token supply split in smallest units.

    locked and burned are always 0: enumerating every vesting contract for a
    token and accounting for burns are not implemented.
    """
    circulating: int
    locked: int = 0
    burned: int = 0
    total: int

    model_config = {"frozen": True}


class TransactionOutcome(BaseModel):
    """Final state of a submitted transaction."""
    tx_hash: str = Field(alias="hash")
    state: str
    attempts: int
    ledger: Optional[int] = None
    return_value: Any = Field(None, alias="returnValue")
    result_xdr: Optional[str] = Field(None, alias="resultXdr")

    model_config = {"populate_by_name": True, "frozen": True}


__all__ = [
    "UNAVAILABLE",
    "TokenInfo",
    "TokenHolder",
    "HolderLookupStatus",
    "HolderLookup",
    "VestingScheduleInfo",
    "VestingStatus",
    "VestingProgress",
    "SupplyBreakdown",
    "TransactionOutcome",
]
