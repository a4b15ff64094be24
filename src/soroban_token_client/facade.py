"""
Soroban token facade.

Binds one network, a token contract and (optionally) a vesting contract
to the module-level operations, sharing one ledger client and one Horizon
client across calls.

Example:
    ```python
    from soroban_token_client import SorobanToken

    async with SorobanToken.testnet(TOKEN_ID, vesting_contract_id=VESTING_ID) as token:
        info = await token.info()
        progress = await token.vesting_progress(recipient)

        # Writes need a signing authority
        outcome = await token.mint(admin, recipient, 10_000_000, signer)
    ```
"""

from __future__ import annotations
import asyncio
from typing import Optional, Union

from . import holders as _holders
from . import tokens as _tokens
from . import vesting as _vesting
from .models import (
    HolderLookup,
    SupplyBreakdown,
    TokenInfo,
    TransactionOutcome,
    VestingProgress,
    VestingScheduleInfo,
)
from .network import MAINNET, TESTNET, NetworkConfig
from .rpc.history import HistoryClient
from .rpc.ledger import LedgerClient
from .runtime.address import ContractId
from .signers.authority import SigningAuthority
from .tx.execute import POLL_INTERVAL, MAX_POLL_ATTEMPTS, TransactionPoller


class SorobanToken:
    """
    Token + vesting client for one network.

    Attributes:
        network: The bound NetworkConfig
        contract_id: Token contract
        vesting_contract_id: Vesting contract, if any
        ledger: Soroban RPC client
        history: Horizon client
    """

    def __init__(
        self,
        network: NetworkConfig,
        contract_id: Union[str, ContractId],
        vesting_contract_id: Optional[Union[str, ContractId]] = None,
        *,
        ledger: Optional[LedgerClient] = None,
        history: Optional[HistoryClient] = None,
        poll_interval: float = POLL_INTERVAL,
        max_poll_attempts: int = MAX_POLL_ATTEMPTS,
    ):
        """
        Initialize the facade.

        Args:
            network: Network configuration
            contract_id: Token contract id (C... strkey)
            vesting_contract_id: Vesting contract id, required for vesting calls
            ledger: Shared ledger client; one is created when omitted
            history: Shared Horizon client; one is created when omitted
            poll_interval: Seconds between status polls on writes
            max_poll_attempts: Poll budget on writes
        """
        self.network = network
        self.contract_id = ContractId.parse(contract_id)
        self.vesting_contract_id = (
            ContractId.parse(vesting_contract_id) if vesting_contract_id is not None else None
        )
        self._owns_ledger = ledger is None
        self._owns_history = history is None
        self.ledger = ledger or LedgerClient.for_network(network)
        self.history = history or HistoryClient.for_network(network)
        self.poller = TransactionPoller(self.ledger, poll_interval, max_poll_attempts)

    async def close(self) -> None:
        """Close the clients this facade created."""
        if self._owns_ledger:
            await self.ledger.close()
        if self._owns_history:
            await self.history.close()

    async def __aenter__(self) -> SorobanToken:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def testnet(cls, contract_id: Union[str, ContractId], **kwargs) -> SorobanToken:
        return cls(TESTNET, contract_id, **kwargs)

    @classmethod
    def mainnet(cls, contract_id: Union[str, ContractId], **kwargs) -> SorobanToken:
        return cls(MAINNET, contract_id, **kwargs)

    @classmethod
    def from_env(cls, contract_id: Union[str, ContractId], **kwargs) -> SorobanToken:
        """Network taken from STELLAR_NETWORK / SOROBAN_RPC_URL / HORIZON_URL."""
        return cls(NetworkConfig.from_env(), contract_id, **kwargs)

    def _vesting(self) -> ContractId:
        if self.vesting_contract_id is None:
            raise ValueError("No vesting contract configured")
        return self.vesting_contract_id

    def _write_options(self, cancel: Optional[asyncio.Event]) -> dict:
        return {
            "ledger": self.ledger,
            "history": self.history,
            "poller": self.poller,
            "cancel": cancel,
        }

    # =========================================================================
    # Token reads
    # =========================================================================

    async def info(self) -> TokenInfo:
        return await _tokens.fetch_token_info(self.contract_id, self.network, self.ledger)

    async def balance(self, holder: str) -> int:
        return await _tokens.fetch_balance(self.contract_id, holder, self.network, self.ledger)

    async def max_supply(self) -> Optional[int]:
        return await _tokens.fetch_max_supply(self.contract_id, self.network, self.ledger)

    async def supply_breakdown(self) -> SupplyBreakdown:
        return await _tokens.fetch_supply_breakdown(
            self.contract_id, self.network, self.ledger, self.vesting_contract_id
        )

    async def top_holders(
        self,
        asset_code: Optional[str] = None,
        asset_issuer: Optional[str] = None,
        limit: int = 10,
    ) -> HolderLookup:
        """Classic-asset holders; NOT_APPLICABLE without code and issuer."""
        return await _holders.fetch_top_holders(
            self.network, asset_code, asset_issuer, limit, self.history
        )

    async def current_ledger(self) -> int:
        return await self.ledger.latest_ledger()

    # =========================================================================
    # Token writes
    # =========================================================================

    async def mint(
        self,
        admin: str,
        to: str,
        amount: int,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _tokens.mint(
            self.contract_id, admin, to, amount, self.network, signer,
            **self._write_options(cancel)
        )

    async def burn(
        self,
        admin: str,
        from_: str,
        amount: int,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _tokens.burn(
            self.contract_id, admin, from_, amount, self.network, signer,
            **self._write_options(cancel)
        )

    async def set_admin(
        self,
        admin: str,
        new_admin: str,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _tokens.set_admin(
            self.contract_id, admin, new_admin, self.network, signer,
            **self._write_options(cancel)
        )

    async def transfer(
        self,
        from_: str,
        to: str,
        amount: int,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _tokens.transfer(
            self.contract_id, from_, to, amount, self.network, signer,
            **self._write_options(cancel)
        )

    # =========================================================================
    # Vesting
    # =========================================================================

    async def vesting_schedule(self, recipient: str) -> VestingScheduleInfo:
        return await _vesting.fetch_vesting_schedule(
            self._vesting(), recipient, self.network, self.ledger
        )

    async def vesting_progress(self, recipient: str) -> VestingProgress:
        """
        Schedule plus derived figures at the current ledger.

        Raises:
            ValueError: If no vesting contract is configured
            SimulationError: If the recipient has no schedule
        """
        return await _vesting.fetch_vesting_progress(
            self._vesting(), recipient, self.network, self.ledger
        )

    async def create_schedule(
        self,
        admin: str,
        recipient: str,
        total_amount: int,
        cliff_ledger: int,
        end_ledger: int,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _vesting.create_schedule(
            self._vesting(), admin, recipient, total_amount, cliff_ledger, end_ledger,
            self.network, signer, **self._write_options(cancel)
        )

    async def release(
        self,
        recipient: str,
        source_account_id: str,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _vesting.release(
            self._vesting(), recipient, source_account_id, self.network, signer,
            **self._write_options(cancel)
        )

    async def revoke(
        self,
        recipient: str,
        admin: str,
        signer: SigningAuthority,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionOutcome:
        return await _vesting.revoke(
            self._vesting(), recipient, admin, self.network, signer,
            **self._write_options(cancel)
        )

    def __repr__(self) -> str:
        return f"SorobanToken(network={self.network.name!r}, contract_id={str(self.contract_id)!r})"


__all__ = ["SorobanToken"]
