from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from launchpad.core.exceptions import ValidationError


class BackendFamily(str, Enum):
    EVM = "evm"
    SOLANA = "solana"

    @classmethod
    def parse(cls, value: str) -> "BackendFamily":
        normalized = (value or "").strip().lower()
        for family in cls:
            if family.value == normalized:
                return family
        raise ValidationError(f"Unknown blockchain '{value}'. Use 'evm' or 'solana'.")


@dataclass
class DeploymentRequest:
    """
    Accumulated wizard answers. Every field is optional at the boundary and the
    whole bag is re-supplied on each invocation; nothing here is persisted.
    """
    blockchain: Optional[str] = None
    network: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    decimals: Optional[int] = None
    supply: Optional[str] = None
    credentials: Optional[str] = None
    create_pool: Optional[str] = None
    dex_choice: Optional[str] = None
    pool_token_amount: Optional[str] = None
    pool_base_amount: Optional[str] = None

    @property
    def is_solana(self) -> bool:
        return (self.blockchain or "").strip().lower() == BackendFamily.SOLANA.value

    @property
    def wants_pool(self) -> bool:
        """Only an exact case-insensitive 'yes' opts in; any other answer means no."""
        return self.create_pool is not None and self.create_pool.lower() == "yes"

    def __repr__(self) -> str:
        # credentials never appear in logs or tracebacks
        masked = "***" if self.credentials else None
        return (f"DeploymentRequest(blockchain={self.blockchain!r}, network={self.network!r}, "
                f"name={self.name!r}, symbol={self.symbol!r}, decimals={self.decimals!r}, "
                f"supply={self.supply!r}, credentials={masked!r}, create_pool={self.create_pool!r}, "
                f"dex_choice={self.dex_choice!r}, pool_token_amount={self.pool_token_amount!r}, "
                f"pool_base_amount={self.pool_base_amount!r})")


@dataclass(frozen=True)
class TokenSpec:
    """Validated token parameters. `total_supply_base_units` is the only supply a backend consumes."""
    name: str
    symbol: str
    decimals: int
    total_supply_base_units: int


@dataclass(frozen=True)
class PoolAmounts:
    """Pool funding request as typed by the user (human units, validated grammar)."""
    token_amount: str
    base_amount: str


@dataclass(frozen=True)
class DeploymentResult:
    family: BackendFamily
    asset_address: str
    transaction_id: str
    network_display_name: str
    signer_address: str
    explorer_url: str


class PoolStatus(str, Enum):
    CREATED = "created"
    MANUAL_SETUP_REQUIRED = "manual_setup_required"


@dataclass(frozen=True)
class PoolResult:
    """
    Outcome of a pool attempt. Either a created pool (address + transaction) or
    a manual-setup outcome carrying guidance text instead of an address.
    """
    status: PoolStatus
    token_amount: str
    base_amount: str
    native_symbol: str
    pool_address: Optional[str] = None
    transaction_id: Optional[str] = None
    explorer_url: Optional[str] = None
    dex_name: Optional[str] = None
    guidance: Optional[str] = None
    pair_preexisted: Optional[bool] = None
    notes: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_created(self) -> bool:
        return self.status is PoolStatus.CREATED


@dataclass(frozen=True)
class BalanceCheck:
    token_balance: int
    native_balance: int
    token_required: int
    native_required: int

    @property
    def has_enough_tokens(self) -> bool:
        return self.token_balance >= self.token_required

    @property
    def has_enough_native(self) -> bool:
        return self.native_balance >= self.native_required


@dataclass(frozen=True)
class PoolInfo:
    exists: bool
    pair_address: Optional[str] = None


@dataclass(frozen=True)
class TokenInfo:
    family: BackendFamily
    address: str
    network_display_name: str
    explorer_url: str
    decimals: int
    supply: int
    name: Optional[str] = None
    symbol: Optional[str] = None
    fee_collector: Optional[str] = None
    mint_authority: Optional[str] = None
    freeze_authority: Optional[str] = None
