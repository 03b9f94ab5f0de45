"""Data types shared by the starbounty engines.

All types are frozen dataclasses (immutable). Amounts are integer minor units:
- token amounts and balances are u64,
- sqrt prices are Q64.64 fixed point (u128),
- liquidity is u128,
- timestamps are signed unix seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from .bigmath import U64_MAX, U128_MAX


def _check_range(name: str, value: int, lo: int, hi: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if not (lo <= value <= hi):
        raise ValueError(f"{name} must be in [{lo}, {hi}]: {value}")


@dataclass(frozen=True)
class LockedSnapshot:
    """Locked balance of one grant at the cycle's single `now`."""

    grant_id: Hashable
    locked: int

    def __post_init__(self) -> None:
        _check_range("locked", self.locked, 0, U64_MAX)


@dataclass(frozen=True)
class DistributionCycleState:
    """Per-distribution-token cooldown record. Advanced only by returning a new value."""

    last_distributed_at: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.last_distributed_at, int) or isinstance(self.last_distributed_at, bool):
            raise TypeError("last_distributed_at must be an int")


@dataclass(frozen=True)
class Payout:
    grant_id: Hashable
    recipient: Hashable
    amount: int

    def __post_init__(self) -> None:
        _check_range("amount", self.amount, 1, U64_MAX)


@dataclass(frozen=True)
class DistributionResult:
    """Output of one distribution cycle.

    `payouts` keeps grant order; grants whose floored share is zero are absent.
    `creator_remainder` is everything in the settlement balance not paid out.
    """

    payouts: tuple[Payout, ...]
    creator_remainder: int
    new_state: DistributionCycleState

    # Cycle diagnostics (zero on the dust no-op path).
    initial_locked: int = 0
    total_locked: int = 0
    eligible_share_bps: int = 0
    investor_fee: int = 0
    distributable: int = 0

    @property
    def total_paid(self) -> int:
        return sum(p.amount for p in self.payouts)

    @property
    def is_noop(self) -> bool:
        return not self.payouts and self.creator_remainder == 0


@dataclass(frozen=True)
class LiquidityRequest:
    token_a_amount: int
    token_b_amount: int
    sqrt_price: int
    sqrt_min_price: int
    sqrt_max_price: int

    def __post_init__(self) -> None:
        _check_range("token_a_amount", self.token_a_amount, 0, U64_MAX)
        _check_range("token_b_amount", self.token_b_amount, 0, U64_MAX)
        _check_range("sqrt_price", self.sqrt_price, 0, U128_MAX)
        _check_range("sqrt_min_price", self.sqrt_min_price, 0, U128_MAX)
        _check_range("sqrt_max_price", self.sqrt_max_price, 0, U128_MAX)


@dataclass(frozen=True)
class PoolBootstrapRequest:
    token_a_amount: int
    token_b_amount: int

    def __post_init__(self) -> None:
        _check_range("token_a_amount", self.token_a_amount, 0, U64_MAX)
        _check_range("token_b_amount", self.token_b_amount, 0, U64_MAX)


@dataclass(frozen=True)
class PoolBootstrapResult:
    sqrt_price: int
    sqrt_min_price: int
    sqrt_max_price: int
    liquidity: int

    def __post_init__(self) -> None:
        for name, v in (
            ("sqrt_price", self.sqrt_price),
            ("sqrt_min_price", self.sqrt_min_price),
            ("sqrt_max_price", self.sqrt_max_price),
            ("liquidity", self.liquidity),
        ):
            _check_range(name, v, 0, U128_MAX)
        if not (self.sqrt_min_price <= self.sqrt_price <= self.sqrt_max_price):
            raise ValueError("sqrt_price must lie within [sqrt_min_price, sqrt_max_price]")
