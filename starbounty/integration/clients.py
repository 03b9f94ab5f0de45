"""
Client interfaces for the services the launch engine calls through.

The engine holds no knowledge of transport or authentication: hosts subclass
these interfaces to bind them to a real AMM, vesting service and token ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Sequence

from ..core.vesting import Grant


@unique
class CollectFeeMode(IntEnum):
    BOTH_TOKENS = 0
    ONLY_B = 1


@dataclass(frozen=True)
class PoolFeeParameters:
    cliff_fee_numerator: int
    base_fee_mode: int = 0
    dynamic_fee: bool = False


@dataclass(frozen=True)
class InitializePoolParameters:
    mint_a: str
    mint_b: str
    token_a_amount: int
    token_b_amount: int
    sqrt_price: int
    sqrt_min_price: int
    sqrt_max_price: int
    liquidity: int
    pool_fees: PoolFeeParameters
    collect_fee_mode: CollectFeeMode = CollectFeeMode.ONLY_B
    has_alpha_vault: bool = False
    activation_type: int = 0
    activation_point: int | None = None


@dataclass(frozen=True)
class PoolInfo:
    """Pool state as reported by the AMM."""

    pool: str
    sqrt_price: int
    sqrt_min_price: int
    sqrt_max_price: int
    collect_fee_mode: CollectFeeMode


@dataclass(frozen=True)
class GrantParameters:
    sender: str
    recipient: str
    mint: str
    index: int
    start_time: int
    net_amount_deposited: int
    period: int
    amount_per_period: int
    cliff: int = 0
    cliff_amount: int = 0


class AmmClient:
    """Interface to the AMM that owns pool and position state."""

    def initialize_pool(self, params: InitializePoolParameters) -> str:
        """Create the pool and its seed position; returns the pool id."""
        raise NotImplementedError

    def get_pool(self, pool: str) -> PoolInfo:
        raise NotImplementedError

    def create_position(self, pool: str, owner: str) -> str:
        """Returns the position id."""
        raise NotImplementedError

    def add_liquidity(
        self,
        position: str,
        liquidity_delta: int,
        token_a_amount_threshold: int,
        token_b_amount_threshold: int,
    ) -> None:
        raise NotImplementedError

    def swap(self, pool: str, payer: str, amount_in: int, minimum_amount_out: int) -> int:
        """Exact-in swap of token A for token B; returns the amount out."""
        raise NotImplementedError

    def claim_position_fee(self, position: str) -> int:
        """Move accrued fees to the position owner; returns the amount claimed."""
        raise NotImplementedError


class VestingClient:
    """Interface to the vesting service that owns grant records."""

    def create_grant(self, params: GrantParameters) -> str:
        """Returns the new grant id."""
        raise NotImplementedError

    def get_grant(self, grant_id: str) -> Grant:
        raise NotImplementedError

    def vested_amount_at(self, grant_id: str, timestamp: int) -> int:
        return self.get_grant(grant_id).vested_amount_at(timestamp)


class TokenLedger:
    """Interface to token custody: balances and transfers."""

    def balance_of(self, account: str, mint: str) -> int:
        raise NotImplementedError

    def transfer_batch(self, source: str, mint: str, transfers: Sequence[tuple[str, int]]) -> None:
        """
        Move `mint` from `source` for every `(destination, amount)` leg, all or nothing.

        If any leg fails, no leg may take effect.
        """
        raise NotImplementedError
