"""
Pool bootstrap planning.

Runs once at pool creation:

1. size the committed token-A amount (`commitment_bps` of the creator's balance),
2. estimate a sqrt-price range from the amount ratio,
3. solve the exact init price inside that range,
4. size liquidity for the full deposit of both amounts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .bigmath import U128_MAX, mul_div_floor, require_uint, to_u64
from .errors import InvalidPreconditionError
from .liquidity import calculate_liquidity
from .pricing import (
    MAX_SQRT_PRICE,
    MIN_SQRT_PRICE,
    RANGE_FACTOR_DENOM,
    RANGE_MAX_FACTOR,
    RANGE_MIN_FACTOR,
    estimate_sqrt_price_range,
    solve_init_sqrt_price_in_range,
)
from .types import PoolBootstrapRequest, PoolBootstrapResult


logger = logging.getLogger(__name__)


COMMITMENT_BPS = 1_000
POOL_AMOUNT = 1_000_000_000_000
CLIFF_FEE_NUMERATOR = 2_500_000


@dataclass(frozen=True)
class BootstrapParams:
    commitment_bps: int = COMMITMENT_BPS
    pool_amount: int = POOL_AMOUNT
    range_min_factor: int = RANGE_MIN_FACTOR
    range_max_factor: int = RANGE_MAX_FACTOR
    factor_denom: int = RANGE_FACTOR_DENOM
    min_sqrt_price: int = MIN_SQRT_PRICE
    max_sqrt_price: int = MAX_SQRT_PRICE
    cliff_fee_numerator: int = CLIFF_FEE_NUMERATOR

    def __post_init__(self) -> None:
        for name, v in (
            ("commitment_bps", self.commitment_bps),
            ("pool_amount", self.pool_amount),
            ("range_min_factor", self.range_min_factor),
            ("range_max_factor", self.range_max_factor),
            ("factor_denom", self.factor_denom),
            ("min_sqrt_price", self.min_sqrt_price),
            ("max_sqrt_price", self.max_sqrt_price),
            ("cliff_fee_numerator", self.cliff_fee_numerator),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if not (0 < self.commitment_bps <= 10_000):
            raise ValueError(f"commitment_bps must be in (0, 10000]: {self.commitment_bps}")
        if self.pool_amount <= 0:
            raise ValueError("pool_amount must be positive")
        require_uint("pool_amount", self.pool_amount, bits=64)
        if self.factor_denom <= 0:
            raise ValueError("factor_denom must be positive")
        if not (self.range_min_factor < self.factor_denom < self.range_max_factor):
            raise ValueError("range factors must bracket factor_denom")
        if not (0 < self.min_sqrt_price < self.max_sqrt_price <= U128_MAX):
            raise ValueError("protocol sqrt price bounds must satisfy 0 < min < max <= U128_MAX")


def commitment_amount(balance: int, commitment_bps: int = COMMITMENT_BPS) -> int:
    """Share of `balance` committed to the pool, floored (u64)."""
    require_uint("balance", balance, bits=64)
    return to_u64(mul_div_floor(balance, commitment_bps, 10_000, bits=64))


def plan_pool_bootstrap(req: PoolBootstrapRequest, params: BootstrapParams = BootstrapParams()) -> PoolBootstrapResult:
    """Range -> price -> liquidity for an initial two-sided deposit."""
    sqrt_min, sqrt_max = estimate_sqrt_price_range(
        req.token_a_amount,
        req.token_b_amount,
        min_factor=params.range_min_factor,
        max_factor=params.range_max_factor,
        factor_denom=params.factor_denom,
        protocol_min_sqrt_price=params.min_sqrt_price,
        protocol_max_sqrt_price=params.max_sqrt_price,
    )
    sqrt_price = solve_init_sqrt_price_in_range(req.token_a_amount, req.token_b_amount, sqrt_min, sqrt_max)
    liquidity = calculate_liquidity(req.token_a_amount, req.token_b_amount, sqrt_price, sqrt_min, sqrt_max)
    if liquidity <= 0:
        raise InvalidPreconditionError("bootstrap liquidity must be positive")

    logger.info(
        "bootstrap plan: amount_a=%d amount_b=%d sqrt_price=%d range=[%d, %d] liquidity=%d",
        req.token_a_amount,
        req.token_b_amount,
        sqrt_price,
        sqrt_min,
        sqrt_max,
        liquidity,
    )
    return PoolBootstrapResult(
        sqrt_price=sqrt_price,
        sqrt_min_price=sqrt_min,
        sqrt_max_price=sqrt_max,
        liquidity=liquidity,
    )


def plan_from_creator_balance(token_a_balance: int, params: BootstrapParams = BootstrapParams()) -> PoolBootstrapResult:
    amount_a = commitment_amount(token_a_balance, params.commitment_bps)
    return plan_pool_bootstrap(
        PoolBootstrapRequest(token_a_amount=amount_a, token_b_amount=params.pool_amount),
        params,
    )
