"""
Concentrated-liquidity sizing for a bounded price range.

Sqrt prices are Q64.64 (`sqrt(P) * 2**64`). For a position over
[sqrt_min, sqrt_max] at the current sqrt_price, each token alone bounds the
liquidity it can back:

    L_a = amount_a * sqrt_max * sqrt_price / (sqrt_max - sqrt_price)
    L_b = (amount_b << 128) / (sqrt_price - sqrt_min)

The position gets `min(L_a, L_b)`, so neither token amount is exceeded.
All intermediates are u256; the result is narrowed to u128.
"""

from __future__ import annotations

from .bigmath import (
    checked_div,
    checked_mul,
    checked_shl,
    checked_sub,
    require_uint,
    to_u128,
)
from .types import LiquidityRequest


def liquidity_from_a(amount_a: int, sqrt_price: int, sqrt_max_price: int) -> int:
    """Liquidity backed by token A alone (u256, not narrowed)."""
    require_uint("amount_a", amount_a, bits=64)
    width = checked_sub(sqrt_max_price, sqrt_price, bits=128)
    numerator = checked_mul(checked_mul(amount_a, sqrt_max_price), sqrt_price)
    return checked_div(numerator, width)


def liquidity_from_b(amount_b: int, sqrt_price: int, sqrt_min_price: int) -> int:
    """Liquidity backed by token B alone (u256, not narrowed)."""
    require_uint("amount_b", amount_b, bits=64)
    width = checked_sub(sqrt_price, sqrt_min_price, bits=128)
    return checked_div(checked_shl(amount_b, 128), width)


def calculate_liquidity(
    amount_a: int,
    amount_b: int,
    sqrt_price: int,
    sqrt_min_price: int,
    sqrt_max_price: int,
) -> int:
    """
    Liquidity obtainable from both amounts at `sqrt_price`.

    A price on or outside a bound gives a zero or negative range width and
    fails with `ArithmeticOverflowError`, as does a result wider than u128.
    """
    l_from_a = liquidity_from_a(amount_a, sqrt_price, sqrt_max_price)
    l_from_b = liquidity_from_b(amount_b, sqrt_price, sqrt_min_price)
    return to_u128(min(l_from_a, l_from_b))


def liquidity_for_request(req: LiquidityRequest) -> int:
    return calculate_liquidity(
        req.token_a_amount,
        req.token_b_amount,
        req.sqrt_price,
        req.sqrt_min_price,
        req.sqrt_max_price,
    )
