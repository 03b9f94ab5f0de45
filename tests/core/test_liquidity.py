# [TESTER] v1

from __future__ import annotations

import pytest

from starbounty.core.bigmath import U64_MAX
from starbounty.core.errors import ArithmeticOverflowError
from starbounty.core.liquidity import (
    calculate_liquidity,
    liquidity_for_request,
    liquidity_from_a,
    liquidity_from_b,
)
from starbounty.core.types import LiquidityRequest


def test_side_formulas() -> None:
    assert liquidity_from_a(10, sqrt_price=200, sqrt_max_price=300) == 10 * 300 * 200 // 100
    assert liquidity_from_b(10, sqrt_price=200, sqrt_min_price=100) == (10 << 128) // 100


def test_takes_minimum_side() -> None:
    assert calculate_liquidity(10, 10, 200, 100, 300) == 6000


def test_minimum_law() -> None:
    a, b, s, lo, hi = 1_000_000, 5_000_000, 1 << 64, (1 << 64) - (1 << 60), (1 << 64) + (1 << 60)
    liq = calculate_liquidity(a, b, s, lo, hi)
    assert liq <= liquidity_from_a(a, s, hi)
    assert liq <= liquidity_from_b(b, s, lo)
    assert liq in (liquidity_from_a(a, s, hi), liquidity_from_b(b, s, lo))


def test_request_wrapper() -> None:
    req = LiquidityRequest(
        token_a_amount=10, token_b_amount=10, sqrt_price=200, sqrt_min_price=100, sqrt_max_price=300
    )
    assert liquidity_for_request(req) == 6000


def test_price_on_upper_bound_fails() -> None:
    with pytest.raises(ArithmeticOverflowError):
        calculate_liquidity(10, 10, 300, 100, 300)


def test_price_on_lower_bound_fails() -> None:
    with pytest.raises(ArithmeticOverflowError):
        calculate_liquidity(10, 10, 100, 100, 300)


def test_price_below_range_fails() -> None:
    with pytest.raises(ArithmeticOverflowError):
        calculate_liquidity(10, 10, 50, 100, 300)


def test_intermediate_overflow_fails() -> None:
    hi = (1 << 128) - 1
    with pytest.raises(ArithmeticOverflowError):
        calculate_liquidity(U64_MAX, 1, hi - 1, 1, hi)


def test_result_wider_than_u128_fails() -> None:
    # min side is ~2**192: fits u256 but not u128
    s = 1 << 80
    with pytest.raises(ArithmeticOverflowError):
        calculate_liquidity(1 << 60, U64_MAX, s, s - 1, s + 1)
