"""
Bootstrap pricing: range estimation and the closed-form price solve.

`estimate_sqrt_price_range` brackets the amount-ratio price by roughly +/-30%
(`sqrt(0.7) ~= 0.8367`, `sqrt(1.3) ~= 1.1402`), clamped to the AMM's global
sqrt-price bounds.

`solve_init_sqrt_price` finds the sqrt price `s` at which both full amounts
back the same liquidity. Equating `L_a(s) == L_b(s)` from `liquidity.py` with
`a = amount_a`, `b = amount_b << 128`, `pa = sqrt_min`, `pb = sqrt_max` gives

    s**2 + (b / (a * pb) - pa) * s - b / a = 0

whose positive root is `(sqrt(delta**2 + 4 * b / a) - delta) / 2` with
`delta = b / (a * pb) - pa`. To stay in unsigned arithmetic the sign of delta
is decided first (`b / a` vs `pa * pb`) and the subtraction order follows it.
"""

from __future__ import annotations

import logging

from .bigmath import (
    U128_MAX,
    checked_add,
    checked_div,
    checked_mul,
    checked_shl,
    checked_sub,
    isqrt_u256,
    mul_div_floor,
    require_uint,
    to_u128,
)
from .errors import InfeasibleRatioError, InvalidPreconditionError


logger = logging.getLogger(__name__)


# Global sqrt-price bounds of the AMM (Q64.64).
MIN_SQRT_PRICE = 4_295_048_016
MAX_SQRT_PRICE = 79_226_673_521_066_979_257_578_248_091

RANGE_MIN_FACTOR = 8_367
RANGE_MAX_FACTOR = 11_402
RANGE_FACTOR_DENOM = 10_000


def estimate_sqrt_price_range(
    amount_a: int,
    total_pool_amount_b: int,
    *,
    min_factor: int = RANGE_MIN_FACTOR,
    max_factor: int = RANGE_MAX_FACTOR,
    factor_denom: int = RANGE_FACTOR_DENOM,
    protocol_min_sqrt_price: int = MIN_SQRT_PRICE,
    protocol_max_sqrt_price: int = MAX_SQRT_PRICE,
) -> tuple[int, int]:
    """Return `(sqrt_min, sqrt_max)` around the price implied by the amounts."""
    require_uint("amount_a", amount_a, bits=64)
    require_uint("total_pool_amount_b", total_pool_amount_b, bits=64)

    estimated_price = checked_div(checked_shl(amount_a, 128), total_pool_amount_b)
    estimated_sqrt = to_u128(isqrt_u256(estimated_price))

    sqrt_min = max(to_u128(mul_div_floor(estimated_sqrt, min_factor, factor_denom)), protocol_min_sqrt_price)
    sqrt_max = min(to_u128(mul_div_floor(estimated_sqrt, max_factor, factor_denom)), protocol_max_sqrt_price)

    if sqrt_min >= sqrt_max:
        raise InvalidPreconditionError(f"degenerate sqrt price range: [{sqrt_min}, {sqrt_max}]")
    if sqrt_min < protocol_min_sqrt_price or sqrt_max > protocol_max_sqrt_price:
        raise InvalidPreconditionError(f"sqrt price range outside protocol bounds: [{sqrt_min}, {sqrt_max}]")

    logger.debug("estimated sqrt price %d, range [%d, %d]", estimated_sqrt, sqrt_min, sqrt_max)
    return sqrt_min, sqrt_max


def solve_init_sqrt_price(amount_a: int, amount_b: int, sqrt_min_price: int, sqrt_max_price: int) -> int:
    """
    Closed-form sqrt price for depositing both full amounts into the range.

    The result is not range-checked; see `solve_init_sqrt_price_in_range`.
    """
    require_uint("amount_a", amount_a, bits=64)
    require_uint("amount_b", amount_b, bits=64)
    require_uint("sqrt_min_price", sqrt_min_price, bits=128)
    require_uint("sqrt_max_price", sqrt_max_price, bits=128)
    if amount_a == 0 or amount_b == 0:
        raise InvalidPreconditionError(f"amounts must be non-zero: ({amount_a}, {amount_b})")
    if sqrt_max_price == 0:
        raise InvalidPreconditionError("sqrt_max_price must be positive")

    a = amount_a
    b = checked_shl(amount_b, 128)
    pa = sqrt_min_price
    pb = sqrt_max_price

    b_over_a = checked_div(b, a)
    four_b_over_a = checked_div(checked_mul(4, b), a)
    b_over_a_pb = checked_div(b_over_a, pb)

    if b_over_a > checked_mul(pa, pb):
        delta = checked_sub(b_over_a_pb, pa)
        root = isqrt_u256(checked_add(checked_mul(delta, delta), four_b_over_a))
        s = checked_sub(root, delta) // 2
        branch = "delta>=0"
    else:
        delta = checked_sub(pa, b_over_a_pb)
        root = isqrt_u256(checked_add(checked_mul(delta, delta), four_b_over_a))
        s = checked_add(root, delta) // 2
        branch = "delta<0"

    logger.debug("solved sqrt price %d (%s, delta=%d)", s, branch, delta)
    return to_u128(s)


def solve_init_sqrt_price_in_range(amount_a: int, amount_b: int, sqrt_min_price: int, sqrt_max_price: int) -> int:
    """Solve, then require `sqrt_min <= s <= sqrt_max` (`InfeasibleRatioError`)."""
    s = solve_init_sqrt_price(amount_a, amount_b, sqrt_min_price, sqrt_max_price)
    if not (sqrt_min_price <= s <= sqrt_max_price):
        raise InfeasibleRatioError(s, sqrt_min_price, sqrt_max_price)
    return s


def sqrt_price_to_price(sqrt_price: int) -> float:
    """Human-readable price from a Q64.64 sqrt price (display only)."""
    if not (0 <= sqrt_price <= U128_MAX):
        raise ValueError(f"sqrt_price out of u128 range: {sqrt_price}")
    return (sqrt_price / float(1 << 64)) ** 2
