"""Checked fixed-width unsigned arithmetic.

Python ints never overflow, so width is enforced explicitly: every helper takes
a `bits` domain (256 by default) and raises `ArithmeticOverflowError` when the
exact result does not fit. Narrowing back to 128/64 bits is a separate, explicit
range-checked step (`narrow`).

Division is floor division (`//`) on non-negative operands, so it truncates
toward zero exactly like unsigned machine division.
"""

from __future__ import annotations

import math

from .errors import ArithmeticOverflowError


U64_MAX: int = (1 << 64) - 1
U128_MAX: int = (1 << 128) - 1
U256_MAX: int = (1 << 256) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _max_for(bits: int) -> int:
    if bits <= 0:
        raise ValueError(f"bits must be positive: {bits}")
    return (1 << bits) - 1


def require_uint(name: str, value: int, *, bits: int = 256) -> int:
    """Return `value` if it is an unsigned int of at most `bits` bits."""
    _require_int(name, value)
    if value < 0:
        raise ArithmeticOverflowError(f"{name} must be non-negative: {value}")
    if value > _max_for(bits):
        raise ArithmeticOverflowError(f"{name} does not fit in u{bits}: {value}")
    return value


def checked_add(a: int, b: int, *, bits: int = 256) -> int:
    require_uint("a", a, bits=bits)
    require_uint("b", b, bits=bits)
    out = a + b
    if out > _max_for(bits):
        raise ArithmeticOverflowError(f"u{bits} add overflow: {a} + {b}")
    return out


def checked_sub(a: int, b: int, *, bits: int = 256) -> int:
    require_uint("a", a, bits=bits)
    require_uint("b", b, bits=bits)
    if b > a:
        raise ArithmeticOverflowError(f"u{bits} sub underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int, *, bits: int = 256) -> int:
    require_uint("a", a, bits=bits)
    require_uint("b", b, bits=bits)
    out = a * b
    if out > _max_for(bits):
        raise ArithmeticOverflowError(f"u{bits} mul overflow: {a} * {b}")
    return out


def checked_div(a: int, b: int, *, bits: int = 256) -> int:
    """Floor division. A zero divisor is reported as an overflow."""
    require_uint("a", a, bits=bits)
    require_uint("b", b, bits=bits)
    if b == 0:
        raise ArithmeticOverflowError(f"u{bits} division by zero: {a} / 0")
    return a // b


def checked_shl(a: int, shift: int, *, bits: int = 256) -> int:
    """Left shift that fails instead of dropping high bits."""
    require_uint("a", a, bits=bits)
    _require_int("shift", shift)
    if not (0 <= shift < bits):
        raise ArithmeticOverflowError(f"u{bits} shift out of range: {shift}")
    out = a << shift
    if out > _max_for(bits):
        raise ArithmeticOverflowError(f"u{bits} shl overflow: {a} << {shift}")
    return out


def mul_div_floor(a: int, b: int, denom: int, *, bits: int = 256) -> int:
    """floor(a * b / denom) with a `bits`-wide intermediate."""
    return checked_div(checked_mul(a, b, bits=bits), denom, bits=bits)


def narrow(value: int, bits: int) -> int:
    """Range-checked narrowing of a wide intermediate to `bits` bits."""
    _require_int("value", value)
    if value < 0 or value > _max_for(bits):
        raise ArithmeticOverflowError(f"value does not fit in u{bits}: {value}")
    return value


def to_u64(value: int) -> int:
    return narrow(value, 64)


def to_u128(value: int) -> int:
    return narrow(value, 128)


def isqrt_u256(x: int) -> int:
    """Floor square root over the u256 domain."""
    require_uint("x", x, bits=256)
    return math.isqrt(x)
