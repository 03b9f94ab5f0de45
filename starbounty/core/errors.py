"""Exception types for the starbounty engines.

Every failure is fatal for the call that raised it: the engines never retry
and never return partial results.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for all engine failures."""


class ArithmeticOverflowError(EngineError):
    """A checked add/sub/mul/div/shift or a narrowing step left its domain."""


class InvalidPreconditionError(EngineError, ValueError):
    """Caller misuse: zero amounts, degenerate ranges, out-of-bounds prices."""


class InfeasibleRatioError(EngineError):
    """The solved price falls outside the requested range."""

    def __init__(self, sqrt_price: int, sqrt_min_price: int, sqrt_max_price: int) -> None:
        self.sqrt_price = sqrt_price
        self.sqrt_min_price = sqrt_min_price
        self.sqrt_max_price = sqrt_max_price
        super().__init__(
            f"sqrt_price {sqrt_price} outside range [{sqrt_min_price}, {sqrt_max_price}]"
        )


class CooldownActiveError(InvalidPreconditionError):
    """A distribution was requested before the cooldown window elapsed."""

    def __init__(self, now: int, next_allowed_at: int) -> None:
        self.now = now
        self.next_allowed_at = next_allowed_at
        super().__init__(f"distribution cooldown active: now={now} < next_allowed_at={next_allowed_at}")


class InvalidCollectFeeModeError(InvalidPreconditionError):
    """The pool does not collect fees in the settlement token only."""


class UnknownRecordError(InvalidPreconditionError):
    """No persistent record exists for the requested mint."""
