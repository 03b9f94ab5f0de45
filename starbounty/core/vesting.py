"""
Vesting grants and locked-balance snapshots.

A grant is owned by the external vesting protocol; the engines only read it.
The locked balance of a grant at `now` is

    locked = net_deposited - vested_amount_at(now) - withdrawn

evaluated with checked subtraction. A negative logical result means the grant
record is inconsistent and aborts the whole cycle; it is never clamped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable, Iterable

from .bigmath import checked_add, checked_sub, require_uint
from .types import LockedSnapshot


logger = logging.getLogger(__name__)


class VestingSchedule:
    """Interface: amount vested as of a unix timestamp.

    Implementations must be non-decreasing in `timestamp` and bounded by the
    grant's deposited amount.
    """

    def vested_amount_at(self, timestamp: int) -> int:
        raise NotImplementedError


@dataclass(frozen=True)
class FixedVestedAmount(VestingSchedule):
    """A schedule already evaluated by the vesting protocol (one value per read)."""

    vested: int

    def __post_init__(self) -> None:
        require_uint("vested", self.vested, bits=64)

    def vested_amount_at(self, timestamp: int) -> int:
        return self.vested


@dataclass(frozen=True)
class LinearVestingSchedule(VestingSchedule):
    """Periodic unlock with an optional cliff.

    Nothing is vested before the cliff instant (`cliff`, or `start_time` when
    `cliff` is 0). From then on `cliff_amount` plus `amount_per_period` for every
    full `period` elapsed is vested, capped at `net_amount_deposited`.
    """

    start_time: int
    net_amount_deposited: int
    period: int
    amount_per_period: int
    cliff: int = 0
    cliff_amount: int = 0

    def __post_init__(self) -> None:
        for name, v in (
            ("start_time", self.start_time),
            ("net_amount_deposited", self.net_amount_deposited),
            ("period", self.period),
            ("amount_per_period", self.amount_per_period),
            ("cliff", self.cliff),
            ("cliff_amount", self.cliff_amount),
        ):
            require_uint(name, v, bits=64)
        if self.period <= 0:
            raise ValueError("period must be positive")
        if self.cliff and self.cliff < self.start_time:
            raise ValueError("cliff must not precede start_time")
        if self.cliff_amount > self.net_amount_deposited:
            raise ValueError("cliff_amount must be <= net_amount_deposited")

    @property
    def cliff_time(self) -> int:
        return self.cliff if self.cliff else self.start_time

    def vested_amount_at(self, timestamp: int) -> int:
        if timestamp < self.cliff_time:
            return 0
        periods = (timestamp - self.cliff_time) // self.period
        vested = self.cliff_amount + periods * self.amount_per_period
        return min(vested, self.net_amount_deposited)


@dataclass(frozen=True)
class Grant:
    """Read-only view of one vesting grant."""

    id: Hashable
    net_deposited: int
    withdrawn: int
    schedule: VestingSchedule
    recipient: Hashable

    def __post_init__(self) -> None:
        require_uint("net_deposited", self.net_deposited, bits=64)
        require_uint("withdrawn", self.withdrawn, bits=64)
        if not isinstance(self.schedule, VestingSchedule):
            raise TypeError("schedule must be a VestingSchedule")

    def vested_amount_at(self, timestamp: int) -> int:
        return self.schedule.vested_amount_at(timestamp)


def locked_amount(grant: Grant, now: int) -> int:
    """Currently-locked balance of `grant` at `now` (u64, checked)."""
    vested = require_uint("vested", grant.vested_amount_at(now), bits=64)
    remaining = checked_sub(grant.net_deposited, vested, bits=64)
    return checked_sub(remaining, grant.withdrawn, bits=64)


@dataclass(frozen=True)
class LockedTotals:
    snapshots: tuple[LockedSnapshot, ...]
    initial_locked: int
    total_locked: int


def snapshot_grants(grants: Iterable[Grant], now: int) -> LockedTotals:
    """
    Evaluate every grant at the same `now`.

    `initial_locked` sums `net_deposited` over the grants passed in, so it is
    recomputed from the live grant set on every call.
    """
    snapshots: list[LockedSnapshot] = []
    initial_locked = 0
    total_locked = 0
    for grant in grants:
        locked = locked_amount(grant, now)
        initial_locked = checked_add(initial_locked, grant.net_deposited, bits=64)
        total_locked = checked_add(total_locked, locked, bits=64)
        snapshots.append(LockedSnapshot(grant_id=grant.id, locked=locked))
        logger.debug("grant %r locked=%d of net_deposited=%d", grant.id, locked, grant.net_deposited)

    if total_locked > initial_locked:
        raise AssertionError("total_locked exceeds initial_locked")

    return LockedTotals(
        snapshots=tuple(snapshots),
        initial_locked=initial_locked,
        total_locked=total_locked,
    )
