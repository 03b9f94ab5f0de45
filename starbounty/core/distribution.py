"""
Fee distribution kernel (deterministic, integer-only).

One cycle splits the settlement-token balance between vesting grants and the
creator:

    f_bps        = min(max_share_bps, total_locked * 10_000 / initial_locked)
    investor_fee = balance * f_bps / 10_000
    distributable = min(investor_fee, daily_cap)
    payout_i     = distributable * locked_i / total_locked        (floored)
    remainder    = balance - sum(payout_i)                         (to creator)

Rounding dust and the uncapped part of the balance both land in the remainder,
so `sum(payouts) + remainder == balance` on every non-dust cycle.

The cooldown record is passed in and a new one is returned; nothing here holds
state between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .bigmath import checked_add, checked_sub, mul_div_floor, require_uint, to_u64
from .errors import CooldownActiveError
from .types import DistributionCycleState, DistributionResult, Payout
from .vesting import Grant, snapshot_grants


logger = logging.getLogger(__name__)


BPS_DENOM = 10_000

DUST_THRESHOLD = 1_000_000
MAX_SHARE_BPS = 1_000
DAILY_CAP = 1_000_000_000
COOLDOWN_SECONDS = 86_400


@dataclass(frozen=True)
class DistributionParams:
    dust_threshold: int = DUST_THRESHOLD
    max_share_bps: int = MAX_SHARE_BPS
    daily_cap: int = DAILY_CAP
    cooldown_seconds: int = COOLDOWN_SECONDS

    def __post_init__(self) -> None:
        for name, v in (
            ("dust_threshold", self.dust_threshold),
            ("max_share_bps", self.max_share_bps),
            ("daily_cap", self.daily_cap),
            ("cooldown_seconds", self.cooldown_seconds),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if self.max_share_bps > BPS_DENOM:
            raise ValueError(f"max_share_bps must be in [0, {BPS_DENOM}]: {self.max_share_bps}")
        require_uint("daily_cap", self.daily_cap, bits=64)


def check_cooldown(now: int, prior_state: DistributionCycleState, cooldown_seconds: int) -> None:
    next_allowed_at = prior_state.last_distributed_at + cooldown_seconds
    if now < next_allowed_at:
        raise CooldownActiveError(now=now, next_allowed_at=next_allowed_at)


def eligible_share_bps(total_locked: int, initial_locked: int, max_share_bps: int = MAX_SHARE_BPS) -> int:
    """Locked fraction in bps, capped. `initial_locked == 0` is an overflow."""
    f_locked_bps = mul_div_floor(total_locked, BPS_DENOM, initial_locked, bits=128)
    return min(max_share_bps, f_locked_bps)


def investor_quote(settlement_balance: int, share_bps: int) -> int:
    return mul_div_floor(settlement_balance, share_bps, BPS_DENOM, bits=128)


def run_distribution(
    now: int,
    settlement_balance: int,
    grants: Sequence[Grant],
    prior_state: DistributionCycleState,
    params: DistributionParams = DistributionParams(),
) -> DistributionResult:
    """
    Run one distribution cycle.

    Raises `CooldownActiveError` if `now` is inside the cooldown window; the
    caller keeps `prior_state` in that case. On every other successful path,
    including the dust no-op, `new_state.last_distributed_at == now`.
    """
    if not isinstance(now, int) or isinstance(now, bool):
        raise TypeError("now must be an int")
    require_uint("settlement_balance", settlement_balance, bits=64)

    check_cooldown(now, prior_state, params.cooldown_seconds)
    new_state = DistributionCycleState(last_distributed_at=now)

    if settlement_balance < params.dust_threshold:
        logger.info(
            "distribution skipped: balance %d below dust threshold %d",
            settlement_balance,
            params.dust_threshold,
        )
        return DistributionResult(payouts=(), creator_remainder=0, new_state=new_state)

    totals = snapshot_grants(grants, now)
    share_bps = eligible_share_bps(totals.total_locked, totals.initial_locked, params.max_share_bps)
    investor_fee = investor_quote(settlement_balance, share_bps)
    distributable = min(investor_fee, params.daily_cap)

    payouts: list[Payout] = []
    paid = 0
    if totals.total_locked > 0:
        for grant, snap in zip(grants, totals.snapshots):
            if snap.locked == 0:
                continue
            share = to_u64(mul_div_floor(distributable, snap.locked, totals.total_locked, bits=128))
            if share == 0:
                continue
            payouts.append(Payout(grant_id=grant.id, recipient=grant.recipient, amount=share))
            paid = checked_add(paid, share, bits=64)

    if paid > distributable:
        raise AssertionError("distribution over-paid")
    remainder = checked_sub(settlement_balance, paid, bits=64)

    logger.info(
        "distribution at %d: f_bps=%d distributable=%d payouts=%d paid=%d remainder=%d",
        now,
        share_bps,
        distributable,
        len(payouts),
        paid,
        remainder,
    )

    return DistributionResult(
        payouts=tuple(payouts),
        creator_remainder=remainder,
        new_state=new_state,
        initial_locked=totals.initial_locked,
        total_locked=totals.total_locked,
        eligible_share_bps=share_bps,
        investor_fee=investor_fee,
        distributable=distributable,
    )
