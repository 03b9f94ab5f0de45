"""Tests for starbounty/core/distribution.py (fee split between grants and creator)."""

from __future__ import annotations

import pytest

from starbounty.core.distribution import (
    COOLDOWN_SECONDS,
    DAILY_CAP,
    DistributionParams,
    eligible_share_bps,
    investor_quote,
    run_distribution,
)
from starbounty.core.errors import ArithmeticOverflowError, CooldownActiveError, InvalidPreconditionError
from starbounty.core.types import DistributionCycleState
from starbounty.core.vesting import FixedVestedAmount, Grant


NOW = 1_700_000_000
FRESH = DistributionCycleState()


def _grant(gid: str, net: int, vested: int, withdrawn: int = 0) -> Grant:
    return Grant(
        id=gid,
        net_deposited=net,
        withdrawn=withdrawn,
        schedule=FixedVestedAmount(vested),
        recipient=f"wallet-{gid}",
    )


# ---------------------------------------------------------------------------
# Reference cycles
# ---------------------------------------------------------------------------

class TestReferenceCycles:
    def test_three_grants_partial_lock(self):
        grants = [_grant("g1", 1000, 1000), _grant("g2", 1000, 500), _grant("g3", 1000, 0)]
        r = run_distribution(NOW, 2_000_000, grants, FRESH)

        assert r.initial_locked == 3000
        assert r.total_locked == 1500
        assert r.eligible_share_bps == 1000
        assert r.investor_fee == 200_000
        assert r.distributable == 200_000
        assert [(p.grant_id, p.recipient, p.amount) for p in r.payouts] == [
            ("g2", "wallet-g2", 66_666),
            ("g3", "wallet-g3", 133_333),
        ]
        assert r.creator_remainder == 1_800_001
        assert r.new_state.last_distributed_at == NOW

    def test_dust_balance_is_noop_but_advances_state(self):
        r = run_distribution(NOW, 900_000, [_grant("g1", 1000, 0)], FRESH)
        assert r.payouts == ()
        assert r.creator_remainder == 0
        assert r.is_noop
        assert r.new_state.last_distributed_at == NOW

    def test_dust_path_does_not_read_grants(self):
        # no grants at all would be an overflow on the full path
        r = run_distribution(NOW, 999_999, [], FRESH)
        assert r.is_noop

    def test_cooldown_violation(self):
        prior = DistributionCycleState(last_distributed_at=NOW)
        with pytest.raises(CooldownActiveError) as exc_info:
            run_distribution(NOW + 3600, 2_000_000, [_grant("g1", 1000, 0)], prior)
        assert isinstance(exc_info.value, InvalidPreconditionError)
        assert exc_info.value.next_allowed_at == NOW + COOLDOWN_SECONDS
        assert prior.last_distributed_at == NOW

    def test_cooldown_boundary_is_inclusive(self):
        prior = DistributionCycleState(last_distributed_at=NOW)
        r = run_distribution(NOW + COOLDOWN_SECONDS, 2_000_000, [_grant("g1", 1000, 0)], prior)
        assert r.new_state.last_distributed_at == NOW + COOLDOWN_SECONDS


# ---------------------------------------------------------------------------
# Share fraction and caps
# ---------------------------------------------------------------------------

class TestShareAndCaps:
    def test_share_below_max(self):
        # 50 of 1000 still locked -> 500 bps
        r = run_distribution(NOW, 10_000_000, [_grant("g1", 1000, 950)], FRESH)
        assert r.eligible_share_bps == 500
        assert r.investor_fee == 500_000
        assert [p.amount for p in r.payouts] == [500_000]
        assert r.creator_remainder == 9_500_000

    def test_daily_cap_binds(self):
        balance = 20_000_000_000_000
        r = run_distribution(NOW, balance, [_grant("g1", 1000, 0)], FRESH)
        assert r.investor_fee == 2_000_000_000_000
        assert r.distributable == DAILY_CAP
        assert [p.amount for p in r.payouts] == [DAILY_CAP]
        assert r.creator_remainder == balance - DAILY_CAP

    def test_all_vested_sends_everything_to_creator(self):
        grants = [_grant("g1", 1000, 1000), _grant("g2", 500, 400, withdrawn=100)]
        r = run_distribution(NOW, 5_000_000, grants, FRESH)
        assert r.total_locked == 0
        assert r.eligible_share_bps == 0
        assert r.payouts == ()
        assert r.creator_remainder == 5_000_000

    def test_zero_floor_share_is_skipped(self):
        grants = [_grant("big", 1_000_000_000, 0), _grant("tiny", 1, 0)]
        r = run_distribution(NOW, 1_000_000, grants, FRESH)
        assert r.distributable == 100_000
        assert [(p.grant_id, p.amount) for p in r.payouts] == [("big", 99_999)]
        assert r.creator_remainder == 900_001

    def test_no_grants_is_overflow(self):
        with pytest.raises(ArithmeticOverflowError):
            run_distribution(NOW, 2_000_000, [], FRESH)

    def test_inconsistent_grant_aborts_cycle(self):
        grants = [_grant("g1", 1000, 0), _grant("bad", 1000, 900, withdrawn=200)]
        with pytest.raises(ArithmeticOverflowError):
            run_distribution(NOW, 2_000_000, grants, FRESH)

    def test_custom_params(self):
        params = DistributionParams(dust_threshold=10, max_share_bps=10_000, daily_cap=50, cooldown_seconds=0)
        r = run_distribution(NOW, 100, [_grant("g1", 1000, 0)], DistributionCycleState(NOW), params)
        assert r.eligible_share_bps == 10_000
        assert r.distributable == 50
        assert r.creator_remainder == 50

    def test_params_validation(self):
        with pytest.raises(ValueError):
            DistributionParams(max_share_bps=10_001)
        with pytest.raises(ValueError):
            DistributionParams(cooldown_seconds=-1)
        with pytest.raises(TypeError):
            DistributionParams(daily_cap=True)


def test_eligible_share_bps() -> None:
    assert eligible_share_bps(1500, 3000) == 1000
    assert eligible_share_bps(150, 3000) == 500
    assert eligible_share_bps(0, 3000) == 0
    assert eligible_share_bps(3000, 3000, max_share_bps=10_000) == 10_000
    with pytest.raises(ArithmeticOverflowError):
        eligible_share_bps(0, 0)


def test_investor_quote_floors() -> None:
    assert investor_quote(2_000_000, 1000) == 200_000
    assert investor_quote(9_999, 1) == 0
    assert investor_quote(10_000, 1) == 1


def test_balance_wider_than_u64_rejected() -> None:
    with pytest.raises(ArithmeticOverflowError):
        run_distribution(NOW, 1 << 64, [_grant("g1", 1000, 0)], FRESH)
