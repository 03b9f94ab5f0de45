# [TESTER] v1

from __future__ import annotations

import pytest

from starbounty.core.bigmath import U64_MAX, U128_MAX
from starbounty.core.bootstrap import (
    POOL_AMOUNT,
    BootstrapParams,
    commitment_amount,
    plan_from_creator_balance,
    plan_pool_bootstrap,
)
from starbounty.core.errors import ArithmeticOverflowError, InvalidPreconditionError
from starbounty.core.liquidity import calculate_liquidity
from starbounty.core.pricing import estimate_sqrt_price_range
from starbounty.core.types import PoolBootstrapRequest


def test_commitment_amount() -> None:
    assert commitment_amount(50_000_000_000_000) == 5_000_000_000_000
    assert commitment_amount(9) == 0
    assert commitment_amount(10_000, 2_500) == 2_500


def test_commitment_amount_overflows_u64_product() -> None:
    with pytest.raises(ArithmeticOverflowError):
        commitment_amount(U64_MAX)


def test_plan_for_reference_amounts() -> None:
    req = PoolBootstrapRequest(token_a_amount=1_000_000, token_b_amount=10_000_000_000)
    plan = plan_pool_bootstrap(req)

    lo, hi = estimate_sqrt_price_range(1_000_000, 10_000_000_000)
    assert (plan.sqrt_min_price, plan.sqrt_max_price) == (lo, hi)
    assert lo <= plan.sqrt_price <= hi
    assert 0 < plan.liquidity <= U128_MAX
    assert plan.liquidity == calculate_liquidity(1_000_000, 10_000_000_000, plan.sqrt_price, lo, hi)


def test_plan_from_creator_balance() -> None:
    plan = plan_from_creator_balance(10_000_000_000_000)
    direct = plan_pool_bootstrap(PoolBootstrapRequest(token_a_amount=1_000_000_000_000, token_b_amount=POOL_AMOUNT))
    assert plan == direct
    assert plan.liquidity > 0


def test_empty_creator_balance_rejected() -> None:
    with pytest.raises(InvalidPreconditionError):
        plan_from_creator_balance(0)


def test_custom_params_flow_through() -> None:
    params = BootstrapParams(commitment_bps=5_000, pool_amount=2_000_000_000_000)
    plan = plan_from_creator_balance(4_000_000_000_000, params)
    direct = plan_pool_bootstrap(
        PoolBootstrapRequest(token_a_amount=2_000_000_000_000, token_b_amount=2_000_000_000_000), params
    )
    assert plan == direct


class TestBootstrapParams:
    def test_defaults(self):
        p = BootstrapParams()
        assert p.commitment_bps == 1_000
        assert p.pool_amount == 1_000_000_000_000
        assert p.cliff_fee_numerator == 2_500_000

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"commitment_bps": 0},
            {"commitment_bps": 10_001},
            {"pool_amount": 0},
            {"range_min_factor": 10_000},
            {"range_max_factor": 9_000},
            {"min_sqrt_price": 0},
            {"max_sqrt_price": U128_MAX + 1},
        ],
    )
    def test_rejects(self, kwargs):
        with pytest.raises(ValueError):
            BootstrapParams(**kwargs)

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            BootstrapParams(pool_amount="1000")
