"""
Core engines: fee distribution and pool bootstrap math.
"""

from .bootstrap import BootstrapParams, commitment_amount, plan_from_creator_balance, plan_pool_bootstrap
from .distribution import DistributionParams, eligible_share_bps, run_distribution
from .errors import (
    ArithmeticOverflowError,
    CooldownActiveError,
    EngineError,
    InfeasibleRatioError,
    InvalidCollectFeeModeError,
    InvalidPreconditionError,
    UnknownRecordError,
)
from .liquidity import calculate_liquidity, liquidity_for_request, liquidity_from_a, liquidity_from_b
from .pricing import estimate_sqrt_price_range, solve_init_sqrt_price, solve_init_sqrt_price_in_range
from .types import (
    DistributionCycleState,
    DistributionResult,
    LiquidityRequest,
    LockedSnapshot,
    Payout,
    PoolBootstrapRequest,
    PoolBootstrapResult,
)
from .vesting import FixedVestedAmount, Grant, LinearVestingSchedule, VestingSchedule, locked_amount, snapshot_grants

__all__ = [
    "BootstrapParams",
    "commitment_amount",
    "plan_from_creator_balance",
    "plan_pool_bootstrap",
    "DistributionParams",
    "eligible_share_bps",
    "run_distribution",
    "ArithmeticOverflowError",
    "CooldownActiveError",
    "EngineError",
    "InfeasibleRatioError",
    "InvalidCollectFeeModeError",
    "InvalidPreconditionError",
    "UnknownRecordError",
    "calculate_liquidity",
    "liquidity_for_request",
    "liquidity_from_a",
    "liquidity_from_b",
    "estimate_sqrt_price_range",
    "solve_init_sqrt_price",
    "solve_init_sqrt_price_in_range",
    "DistributionCycleState",
    "DistributionResult",
    "LiquidityRequest",
    "LockedSnapshot",
    "Payout",
    "PoolBootstrapRequest",
    "PoolBootstrapResult",
    "FixedVestedAmount",
    "Grant",
    "LinearVestingSchedule",
    "VestingSchedule",
    "locked_amount",
    "snapshot_grants",
]
