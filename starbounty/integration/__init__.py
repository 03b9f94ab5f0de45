"""
Integration layer: client interfaces and the launch orchestration engine.
"""

from .clients import (
    AmmClient,
    CollectFeeMode,
    GrantParameters,
    InitializePoolParameters,
    PoolFeeParameters,
    PoolInfo,
    TokenLedger,
    VestingClient,
)
from .launch_engine import DepositResult, LaunchEngine, PoolInitResult

__all__ = [
    "AmmClient",
    "CollectFeeMode",
    "GrantParameters",
    "InitializePoolParameters",
    "PoolFeeParameters",
    "PoolInfo",
    "TokenLedger",
    "VestingClient",
    "DepositResult",
    "LaunchEngine",
    "PoolInitResult",
]
