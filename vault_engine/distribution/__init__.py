"""
Distribution — расчёт распределения VT/ADA и таблиц множителей vault
"""

from vault_engine.distribution.calculator import (
    AcquirerMultiplierMismatch,
    AcquirerTokenResult,
    ContributorTokenResult,
    DistributionCalculator,
    DistributionConfig,
    LiquidityPoolResult,
    MultiplierResult,
    PriceType,
    ReserveCheck,
)
from vault_engine.distribution.policy_grouping import (
    AllocationItem,
    GroupedMultipliers,
    GroupingStats,
    MultiplierTable,
    PolicyGroupingEngine,
    group_multipliers,
)
from vault_engine.distribution.simulation import DistributionPlan, DistributionSimulator

__all__ = [
    "AcquirerMultiplierMismatch",
    "AcquirerTokenResult",
    "ContributorTokenResult",
    "DistributionCalculator",
    "DistributionConfig",
    "LiquidityPoolResult",
    "MultiplierResult",
    "PriceType",
    "ReserveCheck",
    "AllocationItem",
    "GroupedMultipliers",
    "GroupingStats",
    "MultiplierTable",
    "PolicyGroupingEngine",
    "group_multipliers",
    "DistributionPlan",
    "DistributionSimulator",
]
