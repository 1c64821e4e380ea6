"""
Home financing comparison toolkit.

Projects net worth at sale for four ways of buying the same home (all
cash, an 80% mortgage, a mortgage capped at the interest-deduction limit
topped up with box spread borrowing, and a securities-backed loan) and
ranks them against the all-cash purchase.
"""

from .schemas import (
    InputParameters,
    DerivedParameters,
    ScenarioResult,
    ScenarioComparison,
    OpportunityCostBreakdown,
    SCENARIOS,
)
from .model import (
    ScenarioEvaluationError,
    compare_scenarios,
    evaluate,
    opportunity_cost_breakdown,
    rank_scenarios,
)
from .defaults import default_parameters

__all__ = [
    "InputParameters",
    "DerivedParameters",
    "ScenarioResult",
    "ScenarioComparison",
    "OpportunityCostBreakdown",
    "SCENARIOS",
    "ScenarioEvaluationError",
    "compare_scenarios",
    "evaluate",
    "opportunity_cost_breakdown",
    "rank_scenarios",
    "default_parameters",
]
