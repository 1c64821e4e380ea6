from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class InputParameters:
    """Market and tax assumptions for one evaluation, rates as fractions."""

    home_price: float
    closing_cost_rate: float
    property_tax_rate: float
    insurance: float  # annual dollars
    maintenance_rate: float
    appreciation_rate: float
    holding_period: int  # years
    mortgage_rate: float
    deduction_limit: float  # dollars of mortgage principal
    sofr_rate: float
    invest_return: float
    tax_ordinary: float
    tax_capital_gains: float
    selling_cost_rate: float
    securities_ltv: float
    alt_return_pe: float = 0.0
    alt_return_hf: float = 0.0
    alt_return_credit: float = 0.0
    alt_return_re: float = 0.0
    alt_weight_pe: float = 0.0
    alt_weight_hf: float = 0.0
    alt_weight_credit: float = 0.0
    alt_weight_re: float = 0.0

    # Fields entered as percentages at the boundary.
    PERCENT_FIELDS = (
        "closing_cost_rate",
        "property_tax_rate",
        "maintenance_rate",
        "appreciation_rate",
        "mortgage_rate",
        "sofr_rate",
        "invest_return",
        "tax_ordinary",
        "tax_capital_gains",
        "selling_cost_rate",
        "securities_ltv",
        "alt_return_pe",
        "alt_return_hf",
        "alt_return_credit",
        "alt_return_re",
        "alt_weight_pe",
        "alt_weight_hf",
        "alt_weight_credit",
        "alt_weight_re",
    )

    def __post_init__(self) -> None:
        if self.holding_period < 0 or int(self.holding_period) != self.holding_period:
            raise ValueError("holding_period must be a non-negative whole number of years")
        if not self.securities_ltv > 0:
            raise ValueError("securities_ltv must be greater than zero")

    @classmethod
    def from_percentages(cls, **values: Optional[float]) -> "InputParameters":
        """
        Build parameters from boundary values where rates are percentages
        (6.9 for 6.9%). Missing or ``None`` values count as zero.
        """
        unknown = set(values) - set(cls.__dataclass_fields__)
        if unknown:
            raise TypeError(f"unknown parameters: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, float] = {}
        for name in cls.__dataclass_fields__:
            raw = values.get(name)
            value = float(raw) if raw is not None else 0.0
            if name in cls.PERCENT_FIELDS:
                value = value / 100.0
            kwargs[name] = value
        if not kwargs["holding_period"].is_integer():
            raise ValueError("holding_period must be a non-negative whole number of years")
        kwargs["holding_period"] = int(kwargs["holding_period"])
        return cls(**kwargs)

    @property
    def alt_allocations(self) -> List[Tuple[float, float]]:
        """(return, weight) pairs for PE, hedge funds, private credit, real estate."""
        return [
            (self.alt_return_pe, self.alt_weight_pe),
            (self.alt_return_hf, self.alt_weight_hf),
            (self.alt_return_credit, self.alt_weight_credit),
            (self.alt_return_re, self.alt_weight_re),
        ]


@dataclass(frozen=True)
class DerivedParameters:
    box_spread_rate: float
    securities_rate: float
    blended_alt_return: float


@dataclass(frozen=True)
class ScenarioInfo:
    key: str
    name: str
    description: str


SCENARIOS: Tuple[ScenarioInfo, ...] = (
    ScenarioInfo("all_cash", "All Cash", "Purchase home with cash, no financing"),
    ScenarioInfo(
        "mortgage_80", "80% Mortgage", "20% down payment, 80% conventional mortgage"
    ),
    ScenarioInfo(
        "mortgage_box_spread",
        "Mortgage + Box Spread",
        "Mortgage up to deduction limit plus synthetic box spread",
    ),
    ScenarioInfo(
        "securities_loan",
        "Securities Loan",
        "Pledge securities as collateral with opportunity cost analysis",
    ),
)


@dataclass
class ScenarioResult:
    scenario: str
    down_payment: float
    upfront_cost: float
    annual_debt_service: float
    total_interest_cost: float
    portfolio_growth: float
    home_sale_proceeds: float
    total_net_worth: float
    net_vs_all_cash: float = 0.0
    # Securities loan only.
    loan_amount: Optional[float] = None
    pledged_securities: Optional[float] = None
    annual_interest: Optional[float] = None
    annual_opportunity_cost: Optional[float] = None
    blended_alt_return: Optional[float] = None

    @property
    def info(self) -> ScenarioInfo:
        for info in SCENARIOS:
            if info.key == self.scenario:
                return info
        raise KeyError(self.scenario)


@dataclass
class ScenarioComparison:
    params: InputParameters
    derived: DerivedParameters
    results: List[ScenarioResult] = field(default_factory=list)
    best_index: int = 0
    worst_index: int = 0

    @property
    def best(self) -> ScenarioResult:
        return self.results[self.best_index]

    @property
    def worst(self) -> ScenarioResult:
        return self.results[self.worst_index]


@dataclass(frozen=True)
class OpportunityCostBreakdown:
    """Securities loan cost split into interest and forgone alternative return."""

    loan_amount: float
    pledged_securities: float
    securities_ltv: float
    annual_interest: float
    annual_opportunity_cost: float
    apparent_cost: float  # interest only, over the holding period
    opportunity_cost: float  # over the holding period
    blended_alt_return: float
    invest_return: float

    @property
    def true_annual_cost(self) -> float:
        return self.annual_interest + self.annual_opportunity_cost

    @property
    def true_cost(self) -> float:
        return self.apparent_cost + self.opportunity_cost

    @property
    def return_spread(self) -> float:
        return self.blended_alt_return - self.invest_return
