from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .logging_utils import get_logger
from .schemas import (
    SCENARIOS,
    DerivedParameters,
    InputParameters,
    OpportunityCostBreakdown,
    ScenarioComparison,
    ScenarioResult,
)

logger = get_logger(__name__)

MORTGAGE_LTV = 0.8
BOX_SPREAD_SPREAD = 0.005  # over SOFR
SECURITIES_LOAN_SPREAD = 0.01  # over SOFR
# Amortizing balance is taken to average half the original principal.
AVERAGE_BALANCE_FACTOR = 0.5


class ScenarioEvaluationError(RuntimeError):
    """Raised after all scenarios ran when at least one of them failed."""

    def __init__(
        self,
        results: Dict[int, ScenarioResult],
        failures: Dict[int, BaseException],
    ) -> None:
        names = ", ".join(SCENARIOS[index].name for index in sorted(failures))
        super().__init__(f"scenario evaluation failed for: {names}")
        self.results = results
        self.failures = failures


def compare_scenarios(params: InputParameters) -> ScenarioComparison:
    derived = derive_parameters(params)
    results = evaluate(params, derived)
    best_index, worst_index = rank_scenarios(results)
    return ScenarioComparison(
        params=params,
        derived=derived,
        results=results,
        best_index=best_index,
        worst_index=worst_index,
    )


def evaluate(
    params: InputParameters, derived: Optional[DerivedParameters] = None
) -> List[ScenarioResult]:
    """
    Run every scenario against one parameter set and fill in each result's
    net worth relative to the all-cash purchase. Results follow ``SCENARIOS``
    order.
    """
    derived = derived or derive_parameters(params)
    logger.debug(
        "derived rates",
        extra={
            "context": {
                "box_spread_rate": derived.box_spread_rate,
                "securities_rate": derived.securities_rate,
                "blended_alt_return": derived.blended_alt_return,
            }
        },
    )

    results: Dict[int, ScenarioResult] = {}
    failures: Dict[int, BaseException] = {}
    for index, calculator in enumerate(SCENARIO_CALCULATORS):
        try:
            results[index] = calculator(params, derived)
        except ArithmeticError as exc:
            logger.exception(
                "scenario calculation failed",
                extra={"context": {"scenario": SCENARIOS[index].key}},
            )
            failures[index] = exc

    if 0 in results:
        baseline = results[0].total_net_worth
        for result in results.values():
            result.net_vs_all_cash = result.total_net_worth - baseline

    if failures:
        raise ScenarioEvaluationError(results, failures)

    ordered = [results[index] for index in range(len(SCENARIO_CALCULATORS))]
    for result in ordered:
        logger.debug(
            "scenario evaluated",
            extra={
                "context": {
                    "scenario": result.scenario,
                    "total_net_worth": result.total_net_worth,
                    "net_vs_all_cash": result.net_vs_all_cash,
                }
            },
        )
    return ordered


def rank_scenarios(results: Sequence[ScenarioResult]) -> Tuple[int, int]:
    """Return (best, worst) indices by total net worth; earliest index wins ties."""
    best = worst = 0
    for index in range(1, len(results)):
        net_worth = results[index].total_net_worth
        if net_worth > results[best].total_net_worth:
            best = index
        if net_worth < results[worst].total_net_worth:
            worst = index
    return best, worst


def derive_parameters(params: InputParameters) -> DerivedParameters:
    return DerivedParameters(
        box_spread_rate=params.sofr_rate + BOX_SPREAD_SPREAD,
        securities_rate=params.sofr_rate + SECURITIES_LOAN_SPREAD,
        blended_alt_return=blended_alt_return(params.alt_allocations),
    )


def blended_alt_return(allocations: Sequence[Tuple[float, float]]) -> float:
    # Weights are deliberately not normalized.
    return sum(rate * weight for rate, weight in allocations)


def pmt(rate: float, periods: int, present_value: float) -> float:
    """
    Fixed payment per period that amortizes ``present_value``. Outflows are
    negative. Rates that make ``(1 + rate) ** periods == 1`` with a non-zero
    rate are not guarded.
    """
    if periods == 0:
        return 0.0
    if rate == 0:
        return -present_value / periods
    growth = (1 + rate) ** periods
    return -present_value * (rate * growth) / (growth - 1)


def ownership_costs(params: InputParameters) -> float:
    annual = (
        params.home_price * params.property_tax_rate
        + params.insurance
        + params.home_price * params.maintenance_rate
    )
    return annual * params.holding_period


def future_home_value(params: InputParameters) -> float:
    return params.home_price * (1 + params.appreciation_rate) ** params.holding_period


def home_sale_proceeds(params: InputParameters) -> float:
    return future_home_value(params) * (1 - params.selling_cost_rate)


def portfolio_growth(amount: float, annual_return: float, years: int) -> float:
    """Compound gain on cash kept invested; nothing is earned on amount <= 0."""
    if amount <= 0:
        return 0.0
    return amount * (1 + annual_return) ** years - amount


def calculate_all_cash(
    params: InputParameters, derived: DerivedParameters
) -> ScenarioResult:
    price = params.home_price
    proceeds = home_sale_proceeds(params)
    return ScenarioResult(
        scenario="all_cash",
        down_payment=price,
        upfront_cost=price + price * params.closing_cost_rate,
        annual_debt_service=0.0,
        total_interest_cost=0.0,
        portfolio_growth=0.0,
        home_sale_proceeds=proceeds,
        total_net_worth=proceeds - ownership_costs(params),
    )


def calculate_mortgage_80(
    params: InputParameters, derived: DerivedParameters
) -> ScenarioResult:
    price = params.home_price
    years = params.holding_period
    down_payment = price * (1 - MORTGAGE_LTV)
    mortgage_amount = price * MORTGAGE_LTV
    closing_costs = price * params.closing_cost_rate

    monthly_payment = pmt(params.mortgage_rate / 12, years * 12, mortgage_amount)
    annual_debt_service = abs(monthly_payment * 12)
    total_interest = annual_debt_service * years - mortgage_amount

    remaining_cash = price - down_payment - closing_costs
    growth = portfolio_growth(remaining_cash, params.invest_return, years)

    deductible = min(mortgage_amount, params.deduction_limit)
    tax_savings = (
        deductible
        * params.mortgage_rate
        * params.tax_ordinary
        * years
        * AVERAGE_BALANCE_FACTOR
    )

    proceeds = home_sale_proceeds(params)
    return ScenarioResult(
        scenario="mortgage_80",
        down_payment=down_payment,
        upfront_cost=down_payment + closing_costs,
        annual_debt_service=annual_debt_service,
        total_interest_cost=total_interest,
        portfolio_growth=growth,
        home_sale_proceeds=proceeds,
        total_net_worth=_net_worth(
            params, growth, proceeds, total_interest, tax_savings
        ),
    )


def calculate_mortgage_box_spread(
    params: InputParameters, derived: DerivedParameters
) -> ScenarioResult:
    price = params.home_price
    years = params.holding_period
    down_payment = price * (1 - MORTGAGE_LTV)
    total_financing = price * MORTGAGE_LTV
    mortgage_amount = min(params.deduction_limit, total_financing)
    box_spread_amount = max(0.0, total_financing - mortgage_amount)
    closing_costs = price * params.closing_cost_rate

    if mortgage_amount > 0:
        monthly_payment = pmt(params.mortgage_rate / 12, years * 12, mortgage_amount)
        annual_mortgage_service = abs(monthly_payment * 12)
        mortgage_interest = annual_mortgage_service * years - mortgage_amount
    else:
        annual_mortgage_service = 0.0
        mortgage_interest = 0.0

    # Interest only; the full box spread balance is outstanding every year.
    annual_box_spread_cost = box_spread_amount * derived.box_spread_rate
    box_spread_interest = annual_box_spread_cost * years
    total_interest = mortgage_interest + box_spread_interest

    tax_savings = (
        mortgage_interest * AVERAGE_BALANCE_FACTOR + box_spread_interest
    ) * params.tax_ordinary

    remaining_cash = price - down_payment - closing_costs
    growth = portfolio_growth(remaining_cash, params.invest_return, years)

    proceeds = home_sale_proceeds(params)
    return ScenarioResult(
        scenario="mortgage_box_spread",
        down_payment=down_payment,
        upfront_cost=down_payment + closing_costs,
        annual_debt_service=annual_mortgage_service + annual_box_spread_cost,
        total_interest_cost=total_interest,
        portfolio_growth=growth,
        home_sale_proceeds=proceeds,
        total_net_worth=_net_worth(
            params, growth, proceeds, total_interest, tax_savings
        ),
    )


def calculate_securities_loan(
    params: InputParameters, derived: DerivedParameters
) -> ScenarioResult:
    price = params.home_price
    years = params.holding_period
    loan_amount = price * MORTGAGE_LTV
    pledged = loan_amount / params.securities_ltv

    annual_interest = loan_amount * derived.securities_rate
    # Negative when the alternative basket returns less than the portfolio.
    annual_opportunity_cost = pledged * (
        derived.blended_alt_return - params.invest_return
    )
    annual_cost = annual_interest + annual_opportunity_cost
    total_cost = annual_cost * years

    tax_savings = annual_interest * years * params.tax_ordinary

    available = price - pledged
    growth = portfolio_growth(available, params.invest_return, years)

    proceeds = home_sale_proceeds(params)
    return ScenarioResult(
        scenario="securities_loan",
        down_payment=0.0,
        upfront_cost=price * params.closing_cost_rate,
        annual_debt_service=annual_cost,
        total_interest_cost=total_cost,
        portfolio_growth=growth,
        home_sale_proceeds=proceeds,
        total_net_worth=_net_worth(params, growth, proceeds, total_cost, tax_savings),
        loan_amount=loan_amount,
        pledged_securities=pledged,
        annual_interest=annual_interest,
        annual_opportunity_cost=annual_opportunity_cost,
        blended_alt_return=derived.blended_alt_return,
    )


def opportunity_cost_breakdown(
    params: InputParameters, derived: Optional[DerivedParameters] = None
) -> OpportunityCostBreakdown:
    derived = derived or derive_parameters(params)
    result = calculate_securities_loan(params, derived)
    years = params.holding_period
    return OpportunityCostBreakdown(
        loan_amount=result.loan_amount,
        pledged_securities=result.pledged_securities,
        securities_ltv=params.securities_ltv,
        annual_interest=result.annual_interest,
        annual_opportunity_cost=result.annual_opportunity_cost,
        apparent_cost=result.annual_interest * years,
        opportunity_cost=result.annual_opportunity_cost * years,
        blended_alt_return=derived.blended_alt_return,
        invest_return=params.invest_return,
    )


def _net_worth(
    params: InputParameters,
    growth: float,
    proceeds: float,
    interest_cost: float,
    tax_savings: float,
) -> float:
    return growth + proceeds - interest_cost - ownership_costs(params) + tax_savings


SCENARIO_CALCULATORS: Tuple[
    Callable[[InputParameters, DerivedParameters], ScenarioResult], ...
] = (
    calculate_all_cash,
    calculate_mortgage_80,
    calculate_mortgage_box_spread,
    calculate_securities_loan,
)
