from __future__ import annotations

import json
import os
from dataclasses import asdict

import typer

from .defaults import DEFAULT_INPUTS
from .formatting import format_currency, format_percent
from .logging_utils import get_logger, set_log_level
from .model import ScenarioEvaluationError, compare_scenarios, opportunity_cost_breakdown
from .schemas import InputParameters

app = typer.Typer(help="Compare all-cash, mortgage, box spread and securities-loan home purchases.")
logger = get_logger(__name__)


def _default_sofr_rate() -> float:
    value = os.environ.get("HOME_FINANCING_SOFR_RATE")
    return float(value) if value else DEFAULT_INPUTS["sofr_rate"]


def _default_log_level() -> str:
    return os.environ.get("HOME_FINANCING_LOG_LEVEL", "WARNING")


@app.callback()
def main(
    log_level: str = typer.Option(
        default_factory=_default_log_level,
        help="Log level (env HOME_FINANCING_LOG_LEVEL if omitted). Logs go to stderr.",
    ),
) -> None:
    set_log_level(log_level)


@app.command()
def compare(
    home_price: float = typer.Option(DEFAULT_INPUTS["home_price"], help="Purchase price in dollars."),
    closing_costs: float = typer.Option(DEFAULT_INPUTS["closing_cost_rate"], help="Closing costs, % of price."),
    property_tax: float = typer.Option(DEFAULT_INPUTS["property_tax_rate"], help="Annual property tax, % of price."),
    insurance: float = typer.Option(DEFAULT_INPUTS["insurance"], help="Annual insurance in dollars."),
    maintenance: float = typer.Option(DEFAULT_INPUTS["maintenance_rate"], help="Annual maintenance, % of price."),
    appreciation: float = typer.Option(DEFAULT_INPUTS["appreciation_rate"], help="Annual appreciation, %."),
    holding_period: int = typer.Option(DEFAULT_INPUTS["holding_period"], help="Years until sale."),
    mortgage_rate: float = typer.Option(DEFAULT_INPUTS["mortgage_rate"], help="Mortgage rate, %."),
    deduction_limit: float = typer.Option(
        DEFAULT_INPUTS["deduction_limit"], help="Mortgage principal eligible for the interest deduction."
    ),
    sofr_rate: float = typer.Option(
        default_factory=_default_sofr_rate,
        help="Reference short-term rate, % (env HOME_FINANCING_SOFR_RATE if omitted).",
    ),
    invest_return: float = typer.Option(DEFAULT_INPUTS["invest_return"], help="Standard portfolio return, %."),
    tax_ordinary: float = typer.Option(DEFAULT_INPUTS["tax_ordinary"], help="Ordinary income tax rate, %."),
    tax_capital_gains: float = typer.Option(DEFAULT_INPUTS["tax_capital_gains"], help="Capital gains tax rate, %."),
    selling_cost: float = typer.Option(DEFAULT_INPUTS["selling_cost_rate"], help="Selling costs, % of sale price."),
    securities_ltv: float = typer.Option(DEFAULT_INPUTS["securities_ltv"], help="Securities loan LTV, %."),
    alt_return_pe: float = typer.Option(DEFAULT_INPUTS["alt_return_pe"], help="Private equity return, %."),
    alt_return_hf: float = typer.Option(DEFAULT_INPUTS["alt_return_hf"], help="Hedge fund return, %."),
    alt_return_credit: float = typer.Option(DEFAULT_INPUTS["alt_return_credit"], help="Private credit return, %."),
    alt_return_re: float = typer.Option(DEFAULT_INPUTS["alt_return_re"], help="Real estate return, %."),
    alt_weight_pe: float = typer.Option(DEFAULT_INPUTS["alt_weight_pe"], help="Private equity weight, %."),
    alt_weight_hf: float = typer.Option(DEFAULT_INPUTS["alt_weight_hf"], help="Hedge fund weight, %."),
    alt_weight_credit: float = typer.Option(DEFAULT_INPUTS["alt_weight_credit"], help="Private credit weight, %."),
    alt_weight_re: float = typer.Option(DEFAULT_INPUTS["alt_weight_re"], help="Real estate weight, %."),
    breakdown: bool = typer.Option(False, help="Also show the securities loan opportunity cost breakdown."),
    as_json: bool = typer.Option(False, "--json", help="Dump the scenario results as JSON."),
) -> None:
    """
    Project net worth at sale for each financing strategy and rank them.
    """
    try:
        params = InputParameters.from_percentages(
            home_price=home_price,
            closing_cost_rate=closing_costs,
            property_tax_rate=property_tax,
            insurance=insurance,
            maintenance_rate=maintenance,
            appreciation_rate=appreciation,
            holding_period=holding_period,
            mortgage_rate=mortgage_rate,
            deduction_limit=deduction_limit,
            sofr_rate=sofr_rate,
            invest_return=invest_return,
            tax_ordinary=tax_ordinary,
            tax_capital_gains=tax_capital_gains,
            selling_cost_rate=selling_cost,
            securities_ltv=securities_ltv,
            alt_return_pe=alt_return_pe,
            alt_return_hf=alt_return_hf,
            alt_return_credit=alt_return_credit,
            alt_return_re=alt_return_re,
            alt_weight_pe=alt_weight_pe,
            alt_weight_hf=alt_weight_hf,
            alt_weight_credit=alt_weight_credit,
            alt_weight_re=alt_weight_re,
        )
        comparison = compare_scenarios(params)
    except (ValueError, ScenarioEvaluationError) as exc:
        logger.error("comparison failed", extra={"context": {"error": str(exc)}})
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        payload = [asdict(result) for result in comparison.results]
        typer.echo(json.dumps(payload, indent=2))
        return

    derived = comparison.derived
    typer.echo(f"Box spread rate: {format_percent(derived.box_spread_rate)}")
    typer.echo(f"Securities loan rate: {format_percent(derived.securities_rate)}")
    typer.echo(f"Blended alternative return: {format_percent(derived.blended_alt_return)}")
    typer.echo("")

    for index, result in enumerate(comparison.results):
        marker = ""
        if index == comparison.best_index:
            marker = " [best]"
        elif index == comparison.worst_index:
            marker = " [worst]"
        typer.echo(f"{result.info.name}{marker}")
        typer.echo(f"  Down payment: {format_currency(result.down_payment)}")
        typer.echo(f"  Upfront cost: {format_currency(result.upfront_cost)}")
        typer.echo(f"  Annual debt service: {format_currency(result.annual_debt_service)}")
        typer.echo(f"  Total interest cost: {format_currency(result.total_interest_cost)}")
        typer.echo(f"  Portfolio growth: {format_currency(result.portfolio_growth)}")
        typer.echo(f"  Home sale proceeds: {format_currency(result.home_sale_proceeds)}")
        typer.echo(f"  Total net worth: {format_currency(result.total_net_worth)}")
        typer.echo(f"  Net vs all cash: {format_currency(result.net_vs_all_cash)}")

    best = comparison.best
    typer.echo("")
    typer.echo(f"Optimal scenario: {best.info.name} ({best.info.description})")
    typer.echo(f"Advantage over all cash: {format_currency(best.net_vs_all_cash)}")

    if breakdown:
        costs = opportunity_cost_breakdown(params, derived)
        typer.echo("")
        typer.echo("Securities loan cost breakdown")
        typer.echo(
            f"  Loan interest: {format_currency(costs.apparent_cost)}"
            f" ({format_currency(costs.annual_interest)}/year)"
        )
        typer.echo(
            f"  Opportunity cost: {format_currency(costs.opportunity_cost)}"
            f" ({format_currency(costs.annual_opportunity_cost)}/year)"
        )
        typer.echo(
            f"  Total true cost: {format_currency(costs.true_cost)}"
            f" ({format_currency(costs.true_annual_cost)}/year)"
        )
        typer.echo(
            f"  Pledged securities: {format_currency(costs.pledged_securities)}"
            f" at {format_percent(costs.securities_ltv)} LTV"
        )
        typer.echo(
            f"  Blended return {format_percent(costs.blended_alt_return)} vs standard"
            f" {format_percent(costs.invest_return)}"
            f" (spread {format_percent(costs.return_spread)})"
        )


@app.command()
def defaults() -> None:
    """
    Print the default assumptions (rates in percent) as JSON.
    """
    typer.echo(json.dumps(DEFAULT_INPUTS, indent=2))


if __name__ == "__main__":
    app()
