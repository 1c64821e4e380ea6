import math

import pytest

from home_financing import model
from home_financing.defaults import default_parameters
from home_financing.model import (
    ScenarioEvaluationError,
    compare_scenarios,
    evaluate,
    rank_scenarios,
)
from home_financing.schemas import SCENARIOS, ScenarioResult


def _result(net_worth, scenario="all_cash"):
    return ScenarioResult(
        scenario=scenario,
        down_payment=0.0,
        upfront_cost=0.0,
        annual_debt_service=0.0,
        total_interest_cost=0.0,
        portfolio_growth=0.0,
        home_sale_proceeds=0.0,
        total_net_worth=net_worth,
    )


def test_evaluate_returns_scenarios_in_fixed_order():
    results = evaluate(default_parameters())

    assert [r.scenario for r in results] == [info.key for info in SCENARIOS]
    assert all(math.isfinite(r.total_net_worth) for r in results)


def test_net_vs_all_cash_is_relative_to_first_result():
    results = evaluate(default_parameters())
    baseline = results[0].total_net_worth

    assert results[0].net_vs_all_cash == 0.0
    for result in results[1:]:
        assert result.net_vs_all_cash == pytest.approx(result.total_net_worth - baseline)


def test_only_securities_result_carries_breakdown_fields():
    results = evaluate(default_parameters())

    for result in results[:3]:
        assert result.loan_amount is None
        assert result.pledged_securities is None
    assert results[3].pledged_securities == pytest.approx(3_700_000)


def test_evaluate_is_deterministic():
    params = default_parameters()

    assert evaluate(params) == evaluate(params)


def test_reference_rate_only_moves_sofr_linked_scenarios():
    base = evaluate(default_parameters())
    shifted = evaluate(default_parameters(sofr_rate=5.5))

    assert shifted[0] == base[0]
    assert shifted[1] == base[1]
    assert shifted[2].total_net_worth != base[2].total_net_worth
    assert shifted[3].total_net_worth != base[3].total_net_worth


def test_rank_scenarios_picks_best_and_worst():
    results = [_result(10.0), _result(30.0), _result(-5.0), _result(20.0)]

    assert rank_scenarios(results) == (1, 2)


def test_rank_scenarios_ties_go_to_first_occurrence():
    results = [_result(10.0), _result(30.0), _result(30.0), _result(10.0)]

    assert rank_scenarios(results) == (1, 0)


def test_compare_scenarios_bundles_ranking():
    comparison = compare_scenarios(default_parameters())

    assert len(comparison.results) == 4
    assert comparison.derived.securities_rate == pytest.approx(0.0533)
    assert comparison.best.total_net_worth == max(
        r.total_net_worth for r in comparison.results
    )
    assert comparison.worst.total_net_worth == min(
        r.total_net_worth for r in comparison.results
    )


def test_failing_scenario_does_not_stop_the_others(monkeypatch):
    def broken(params, derived):
        raise ZeroDivisionError("boom")

    calculators = list(model.SCENARIO_CALCULATORS)
    calculators[1] = broken
    monkeypatch.setattr(model, "SCENARIO_CALCULATORS", tuple(calculators))

    with pytest.raises(ScenarioEvaluationError) as excinfo:
        evaluate(default_parameters())

    err = excinfo.value
    assert sorted(err.results) == [0, 2, 3]
    assert list(err.failures) == [1]
    assert "80% Mortgage" in str(err)


def test_partial_results_still_carry_all_cash_deltas(monkeypatch):
    def broken(params, derived):
        raise OverflowError("boom")

    calculators = list(model.SCENARIO_CALCULATORS)
    calculators[3] = broken
    monkeypatch.setattr(model, "SCENARIO_CALCULATORS", tuple(calculators))

    with pytest.raises(ScenarioEvaluationError) as excinfo:
        evaluate(default_parameters())

    partial = excinfo.value.results
    baseline = partial[0].total_net_worth
    assert partial[0].net_vs_all_cash == 0.0
    assert partial[1].net_vs_all_cash == pytest.approx(partial[1].total_net_worth - baseline)
    assert partial[1].net_vs_all_cash != 0.0
    assert partial[2].net_vs_all_cash == pytest.approx(partial[2].total_net_worth - baseline)
