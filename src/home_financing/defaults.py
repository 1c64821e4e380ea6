from __future__ import annotations

from typing import Dict

from .schemas import InputParameters

# Boundary form: rates in percent, dollars as-is.
DEFAULT_INPUTS: Dict[str, float] = {
    "home_price": 1_850_000,
    "closing_cost_rate": 2.3,
    "property_tax_rate": 1.26,
    "insurance": 24_000,
    "maintenance_rate": 1.5,
    "appreciation_rate": 3.0,
    "holding_period": 10,
    "mortgage_rate": 6.9,
    "deduction_limit": 750_000,
    "sofr_rate": 4.33,
    "invest_return": 7.0,
    "tax_ordinary": 37.0,
    "tax_capital_gains": 23.8,
    "selling_cost_rate": 7.0,
    "securities_ltv": 40,
    "alt_return_pe": 8.9,
    "alt_return_hf": 8.0,
    "alt_return_credit": 10.0,
    "alt_return_re": 9.5,
    "alt_weight_pe": 30,
    "alt_weight_hf": 25,
    "alt_weight_credit": 25,
    "alt_weight_re": 20,
}


def default_parameters(**overrides: float) -> InputParameters:
    """Documented default assumptions with optional boundary-form overrides."""
    values = dict(DEFAULT_INPUTS)
    values.update(overrides)
    return InputParameters.from_percentages(**values)
