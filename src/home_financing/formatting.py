from __future__ import annotations

import math
from typing import Optional


def format_currency(value: Optional[float]) -> str:
    """Whole US dollars, e.g. ``-$1,234``. Missing or NaN values read ``$0``."""
    if value is None or math.isnan(value):
        return "$0"
    rounded = round(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"
