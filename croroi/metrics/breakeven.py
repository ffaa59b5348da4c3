from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class BreakEvenInputs:
    investment: float  # monthly
    margin_percent: float
    sessions: float
    conversion_rate_percent: float
    average_order_value: float


def break_even_lift_percent(i: BreakEvenInputs) -> float:
    """Lift % at which incremental profit equals the monthly investment.

    Revenue needed = investment / margin; baseline revenue = sessions * CR * AOV.
    Returns 0 unless every input is positive.
    """
    if min(i.investment, i.margin_percent, i.sessions, i.conversion_rate_percent, i.average_order_value) <= 0:
        return 0.0
    revenue_needed = i.investment / (i.margin_percent / 100.0)
    baseline = i.sessions * (i.conversion_rate_percent / 100.0) * i.average_order_value
    return float(revenue_needed / baseline * 100.0)
