from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class IncrementalInputs:
    sessions: float
    conversion_rate_percent: float
    lift_percent: float
    average_order_value: float
    margin_percent: float = 0.0


def incremental_revenue(i: IncrementalInputs) -> float:
    """sessions * CR * lift * AOV, with CR and lift given in percent."""
    return float(
        i.sessions
        * (i.conversion_rate_percent / 100.0)
        * (i.lift_percent / 100.0)
        * i.average_order_value
    )


def incremental_profit(i: IncrementalInputs) -> float:
    return incremental_revenue(i) * (i.margin_percent / 100.0)


def projected_revenue(baseline_revenue: float, i: IncrementalInputs) -> float:
    return float(baseline_revenue) + incremental_revenue(i)
