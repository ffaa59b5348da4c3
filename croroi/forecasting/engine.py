from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from loguru import logger

from croroi.forecasting.assumptions import (
    SCENARIOS,
    ForecastInputs,
    ValueMode,
    effective_value_mode,
    validate_inputs,
)
from croroi.forecasting.curves import LiftCurve, get_curve


@dataclass(frozen=True)
class MonthlyPoint:
    month: int
    cumulative_investment: float
    cumulative_value: float  # profit or revenue, per the scenario's value mode
    net_value: float         # cumulative_value - cumulative_investment
    achieved_fraction: float
    lift_percent: float
    incremental_revenue: float
    value: float


@dataclass(frozen=True)
class ScenarioResult:
    points: Tuple[MonthlyPoint, ...]
    year1_net_value: float
    year1_roi_percent: float
    value_mode: ValueMode
    target_lift_percent: float
    break_even_month: Optional[int] = None  # first month with net_value >= 0


def project(
    revenue: float,
    margin_percent: float,
    investment: float,
    target_lift_percent: float,
    months: int = 12,
    value_mode: ValueMode | str = ValueMode.PROFIT,
    curve: LiftCurve | str | None = None,
) -> ScenarioResult:
    """Project cumulative investment, value and net return month by month.

    The lift ramps up along ``curve`` and is always applied to the unchanged
    baseline ``revenue``: incremental revenue for a month depends only on the
    lift reached that month, never on earlier months' gains.

    Margin <= 0 means no margin data and forces revenue mode. ROI is 0 when
    nothing was invested.
    """
    return project_inputs(
        ForecastInputs(
            revenue=revenue,
            margin_percent=margin_percent,
            investment=investment,
            target_lift_percent=target_lift_percent,
            months=months,
            value_mode=value_mode,
        ),
        curve=curve,
    )


def project_inputs(inputs: ForecastInputs, curve: LiftCurve | str | None = None) -> ScenarioResult:
    validate_inputs(inputs)
    lift_curve = get_curve(curve)
    mode = effective_value_mode(inputs.margin_percent, inputs.value_mode)

    revenue = float(inputs.revenue)
    investment = float(inputs.investment)
    margin = float(inputs.margin_percent)

    points = []
    cum_value = 0.0
    cum_invest = 0.0
    for m in range(1, inputs.months + 1):
        cum_invest = m * investment
        achieved = lift_curve.fraction(m, inputs.months)
        lift = inputs.target_lift_percent * achieved
        inc_rev = revenue * lift / 100.0
        value = inc_rev if mode is ValueMode.REVENUE else inc_rev * margin / 100.0
        cum_value += value
        points.append(MonthlyPoint(
            month=m,
            cumulative_investment=cum_invest,
            cumulative_value=cum_value,
            net_value=cum_value - cum_invest,
            achieved_fraction=achieved,
            lift_percent=lift,
            incremental_revenue=inc_rev,
            value=value,
        ))

    year1_net = points[-1].net_value
    year1_roi = (year1_net / cum_invest) * 100.0 if cum_invest > 0 else 0.0
    break_even = next((p.month for p in points if p.net_value >= 0), None)
    logger.debug(
        "projected {} months at {}% lift ({} curve, {} mode): net={:.2f} roi={:.2f}%",
        inputs.months, inputs.target_lift_percent, lift_curve.name, mode.value, year1_net, year1_roi,
    )
    return ScenarioResult(
        points=tuple(points),
        year1_net_value=year1_net,
        year1_roi_percent=year1_roi,
        value_mode=mode,
        target_lift_percent=float(inputs.target_lift_percent),
        break_even_month=break_even,
    )


def project_scenarios(
    revenue: float,
    margin_percent: float,
    investment: float,
    scenarios: Iterable[Tuple[str, float]] = SCENARIOS,
    months: int = 12,
    value_mode: ValueMode | str = ValueMode.PROFIT,
    curve: LiftCurve | str | None = None,
) -> Dict[str, ScenarioResult]:
    """Run one projection per (name, lift) pair, preserving scenario order."""
    lift_curve = get_curve(curve)
    return {
        name: project(revenue, margin_percent, investment, lift, months, value_mode, lift_curve)
        for name, lift in scenarios
    }


def validate_series(result: ScenarioResult, months: Optional[int] = None, eps: float = 1e-6) -> Dict[str, bool]:
    """Check the invariants of a projected series.

    Returns {check_name: passed}; nothing is raised so the map can feed a report.
    """
    pts = result.points
    step = pts[0].cumulative_investment if pts else 0.0
    checks = {
        "length": len(pts) == (months if months is not None else len(pts)) and len(pts) > 0,
        "month_order": [p.month for p in pts] == list(range(1, len(pts) + 1)),
        "investment_linear": all(abs(p.cumulative_investment - p.month * step) <= eps * max(1.0, abs(step) * p.month) for p in pts),
        "net_identity": all(abs(p.net_value - (p.cumulative_value - p.cumulative_investment)) <= eps * max(1.0, abs(p.cumulative_value)) for p in pts),
        "investment_monotone": all(b.cumulative_investment >= a.cumulative_investment for a, b in zip(pts, pts[1:])),
        "adoption_monotone": all(b.achieved_fraction >= a.achieved_fraction for a, b in zip(pts, pts[1:])),
    }
    # cumulative value only rises when the lift and the value per month are non-negative
    if result.target_lift_percent >= 0:
        checks["value_monotone"] = all(b.cumulative_value >= a.cumulative_value - eps for a, b in zip(pts, pts[1:]))
    return checks
