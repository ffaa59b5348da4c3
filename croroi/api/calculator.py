from __future__ import annotations
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from croroi.config.env import ForecastConfig, get_forecast_config
from croroi.forecasting.assumptions import (
    SCENARIOS,
    InvalidInput,
    ValueMode,
    check_finite,
    parse_value_mode,
)
from croroi.forecasting.curves import LiftCurve
from croroi.forecasting.engine import ScenarioResult, project_scenarios, validate_series
from croroi.metrics.breakeven import BreakEvenInputs, break_even_lift_percent
from croroi.metrics.cac import cac_impact
from croroi.metrics.incremental import (
    IncrementalInputs,
    incremental_profit,
    incremental_revenue,
    projected_revenue,
)
from croroi.metrics.returns import net_profit, payback_label, payback_months, period_multiplier, roi_percent


@dataclass(frozen=True)
class CalculatorInputs:
    sessions: float = 350000
    conversion_rate_percent: float = 2.0
    lift_percent: float = 20.0
    revenue: float = 420000
    sales: float = 7000
    margin_percent: float = 45.0  # optional; 0 = unknown
    cac: float = 25.0             # optional; 0 = unknown
    investment: float = 0.0       # monthly CRO spend; 0 = none


# short keys accepted from JSON payloads, shared links and the CLI
SHORT_KEYS = {
    "cr": "conversion_rate_percent",
    "lift": "lift_percent",
    "margin": "margin_percent",
}

_NON_NEGATIVE = ("sessions", "conversion_rate_percent", "revenue", "sales", "cac", "investment")


def inputs_from_dict(payload: Mapping[str, Any], defaults: CalculatorInputs = CalculatorInputs()) -> CalculatorInputs:
    """Build inputs from a mapping of field names (or short keys); unknown keys are ignored."""
    names = {f.name for f in fields(CalculatorInputs)}
    values = asdict(defaults)
    for key, raw in payload.items():
        name = SHORT_KEYS.get(key, key)
        if name not in names or raw is None or raw == "":
            continue
        check_finite(**{name: raw})
        values[name] = float(raw)
    inputs = CalculatorInputs(**values)
    validate_calculator_inputs(inputs)
    return inputs


def validate_calculator_inputs(i: CalculatorInputs) -> None:
    values = asdict(i)
    check_finite(**values)
    for name in _NON_NEGATIVE:
        if values[name] < 0:
            raise InvalidInput(f"{name} must be >= 0")


def average_order_value(i: CalculatorInputs) -> float:
    if i.sales > 0 and i.revenue > 0:
        return i.revenue / i.sales
    return 0.0


def scenario_pairs(lifts: Sequence[float]) -> List[Tuple[str, float]]:
    """Name configured lifts after the standard scenarios, in order."""
    names = [name for name, _ in SCENARIOS]
    return [
        (names[idx] if idx < len(names) else f"scenario_{idx + 1}", float(lift))
        for idx, lift in enumerate(lifts)
    ]


def scenario_to_dict(res: ScenarioResult) -> Dict[str, Any]:
    return {
        "target_lift_percent": res.target_lift_percent,
        "value_mode": res.value_mode.value,
        "year1_net_value": res.year1_net_value,
        "year1_roi_percent": res.year1_roi_percent,
        "break_even_month": res.break_even_month,
        "points": [asdict(p) for p in res.points],
    }


def forecast_scenarios(
    inputs: CalculatorInputs,
    value_mode: ValueMode | str | None = None,
    curve: LiftCurve | str | None = None,
    config: Optional[ForecastConfig] = None,
) -> Dict[str, ScenarioResult]:
    cfg = config or get_forecast_config()
    return project_scenarios(
        inputs.revenue,
        inputs.margin_percent,
        inputs.investment,
        scenarios=scenario_pairs(cfg.scenario_lifts),
        months=cfg.horizon_months,
        value_mode=parse_value_mode(value_mode or cfg.value_mode),
        curve=curve or cfg.curve,
    )


def calculate(
    inputs: CalculatorInputs,
    yearly: bool = False,
    value_mode: ValueMode | str | None = None,
    curve: LiftCurve | str | None = None,
    config: Optional[ForecastConfig] = None,
) -> Dict[str, Any]:
    """Everything the calculator shows for one set of inputs, JSON-ready.

    Period figures (revenue, incremental value, net profit) are scaled by 12
    when ``yearly``; CAC, payback and the forecast are unaffected.
    """
    cfg = config or get_forecast_config()
    mode = parse_value_mode(value_mode or cfg.value_mode)
    aov = average_order_value(inputs)
    mult = period_multiplier(yearly)

    inc = IncrementalInputs(
        sessions=inputs.sessions,
        conversion_rate_percent=inputs.conversion_rate_percent,
        lift_percent=inputs.lift_percent,
        average_order_value=aov,
        margin_percent=inputs.margin_percent,
    )
    inc_rev = incremental_revenue(inc)
    inc_profit = incremental_profit(inc)
    cac = cac_impact(inputs.cac, inputs.lift_percent)
    payback = payback_months(inc_profit, inputs.investment)
    breakeven = break_even_lift_percent(BreakEvenInputs(
        investment=inputs.investment,
        margin_percent=inputs.margin_percent,
        sessions=inputs.sessions,
        conversion_rate_percent=inputs.conversion_rate_percent,
        average_order_value=aov,
    ))

    scenarios = forecast_scenarios(inputs, value_mode=mode, curve=curve, config=cfg)
    checks = {
        f"{name}.{check}": ok
        for name, res in scenarios.items()
        for check, ok in validate_series(res, months=cfg.horizon_months).items()
    }
    if not all(checks.values()):
        logger.warning("forecast series failed checks: {}", [k for k, ok in checks.items() if not ok])

    has_margin = inputs.margin_percent > 0
    return {
        "period": "yearly" if yearly else "monthly",
        "inputs": asdict(inputs),
        "average_order_value": aov,
        "current_revenue": inputs.revenue * mult,
        "projected_revenue": projected_revenue(inputs.revenue, inc) * mult,
        "incremental_revenue": inc_rev * mult,
        "incremental_profit": inc_profit * mult if has_margin else None,
        "cac": asdict(cac) if inputs.cac > 0 else None,
        "net_profit": net_profit(inc_profit, inputs.investment, yearly),
        "roi_percent": roi_percent(inc_profit, inputs.investment, yearly),
        "payback_months": payback,
        "payback": payback_label(payback) if payback > 0 else None,
        "break_even_lift_percent": breakeven,
        "show_forecast": inputs.investment > 0 and (has_margin or mode is ValueMode.REVENUE),
        "forecast": {
            "curve": str(getattr(curve, "name", curve or cfg.curve)),
            "value_mode": mode.value,
            "months": cfg.horizon_months,
            "scenarios": {name: scenario_to_dict(res) for name, res in scenarios.items()},
            "checks": checks,
        },
    }
