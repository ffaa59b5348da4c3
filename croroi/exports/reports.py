from __future__ import annotations
from typing import Any, Dict, List, Mapping

from croroi.exports.formatting import format_currency, format_percent, format_profit
from croroi.forecasting.engine import ScenarioResult

SCENARIO_TITLES = {
    "conservative": "Conservative Scenario",
    "target": "Target Scenario",
    "best_case": "Best Case Scenario",
}


def scenario_title(name: str) -> str:
    return SCENARIO_TITLES.get(name, name.replace("_", " ").title())


def results_text(
    revenue: float,
    incremental_revenue: float,
    incremental_profit: float,
    yearly: bool = False,
) -> str:
    """Plain-text summary for the clipboard."""
    mult = 12 if yearly else 1
    period = "Yearly" if yearly else "Monthly"
    lines = [
        f"Current {period} Revenue: {format_currency(revenue * mult)}",
        f"Projected {period} Revenue: {format_currency((revenue + incremental_revenue) * mult)}",
        f"Incremental {period} Revenue: +{format_currency(incremental_revenue * mult)}",
        f"Incremental {period} Profit: {format_currency(incremental_profit * mult)}",
    ]
    return "\n".join(lines)


def forecast_md(scenarios: Mapping[str, ScenarioResult], notes: List[str] | None = None) -> str:
    months = max((len(r.points) for r in scenarios.values()), default=0)
    lines = [f"# {months}-Month Forecast", ""]
    for name, res in scenarios.items():
        label = "profit" if res.value_mode.value == "profit" else "revenue"
        lines.append(f"## {scenario_title(name)}")
        lines.append("")
        lines.append(f"- Target lift: {res.target_lift_percent:g}%")
        lines.append(f"- Year-1 net {label}: {format_profit(res.year1_net_value)}")
        lines.append(f"- Year-1 ROI: {format_percent(res.year1_roi_percent)}")
        if res.break_even_month is not None:
            lines.append(f"- Break-even: month {res.break_even_month}")
        else:
            lines.append(f"- Break-even: not within {len(res.points)} months")
        lines.append("")
        lines.append(f"| Month | Lift | Cumulative investment | Cumulative {label} | Net |")
        lines.append("|---|---|---|---|---|")
        for p in res.points:
            lines.append(
                f"| {p.month} | {format_percent(p.lift_percent)} | {format_currency(p.cumulative_investment)}"
                f" | {format_currency(p.cumulative_value)} | {format_currency(p.net_value)} |"
            )
        lines.append("")
    if notes:
        lines.append("## Notes")
        for n in notes:
            lines.append(f"- {n}")
    return "\n".join(lines).rstrip() + "\n"


def validation_report_md(checks: Dict[str, bool], details: Dict[str, Any] | None = None) -> str:
    lines = ["# Validation Report", ""]
    for k, ok in checks.items():
        lines.append(f"- {k}: {'PASS' if ok else 'FAIL'}")
    if details:
        lines.append("\n## Details")
        for k, v in details.items():
            lines.append(f"- {k}: {v}")
    return "\n".join(lines) + "\n"
