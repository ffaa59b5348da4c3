from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Mapping
import csv
import io

from croroi.forecasting.engine import ScenarioResult

SCHEMAS = {
    "forecast": [
        "month","achieved_fraction","lift_percent","incremental_revenue","value","cumulative_investment","cumulative_value","net_value"
    ],
    "scenarios": [
        "scenario","target_lift_percent","value_mode","month","achieved_fraction","lift_percent","incremental_revenue","value","cumulative_investment","cumulative_value","net_value","break_even_month"
    ],
    "summary": [
        "metric","value"
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def write_forecast(result: ScenarioResult) -> str:
    return write_csv((asdict(p) for p in result.points), SCHEMAS["forecast"])


def write_scenarios(scenarios: Mapping[str, ScenarioResult]) -> str:
    """All scenarios in one long table, one row per (scenario, month)."""
    rows = []
    for name, res in scenarios.items():
        for p in res.points:
            rows.append({
                "scenario": name,
                "target_lift_percent": res.target_lift_percent,
                "value_mode": res.value_mode.value,
                "break_even_month": res.break_even_month,
                **asdict(p),
            })
    return write_csv(rows, SCHEMAS["scenarios"])


def write_summary(metrics: Mapping[str, Any]) -> str:
    return write_csv(({"metric": k, "value": v} for k, v in metrics.items()), SCHEMAS["summary"])
