from __future__ import annotations
import math
from dataclasses import asdict, dataclass, replace
from typing import Callable, Dict

from croroi.forecasting.assumptions import InvalidInput, check_finite


def round_half_up(x: float) -> float:
    # builtin round() is banker's rounding; 0.5 must always go up here
    return float(math.floor(x + 0.5))


@dataclass(frozen=True)
class FunnelState:
    sessions: float = 350000
    conversion_rate_percent: float = 2.0
    sales: float = 7000
    revenue: float = 420000
    average_order_value: float = 60.0


def _derive_aov(s: FunnelState) -> FunnelState:
    if s.sales > 0 and s.revenue > 0:
        return replace(s, average_order_value=s.revenue / s.sales)
    return s


def _sales_and_revenue(s: FunnelState) -> FunnelState:
    if s.sessions > 0 and s.conversion_rate_percent > 0:
        sales = round_half_up(s.sessions * (s.conversion_rate_percent / 100.0))
        s = replace(s, sales=sales)
        if s.average_order_value > 0:
            s = replace(s, revenue=round_half_up(sales * s.average_order_value))
    return s


def from_sessions(state: FunnelState, sessions: float) -> FunnelState:
    """Sessions edited: sales follow CR, revenue follows AOV."""
    return _derive_aov(_sales_and_revenue(replace(state, sessions=float(sessions))))


def from_conversion_rate(state: FunnelState, conversion_rate_percent: float) -> FunnelState:
    s = replace(state, conversion_rate_percent=float(conversion_rate_percent))
    return _derive_aov(_sales_and_revenue(s))


def from_sales(state: FunnelState, sales: float) -> FunnelState:
    """Sales edited: CR follows sessions, revenue follows AOV."""
    s = replace(state, sales=float(sales))
    if s.sessions > 0 and s.sales > 0:
        s = replace(s, conversion_rate_percent=s.sales / s.sessions * 100.0)
    if s.average_order_value > 0 and s.sales > 0:
        s = replace(s, revenue=round_half_up(s.sales * s.average_order_value))
    return _derive_aov(s)


def from_revenue(state: FunnelState, revenue: float) -> FunnelState:
    """Revenue edited: only AOV is re-derived."""
    return _derive_aov(replace(state, revenue=float(revenue)))


EDITS: Dict[str, Callable[[FunnelState, float], FunnelState]] = {
    "sessions": from_sessions,
    "conversion_rate_percent": from_conversion_rate,
    "sales": from_sales,
    "revenue": from_revenue,
}

# short names used by shared links and the CLI
ALIASES = {"cr": "conversion_rate_percent"}


def validate_state(state: FunnelState) -> None:
    values = asdict(state)
    check_finite(**values)
    for name, v in values.items():
        if v < 0:
            raise InvalidInput(f"{name} must be >= 0")


def apply_edit(state: FunnelState, field: str, value: float) -> FunnelState:
    validate_state(state)
    key = ALIASES.get(field, field)
    fn = EDITS.get(key)
    if fn is None:
        raise InvalidInput(f"cannot edit {field!r}; expected one of {', '.join(EDITS)}")
    check_finite(**{key: value})
    value = float(value)
    if value < 0:
        raise InvalidInput(f"{field} must be >= 0")
    return fn(state, value)
