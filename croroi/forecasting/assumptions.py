from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class InvalidInput(ValueError):
    """Raised at the boundary for out-of-domain calculator input."""


class ValueMode(str, Enum):
    PROFIT = "profit"    # incremental revenue * gross margin
    REVENUE = "revenue"  # incremental revenue, margin ignored


# (name, target lift %) for the three forecast runs
SCENARIOS: Tuple[Tuple[str, float], ...] = (
    ("conservative", 10.0),
    ("target", 20.0),
    ("best_case", 40.0),
)


@dataclass(frozen=True)
class ForecastInputs:
    revenue: float              # steady-state monthly revenue
    margin_percent: float       # gross margin %, <= 0 means unknown
    investment: float           # monthly CRO spend, 0 means none
    target_lift_percent: float  # lift reached at the end of the ramp; negative models a decline
    months: int = 12
    value_mode: ValueMode = ValueMode.PROFIT


def parse_value_mode(mode: ValueMode | str | None) -> ValueMode:
    if mode is None:
        return ValueMode.PROFIT
    if isinstance(mode, ValueMode):
        return mode
    try:
        return ValueMode(str(mode).strip().lower())
    except ValueError:
        raise InvalidInput(f"value mode must be 'profit' or 'revenue', got {mode!r}")


def effective_value_mode(margin_percent: float, requested: ValueMode | str | None) -> ValueMode:
    """Profit needs margin data; without it the forecast falls back to revenue."""
    if margin_percent <= 0:
        return ValueMode.REVENUE
    return parse_value_mode(requested)


def check_finite(**values: float) -> None:
    for name, v in values.items():
        try:
            ok = math.isfinite(float(v))
        except (TypeError, ValueError):
            raise InvalidInput(f"{name} must be a number, got {v!r}")
        if not ok:
            raise InvalidInput(f"{name} must be finite, got {v!r}")


def validate_inputs(i: ForecastInputs) -> None:
    check_finite(
        revenue=i.revenue,
        margin_percent=i.margin_percent,
        investment=i.investment,
        target_lift_percent=i.target_lift_percent,
    )
    if isinstance(i.months, bool) or not isinstance(i.months, int) or i.months <= 0:
        raise InvalidInput(f"months must be a positive integer, got {i.months!r}")
    if i.revenue < 0:
        raise InvalidInput("revenue must be >= 0")
    if i.investment < 0:
        raise InvalidInput("investment must be >= 0")
    parse_value_mode(i.value_mode)
