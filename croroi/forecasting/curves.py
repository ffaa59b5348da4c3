from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, Tuple

from croroi.forecasting.assumptions import InvalidInput

# Share of the target lift realised by month; month 1 is research only.
DISCRETE_LIFT_CURVE: Dict[int, float] = {
    1: 0.0, 2: 0.08, 3: 0.20, 4: 0.35, 5: 0.50, 6: 0.63,
    7: 0.73, 8: 0.81, 9: 0.88, 10: 0.93, 11: 0.97, 12: 1.0,
}


def _check_month(month: int, months: int) -> None:
    if months <= 0:
        raise InvalidInput(f"months must be a positive integer, got {months!r}")
    if month < 1:
        raise InvalidInput(f"month must be >= 1, got {month!r}")


class LiftCurve:
    """Fraction of the target lift achieved by a given month of the horizon."""

    name = "base"

    def fraction(self, month: int, months: int) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class DiscreteCurve(LiftCurve):
    """Decelerating S-curve read from a month-indexed table.

    Horizons of at least the table length read the table directly and clamp to
    1.0 afterwards. Shorter horizons resample the table (linear interpolation
    between neighbouring months) so the last month still reaches 1.0.
    """

    table: Dict[int, float] = field(default_factory=lambda: dict(DISCRETE_LIFT_CURVE))
    name = "discrete"

    @property
    def length(self) -> int:
        return max(self.table)

    def _interp(self, pos: float) -> float:
        lo = max(1, int(math.floor(pos)))
        hi = min(self.length, int(math.ceil(pos)))
        if lo == hi:
            return self.table.get(lo, 1.0)
        w = pos - lo
        return self.table.get(lo, 0.0) * (1 - w) + self.table.get(hi, 1.0) * w

    def fraction(self, month: int, months: int) -> float:
        _check_month(month, months)
        if months == 1:
            return 0.0
        if months >= self.length:
            return self.table.get(month, 1.0) if month <= self.length else 1.0
        if month >= months:
            return 1.0
        pos = 1.0 + (month - 1) * (self.length - 1) / (months - 1)
        return self._interp(pos)


@dataclass(frozen=True)
class LinearRampCurve(LiftCurve):
    """Month 1 is setup; months 2..N ramp linearly to the full lift at month N."""

    name = "linear"

    def fraction(self, month: int, months: int) -> float:
        _check_month(month, months)
        if month == 1 or months == 1:
            return 0.0
        return min(1.0, (month - 1) / (months - 1))


_REGISTRY: Dict[str, LiftCurve] = {
    DiscreteCurve.name: DiscreteCurve(),
    LinearRampCurve.name: LinearRampCurve(),
}

CURVES: Tuple[str, ...] = tuple(_REGISTRY)


def get_curve(name: str | LiftCurve | None = None) -> LiftCurve:
    if name is None:
        return _REGISTRY[DiscreteCurve.name]
    if isinstance(name, LiftCurve):
        return name
    key = str(name).strip().lower()
    curve = _REGISTRY.get(key)
    if curve is None:
        raise InvalidInput(f"unknown lift curve {name!r}; expected one of {', '.join(CURVES)}")
    return curve
