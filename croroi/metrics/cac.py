from __future__ import annotations
from dataclasses import dataclass

from croroi.forecasting.assumptions import InvalidInput


@dataclass(frozen=True)
class CACImpact:
    current: float
    improved: float
    reduction: float
    reduction_percent: float


def cac_impact(cac: float, lift_percent: float) -> CACImpact:
    """Same spend over (1 + lift) times the customers.

    improved = cac / (1 + lift/100); a lift of -100% or below would mean no
    conversions at all and is rejected.
    """
    if lift_percent <= -100.0:
        raise InvalidInput("lift must be greater than -100% for a CAC estimate")
    if cac <= 0:
        return CACImpact(current=float(cac), improved=0.0, reduction=0.0, reduction_percent=0.0)
    improved = cac / (1.0 + lift_percent / 100.0)
    reduction = cac - improved
    return CACImpact(
        current=float(cac),
        improved=float(improved),
        reduction=float(reduction),
        reduction_percent=float(reduction / cac * 100.0),
    )
