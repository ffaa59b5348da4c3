from __future__ import annotations


def period_multiplier(yearly: bool) -> int:
    return 12 if yearly else 1


def net_profit(incremental_profit: float, investment: float, yearly: bool = False) -> float:
    return float((incremental_profit - investment) * period_multiplier(yearly))


def roi_percent(incremental_profit: float, investment: float, yearly: bool = False) -> float:
    """Net profit over spend for the period; 0 when nothing is invested."""
    if investment <= 0:
        return 0.0
    mult = period_multiplier(yearly)
    return float(net_profit(incremental_profit, investment, yearly) / (investment * mult) * 100.0)


def payback_months(incremental_profit: float, investment: float) -> float:
    if investment > 0 and incremental_profit > 0:
        return float(investment / incremental_profit)
    return 0.0


def payback_label(months: float) -> str:
    if months < 1:
        return f"{months * 30:.0f} days"
    if months < 12:
        return f"{months:.1f} months"
    return f"{months / 12:.1f} years"
