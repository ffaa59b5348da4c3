from __future__ import annotations

from croroi.funnel.sync import round_half_up


def format_currency(n: float) -> str:
    return "$" + f"{int(round_half_up(n)):,}"


def format_cac(n: float) -> str:
    return "$" + f"{n:.2f}"


def format_profit(n: float) -> str:
    """Compact form used on scenario cards: $1.23M, $84k, $950."""
    if n >= 1_000_000:
        return "$" + f"{n / 1_000_000:.2f}M"
    if n >= 1000:
        return "$" + f"{n / 1000:.0f}k"
    return "$" + f"{n:.0f}"


def format_percent(n: float, places: int = 1) -> str:
    return f"{n:.{places}f}%"
