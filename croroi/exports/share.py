from __future__ import annotations
from dataclasses import asdict, replace
from typing import Dict, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit
import math

from croroi.api.calculator import CalculatorInputs, validate_calculator_inputs
from croroi.funnel.sync import round_half_up

# query parameter -> CalculatorInputs field
PARAMS: Dict[str, str] = {
    "sessions": "sessions",
    "cr": "conversion_rate_percent",
    "lift": "lift_percent",
    "revenue": "revenue",
    "sales": "sales",
    "margin": "margin_percent",
    "cac": "cac",
    "investment": "investment",
}


def _compact(v: float) -> str:
    v = float(v)
    return str(int(v)) if v.is_integer() else repr(v)


def build_share_query(inputs: CalculatorInputs) -> str:
    """Encode the calculator inputs as a query string (no leading '?')."""
    values = asdict(inputs)
    return urlencode([(param, _compact(values[field])) for param, field in PARAMS.items()])


def build_share_url(base_url: str, inputs: CalculatorInputs) -> str:
    base = base_url.split("?", 1)[0]
    return f"{base}?{build_share_query(inputs)}"


def _query_pairs(query: Union[str, Mapping[str, str]]) -> Dict[str, str]:
    if isinstance(query, Mapping):
        return {str(k): str(v) for k, v in query.items()}
    if "://" in query:
        query = urlsplit(query).query
    return dict(parse_qsl(query.lstrip("?")))


def _parse_number(raw: str) -> Optional[float]:
    try:
        v = float(raw)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def load_shared_inputs(
    query: Union[str, Mapping[str, str]],
    defaults: CalculatorInputs = CalculatorInputs(),
) -> CalculatorInputs:
    """Overlay shared-link parameters on ``defaults``.

    Empty and non-numeric values are ignored. When anything was loaded and
    sessions and conversion rate are both positive, sales are re-derived from
    them so the funnel stays consistent. Negative values raise InvalidInput.
    """
    pairs = _query_pairs(query)
    updates: Dict[str, float] = {}
    for param, field in PARAMS.items():
        raw = pairs.get(param)
        if not raw:
            continue
        v = _parse_number(raw)
        if v is not None:
            updates[field] = v
    if not updates:
        return defaults
    loaded = replace(defaults, **updates)
    validate_calculator_inputs(loaded)
    if loaded.sessions > 0 and loaded.conversion_rate_percent > 0:
        loaded = replace(loaded, sales=round_half_up(loaded.sessions * loaded.conversion_rate_percent / 100.0))
    return loaded
