from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from croroi.forecasting.assumptions import InvalidInput


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidInput(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def parse_lifts(raw: str) -> Tuple[float, ...]:
    """Parse a comma-separated list of lift percentages ("10,20,40")."""
    try:
        lifts = tuple(float(p) for p in raw.split(",") if p.strip())
    except ValueError:
        raise InvalidInput(f"scenario lifts must be numbers, got {raw!r}")
    if not lifts:
        raise InvalidInput("at least one scenario lift is required")
    return lifts


@dataclass(frozen=True)
class ForecastConfig:
    curve: str = "discrete"  # discrete|linear
    horizon_months: int = 12
    scenario_lifts: Tuple[float, ...] = (10.0, 20.0, 40.0)  # conservative, target, best case
    value_mode: str = "profit"  # profit|revenue


def get_forecast_config() -> ForecastConfig:
    lifts_raw = os.getenv("FORECAST_SCENARIO_LIFTS")
    return ForecastConfig(
        curve=os.getenv("FORECAST_CURVE", "discrete").strip().lower(),
        horizon_months=_env_int("FORECAST_HORIZON_MONTHS", 12),
        scenario_lifts=parse_lifts(lifts_raw) if lifts_raw else ForecastConfig.scenario_lifts,
        value_mode=os.getenv("FORECAST_VALUE_MODE", "profit").strip().lower(),
    )


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    serialize: bool = False  # JSON lines on stderr
    log_file: Optional[str] = None


def get_logging_config() -> LoggingConfig:
    return LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        serialize=_env_bool("LOG_SERIALIZE"),
        log_file=os.getenv("LOG_FILE") or None,
    )


@dataclass(frozen=True)
class APIConfig:
    api_key: Optional[str] = None
    rate_limit_n: int = 5
    rate_limit_window_sec: float = 1.0


def get_api_config() -> APIConfig:
    window = os.getenv("RATE_LIMIT_WINDOW_SEC", "1.0")
    try:
        window_sec = float(window)
    except ValueError:
        raise InvalidInput(f"RATE_LIMIT_WINDOW_SEC must be a number, got {window!r}")
    return APIConfig(
        api_key=os.getenv("API_KEY") or None,
        rate_limit_n=_env_int("RATE_LIMIT_N", 5),
        rate_limit_window_sec=window_sec,
    )
