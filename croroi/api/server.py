from __future__ import annotations
from dataclasses import asdict, replace
from typing import Any, Dict
from flask import Flask, request, jsonify, Response
from loguru import logger

import os

from croroi.api.ratelimit import SlidingWindowLimiter
from croroi.api.calculator import (
    CalculatorInputs,
    calculate,
    forecast_scenarios,
    inputs_from_dict,
    scenario_to_dict,
)
from croroi.config.env import ForecastConfig, get_api_config, get_forecast_config, parse_lifts
from croroi.config.logging import configure_logging
from croroi.exports.reports import forecast_md, results_text, validation_report_md
from croroi.exports.share import build_share_query, build_share_url, load_shared_inputs
from croroi.exports.writers import write_scenarios
from croroi.forecasting.assumptions import InvalidInput, check_finite
from croroi.forecasting.engine import project, validate_series
from croroi.funnel.sync import FunnelState, apply_edit

app = Flask(__name__)

# POST routes that run a computation are rate limited per client
COMPUTE_ROUTES = ("/calculate", "/forecast", "/export/forecast.csv", "/export/results.txt", "/export/report.md")

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_api_config().api_key


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None or w is None:
        cfg = get_api_config()
        n = cfg.rate_limit_n if n is None else n
        w = cfg.rate_limit_window_sec if w is None else w
    return int(n), float(w)


def _forecast_config() -> ForecastConfig:
    cfg = get_forecast_config()
    overrides: Dict[str, Any] = {}
    if app.config.get('FORECAST_CURVE'):
        overrides['curve'] = str(app.config['FORECAST_CURVE']).lower()
    if app.config.get('FORECAST_HORIZON_MONTHS'):
        overrides['horizon_months'] = int(app.config['FORECAST_HORIZON_MONTHS'])
    if app.config.get('FORECAST_SCENARIO_LIFTS'):
        lifts = app.config['FORECAST_SCENARIO_LIFTS']
        overrides['scenario_lifts'] = parse_lifts(lifts) if isinstance(lifts, str) else tuple(float(x) for x in lifts)
    if app.config.get('FORECAST_VALUE_MODE'):
        overrides['value_mode'] = str(app.config['FORECAST_VALUE_MODE']).lower()
    return replace(cfg, **overrides) if overrides else cfg

_limiter = SlidingWindowLimiter()


def _caller() -> str:
    # first hop of X-Forwarded-For when behind a proxy
    forwarded = request.headers.get('X-Forwarded-For', '')
    return forwarded.split(',')[0].strip() or request.remote_addr or 'anon'


@app.before_request
def _guard():
    if request.path == '/health':
        return None
    expected = _get_api_key()
    if expected and request.headers.get('X-API-Key') != expected:
        logger.warning("missing or wrong API key on {}", request.path)
        return jsonify({'error': 'unauthorized'}), 401
    if request.method != 'POST' or request.path not in COMPUTE_ROUTES:
        return None
    limit, window = _get_rate_limit()
    retry = _limiter.hit(_caller(), limit, window)
    if retry is None:
        return None
    resp = jsonify({'error': 'rate_limited'})
    resp.status_code = 429
    resp.headers['Retry-After'] = f"{retry:.2f}"
    return resp


@app.after_request
def _log_request(resp):
    logger.info("{} {} -> {}", request.method, request.path, resp.status_code)
    return resp


@app.errorhandler(InvalidInput)
def _invalid_input(e: InvalidInput):
    logger.warning("rejected input on {}: {}", request.path, e)
    return jsonify({'error': str(e)}), 400


def _payload() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInput('request body must be a JSON object')
    return payload


def _calc_inputs(payload: Dict[str, Any]) -> CalculatorInputs:
    # inputs may be nested under "inputs" or sent at the top level
    return inputs_from_dict(payload.get('inputs') or payload)


def _num(payload: Dict[str, Any], *keys: str, default: float | None = None) -> float:
    for k in keys:
        if payload.get(k) not in (None, ''):
            check_finite(**{k: payload[k]})
            return float(payload[k])
    if default is None:
        raise InvalidInput(f"{keys[0]} is required")
    return default


@app.get('/health')
def health():
    return jsonify({'status': 'ok'})


@app.post('/calculate')
def post_calculate():
    payload = _payload()
    result = calculate(
        _calc_inputs(payload),
        yearly=bool(payload.get('yearly', False)),
        value_mode=payload.get('value_mode'),
        curve=payload.get('curve'),
        config=_forecast_config(),
    )
    return jsonify(result)


@app.post('/forecast')
def post_forecast():
    payload = _payload()
    cfg = _forecast_config()
    months = payload.get('months', cfg.horizon_months)
    if isinstance(months, bool) or not isinstance(months, int):
        raise InvalidInput(f"months must be a positive integer, got {months!r}")
    result = project(
        revenue=_num(payload, 'revenue'),
        margin_percent=_num(payload, 'margin_percent', 'margin', default=0.0),
        investment=_num(payload, 'investment', default=0.0),
        target_lift_percent=_num(payload, 'target_lift_percent', 'target_lift', 'lift'),
        months=months,
        value_mode=payload.get('value_mode') or cfg.value_mode,
        curve=payload.get('curve') or cfg.curve,
    )
    body = scenario_to_dict(result)
    body['checks'] = validate_series(result, months=months)
    return jsonify(body)


@app.post('/sync')
def post_sync():
    payload = _payload()
    state_in = payload.get('state') or {}
    if not isinstance(state_in, dict):
        raise InvalidInput('state must be an object')
    known = asdict(FunnelState())
    state = FunnelState(**{k: _num(state_in, k, default=v) for k, v in known.items()})
    field = payload.get('field')
    if not field:
        raise InvalidInput('field is required')
    new_state = apply_edit(state, str(field), _num(payload, 'value'))
    return jsonify(asdict(new_state))


@app.get('/share')
def get_share():
    loaded = load_shared_inputs(request.args.to_dict())
    return jsonify({'inputs': asdict(loaded), 'query': build_share_query(loaded)})


@app.post('/share')
def post_share():
    payload = _payload()
    inputs = _calc_inputs(payload)
    base_url = payload.get('base_url') or request.host_url
    return jsonify({'query': build_share_query(inputs), 'url': build_share_url(base_url, inputs)})


@app.post('/export/forecast.csv')
def export_forecast_csv():
    payload = _payload()
    scenarios = forecast_scenarios(
        _calc_inputs(payload),
        value_mode=payload.get('value_mode'),
        curve=payload.get('curve'),
        config=_forecast_config(),
    )
    return Response(write_scenarios(scenarios), mimetype='text/csv', headers={
        'Content-Disposition': 'attachment; filename="forecast.csv"'
    })


@app.post('/export/results.txt')
def export_results_text():
    payload = _payload()
    result = calculate(_calc_inputs(payload), config=_forecast_config())
    yearly = bool(payload.get('yearly', False))
    body = results_text(
        result['current_revenue'],
        result['incremental_revenue'],
        result['incremental_profit'] or 0.0,
        yearly=yearly,
    )
    return Response(body, mimetype='text/plain')


@app.post('/export/report.md')
def export_report_md():
    payload = _payload()
    cfg = _forecast_config()
    scenarios = forecast_scenarios(
        _calc_inputs(payload),
        value_mode=payload.get('value_mode'),
        curve=payload.get('curve'),
        config=cfg,
    )
    checks = {
        f"{name}.{check}": ok
        for name, res in scenarios.items()
        for check, ok in validate_series(res, months=cfg.horizon_months).items()
    }
    curve = payload.get('curve') or cfg.curve
    body = forecast_md(scenarios, notes=[
        f"Lift adoption curve: {curve}",
        "Month 1 is research only; lift is applied to a fixed revenue baseline.",
    ]) + "\n" + validation_report_md(checks, details={'months': cfg.horizon_months})
    return Response(body, mimetype='text/markdown')


if __name__ == '__main__':
    configure_logging()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '8000')))
