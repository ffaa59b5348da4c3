import json
import math
import sys
from typing import Dict, List, Optional

from loguru import logger

from croroi.api.calculator import calculate, forecast_scenarios
from croroi.config.logging import configure_logging
from croroi.exports.share import PARAMS, load_shared_inputs
from croroi.exports.writers import write_forecast
from croroi.forecasting.assumptions import InvalidInput

USAGE = (
    "Usage: python -m croroi.cli [key=value ...] [--yearly] [--csv] [--curve=NAME] [--mode=profit|revenue]\n"
    "  keys: sessions, cr, lift, revenue, sales, margin, cac, investment"
)


def parse_args(argv: List[str]) -> Dict[str, object]:
    params: Dict[str, str] = {}
    opts: Dict[str, object] = {"yearly": False, "csv": False, "curve": None, "mode": None}
    for arg in argv:
        if arg in ("-h", "--help"):
            raise InvalidInput(USAGE)
        if arg == "--yearly":
            opts["yearly"] = True
        elif arg == "--csv":
            opts["csv"] = True
        elif arg.startswith("--curve="):
            opts["curve"] = arg.split("=", 1)[1]
        elif arg.startswith("--mode="):
            opts["mode"] = arg.split("=", 1)[1]
        elif "=" in arg and not arg.startswith("-"):
            k, v = (p.strip() for p in arg.split("=", 1))
            if k not in PARAMS:
                raise InvalidInput(f"unknown key {k!r}\n{USAGE}")
            try:
                ok = math.isfinite(float(v))
            except ValueError:
                ok = False
            if not ok:
                raise InvalidInput(f"{k} must be a number, got {v!r}")
            params[k] = v
        else:
            raise InvalidInput(f"unrecognised argument {arg!r}\n{USAGE}")
    opts["params"] = params
    return opts


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    try:
        opts = parse_args(sys.argv[1:] if argv is None else argv)
        inputs = load_shared_inputs(opts["params"])
        if opts["csv"]:
            scenarios = forecast_scenarios(inputs, value_mode=opts["mode"], curve=opts["curve"])
            target = scenarios.get("target") or next(iter(scenarios.values()))
            sys.stdout.write(write_forecast(target))
            return 0
        result = calculate(inputs, yearly=bool(opts["yearly"]), value_mode=opts["mode"], curve=opts["curve"])
    except InvalidInput as e:
        logger.debug("cli rejected input: {}", e)
        print(str(e), file=sys.stderr)
        return 2
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
