# croroi/config/logging.py
# -----------------------------------------------------------------------------
# Loguru setup
# - stderr sink (plain or serialized JSON lines)
# - optional rotating file sink
# -----------------------------------------------------------------------------
from __future__ import annotations
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from croroi.config.env import LoggingConfig, get_logging_config


def configure_logging(cfg: Optional[LoggingConfig] = None) -> None:
    cfg = cfg or get_logging_config()
    logger.remove()  # drop the default handler
    logger.add(
        sys.stderr,
        level=cfg.level,
        serialize=cfg.serialize,
        backtrace=True,
        diagnose=False,
    )
    if cfg.log_file:
        path = Path(cfg.log_file)
        path.parent.mkdir(exist_ok=True, parents=True)
        logger.add(
            path,
            rotation="10 MB",
            retention="10 files",
            enqueue=True,
            backtrace=True,
            level=cfg.level,
        )
