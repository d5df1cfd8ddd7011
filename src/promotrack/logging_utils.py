"""Logging setup for the command line tools.

Library modules only create ``promotrack.*`` loggers; handlers are attached
here by the entry point.

Design constraints:
  - Graceful degradation: if the file handler fails, keep console logging.
  - Repeated initialization must not duplicate handlers.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import PromotrackConfig

SYSTEM_FMT = "[%(asctime)s] [%(levelname)s] %(message)s"
ROOT_LOGGER_NAME = "promotrack"


def _ensure_logs_dir(config: PromotrackConfig) -> Path:
    logs_dir = Path(config.logging.logs_dir).expanduser().resolve()
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _safe_add_file_handler(logger: logging.Logger, config: PromotrackConfig, level: int) -> Optional[Path]:
    try:
        path = _ensure_logs_dir(config) / config.logging.file_name
        fh = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        logger.warning("[WARNING] Failed to attach file handler in %s (%s)", config.logging.logs_dir, exc)
        return None
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(SYSTEM_FMT))
    logger.addHandler(fh)
    return path


def get_logger(config: Optional[PromotrackConfig] = None, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return the ``promotrack`` logger with console + file handlers.

    Child loggers (``promotrack.catalog`` etc.) propagate into it.
    """

    config = config or PromotrackConfig()
    level = getattr(logging, config.logging.level.upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Reset handlers to avoid duplication across repeated initializations
    logger.handlers = []

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(SYSTEM_FMT))
    logger.addHandler(sh)

    path = _safe_add_file_handler(logger, config, level)
    if path is not None:
        logger.debug("Logging initialised. Logs will be written to %s", path)
    return logger


def log_system_event(logger: logging.Logger, message: str):
    logger.info("[SYSTEM] %s", message)


def log_warning(logger: logging.Logger, message: str):
    logger.warning("[WARNING] %s", message)


def log_error(logger: logging.Logger, message: str):
    logger.error("[ERROR] %s", message)
