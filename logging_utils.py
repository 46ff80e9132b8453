"""Tagged console logging for the field engines.

Every message carries a level and a component tag, with optional key=value
fields appended so engine events stay greppable.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

DEFAULT_TAG = "PhonoField"

_logger = logging.getLogger("phonofield")
if not _logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(levelname)s][%(tag)s] %(message)s")
    handler.setFormatter(formatter)
    _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)


class _TagAdapter(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: dict[str, Any]):
        tag = kwargs.pop("tag", None) or DEFAULT_TAG
        kwargs.setdefault("extra", {})["tag"] = tag
        return msg, kwargs


_logger_adapter = _TagAdapter(_logger, {})


def _format_value(value: Any) -> str:
    # engine clocks and heights are floats; keep them short
    if isinstance(value, (float, np.floating)):
        return f"{float(value):.6g}"
    return str(value)


def log_event(level: str, tag: str | None, message: str, **fields: Any) -> None:
    """Log a message under a component tag, appending key=value fields.
    An empty tag falls back to DEFAULT_TAG."""
    if fields:
        extras = " ".join(f"{k}={_format_value(v)}" for k, v in fields.items())
        message = f"{message} | {extras}"
    level_name = level.upper()
    level_val = getattr(logging, level_name, logging.INFO)
    _logger_adapter.log(level_val, message, tag=tag)


def set_log_level(level: str) -> None:
    """Set global log level (DEBUG/INFO/WARNING/ERROR)."""
    level_name = (level or "INFO").upper()
    level_val = getattr(logging, level_name, logging.INFO)
    _logger.setLevel(level_val)


def get_log_level() -> str:
    """Return current global log level name."""
    return logging.getLevelName(_logger.level)


def tagged(tag: str) -> Callable[..., None]:
    """Return log_event bound to one component tag: log(level, message, **fields)."""
    def log(level: str, message: str, **fields: Any) -> None:
        log_event(level, tag, message, **fields)
    return log
