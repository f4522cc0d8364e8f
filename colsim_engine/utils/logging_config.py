"""Handlers for the ``colsim_engine`` logger tree.

Modules log through ``logging.getLogger(__name__)`` and never configure
handlers themselves; scripts (the benchmark, notebooks) call
``setup_logging`` once.  Simulation diagnostics arrive at WARNING, per-column
progress at DEBUG and the run summary at INFO.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

ROOT_LOGGER = "colsim_engine"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"unknown log level {level!r}")
        return value
    return level


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None,
                  format_string: str = DEFAULT_FORMAT,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a console handler (and a file handler) to the engine logger.

    Calling it again replaces the handlers from the previous call, closing
    them first, so repeated setup never duplicates records.  ``level`` may be
    a number or a name such as ``"debug"``.
    """
    level = _resolve_level(level)
    formatter = logging.Formatter(format_string)

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under ``colsim_engine``; the prefix is added when missing."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
