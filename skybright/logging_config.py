"""
Logging for skybright.

Library modules (session, luminance) only call
``logging.getLogger(__name__)``. The sky-map runner calls setup_logging()
once per run. After that the ``skybright`` logger writes readable lines to
the console and, when a run directory is given, JSON Lines to
``{run_dir}/skybright.jsonl``. Every record carries the run id. Step
records from run_step() also carry a ``step`` dict that is merged into the
JSON entry.

Usage:
    from skybright.logging_config import get_pipeline_logger
    log = get_pipeline_logger(__name__)
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone

LOGGER_NAME = "skybright"

_state = {"run_id": None, "console": None, "run_file": None}


def set_run_id(run_id=None):
    """Start a new run id (random unless given) and return it."""
    _state["run_id"] = run_id or uuid.uuid4().hex[:8]
    return _state["run_id"]


def get_run_id():
    if _state["run_id"] is None:
        set_run_id()
    return _state["run_id"]


class RunIdFilter(logging.Filter):

    def filter(self, record):
        record.run_id = get_run_id()
        return True


class JsonLinesFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc)
                            .isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "run_id": getattr(record, "run_id", None),
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "step", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _attach(logger, handler, level, formatter):
    handler.setLevel(level)
    handler.setFormatter(formatter)
    # Handler-level: logger filters do not see records from child loggers.
    handler.addFilter(RunIdFilter())
    logger.addHandler(handler)
    return handler


def setup_logging(run_dir=None, console_level=None):
    """Attach the console handler once, and the run-file handler once per run.

    Args:
        run_dir: If given, ``{run_dir}/skybright.jsonl`` receives every
            record at DEBUG.
        console_level: Console level. Default: LOG_LEVEL env var or INFO.

    Returns:
        The ``skybright`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    if _state["console"] is None:
        if console_level is None:
            console_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(),
                                    logging.INFO)
        console_fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                                        datefmt="%Y-%m-%d %H:%M:%S")
        _state["console"] = _attach(logger, logging.StreamHandler(), console_level,
                                    console_fmt)

    if run_dir and _state["run_file"] is None:
        os.makedirs(run_dir, exist_ok=True)
        path = os.path.join(run_dir, "skybright.jsonl")
        _state["run_file"] = _attach(logger, logging.FileHandler(path), logging.DEBUG,
                                     JsonLinesFormatter())
    return logger


def reset_logging():
    """Detach and close skybright's handlers and forget the run id (tests)."""
    logger = logging.getLogger(LOGGER_NAME)
    for key in ("console", "run_file"):
        handler = _state[key]
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()
        _state[key] = None
    _state["run_id"] = None


def get_pipeline_logger(name):
    """Logger for a runner-side module; sets up console output on first use."""
    if _state["console"] is None:
        setup_logging()
    return logging.getLogger(name)
