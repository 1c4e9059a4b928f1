"""Structured event logging for collection runs.

Every record is one JSON object per line. The log message is the event name
(``records_saved``, ``shutdown_start``, ...) and the ``extra`` mapping carries
the event's fields, kept as real JSON values so lists of record ids or
per-action results stay queryable. Records logged inside a run carry its
``run_id``.
"""

import json
import logging
import os
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, Optional

QUIET_LOGGERS = ("httpx", "httpcore", "PIL")

_run_id: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def set_run_id(value: Optional[str]) -> None:
    _run_id.set(value)


def get_run_id() -> Optional[str]:
    return _run_id.get()


def new_run_id() -> str:
    return uuid.uuid4().hex[:8]


@contextmanager
def run_scope(run_id: Optional[str] = None) -> Iterator[str]:
    """Tag every record logged inside the block with ``run_id`` (a fresh one if omitted)."""
    run_id = run_id or new_run_id()
    token = _run_id.set(run_id)
    try:
        yield run_id
    finally:
        _run_id.reset(token)


# Attributes every LogRecord has; anything else on the record came from extra=.
_BUILTIN_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    return repr(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``event``, then the event fields."""

    def format(self, record: logging.LogRecord) -> str:
        out = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        run_id = getattr(record, "run_id", None) or get_run_id()
        if run_id:
            out["run_id"] = run_id
        for key, value in record.__dict__.items():
            if key in _BUILTIN_ATTRS or key in out or value is None:
                continue
            out[key] = _jsonable(value)
        if record.exc_info and record.exc_info[0] is not None:
            exc = record.exc_info[1]
            out["error_type"] = type(exc).__name__
            out["error"] = str(exc)
            out["traceback"] = self.formatException(record.exc_info)
        if record.stack_info:
            out["stack"] = self.formatStack(record.stack_info)
        return json.dumps(out, ensure_ascii=False, default=repr)


_installed: list[logging.Handler] = []


def configure_logging(
    level: Optional[str] = None,
    stream: Any = sys.stderr,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """Send JSON event lines to ``stream`` (and ``log_file`` if set).

    Idempotent: later calls are no-ops unless ``force`` is true, in which case
    the handlers from the previous call are removed first.
    """
    root = logging.getLogger()
    if _installed:
        if not force:
            return
        for handler in _installed:
            root.removeHandler(handler)
            handler.close()
        _installed.clear()

    from config import LOG_FILE as CONFIG_LOG_FILE, LOG_LEVEL as CONFIG_LOG_LEVEL, ROOT
    level_name = (level or os.environ.get("LOG_LEVEL") or CONFIG_LOG_LEVEL or "INFO").upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    root.setLevel(numeric)
    formatter = JsonFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    file_path = log_file or CONFIG_LOG_FILE
    unavailable = None
    if file_path:
        path = Path(file_path)
        if not path.is_absolute():
            path = ROOT / path
        try:
            handlers.append(logging.FileHandler(path, encoding="utf-8"))
        except OSError as e:
            unavailable = {"log_file": str(path), "reason": str(e)}

    for handler in handlers:
        handler.setLevel(numeric)
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)

    if unavailable:
        root.warning("log_file_unavailable", extra=unavailable)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
