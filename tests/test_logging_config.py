import io
import json
import logging
import sys
from pathlib import Path

import config
from utils import logging_config
from utils.logging_config import JsonFormatter, get_run_id, run_scope, set_run_id


def make_record(msg, exc_info=None, **extra):
    record = logging.LogRecord("lifecycle.coordinator", logging.INFO, __file__, 1, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_with_extra_fields():
    out = json.loads(JsonFormatter().format(make_record("shutdown_start", trigger="SIGINT", actions=2, skipped=None)))
    assert out["event"] == "shutdown_start"
    assert out["level"] == "INFO"
    assert out["logger"] == "lifecycle.coordinator"
    assert out["trigger"] == "SIGINT"
    assert out["actions"] == 2
    assert "skipped" not in out
    assert "message" not in out


def test_run_id_attached_from_context():
    set_run_id("abc123")
    try:
        out = json.loads(JsonFormatter().format(make_record("collect_start")))
        assert out["run_id"] == "abc123"
    finally:
        set_run_id(None)
    assert get_run_id() is None


def test_run_scope_restores_previous_run_id():
    with run_scope("outer"):
        with run_scope() as inner:
            assert len(inner) == 8
            assert get_run_id() == inner
        assert get_run_id() == "outer"
    assert get_run_id() is None


def test_structured_extras_stay_nested_json():
    record = make_record(
        "records_saved",
        ids=["ChIJ1", "ChIJ2"],
        counts={"saved": 2, "skipped": ("dup",)},
        store=Path("/tmp/places.json"),
    )
    out = json.loads(JsonFormatter().format(record))
    assert out["ids"] == ["ChIJ1", "ChIJ2"]
    assert out["counts"] == {"saved": 2, "skipped": ["dup"]}
    assert out["store"] == "/tmp/places.json"


def test_unknown_objects_fall_back_to_repr():
    class Handle:
        def __repr__(self):
            return "<Handle 7>"

    out = json.loads(JsonFormatter().format(make_record("x", handle=Handle())))
    assert out["handle"] == "<Handle 7>"


def test_exception_fields():
    try:
        raise OSError("read-only filesystem")
    except OSError:
        record = make_record("save_action_failed", exc_info=sys.exc_info())
    out = json.loads(JsonFormatter().format(record))
    assert out["error_type"] == "OSError"
    assert out["error"] == "read-only filesystem"
    assert "Traceback" in out["traceback"]


def test_configure_logging_is_idempotent_unless_forced(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    monkeypatch.setattr(logging_config, "_installed", [])
    monkeypatch.setattr(config, "LOG_FILE", "")
    first, second = io.StringIO(), io.StringIO()
    try:
        logging_config.configure_logging(level="INFO", stream=first)
        logging_config.configure_logging(level="INFO", stream=second)
        logging.getLogger("utils.store").info("records_saved", extra={"saved": 1})
        assert json.loads(first.getvalue().splitlines()[-1])["saved"] == 1
        assert second.getvalue() == ""

        logging_config.configure_logging(level="INFO", stream=second, force=True)
        logging.getLogger("utils.store").info("records_saved", extra={"saved": 2})
        assert json.loads(second.getvalue().splitlines()[-1])["saved"] == 2
        assert len(logging_config._installed) == 1
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in logging_config._installed:
            root.removeHandler(handler)
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
