import json
import logging
import uuid

from src.collabnotes.core.logging import ColoredFormatter, JSONFormatter, get_log_level, get_logger


def make_record(**extra):
    record = logging.LogRecord(
        name="collabnotes.locks",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Lock acquired",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_keeps_extra_fields():
    note_id = uuid.uuid4()
    out = json.loads(JSONFormatter().format(make_record(note_id=note_id, username="alice")))

    assert out["message"] == "Lock acquired"
    assert out["level"] == "INFO"
    assert out["extra"] == {"note_id": str(note_id), "username": "alice"}


def test_json_formatter_without_extra():
    out = json.loads(JSONFormatter().format(make_record()))
    assert "extra" not in out


def test_colored_formatter_leaves_record_untouched():
    record = make_record()
    ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert record.levelname == "INFO"


def test_get_log_level():
    assert get_log_level("debug") == logging.DEBUG
    assert get_log_level("nonsense") == logging.INFO


def test_get_logger_namespace():
    assert get_logger("locks").name == "collabnotes.locks"
