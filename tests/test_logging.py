"""Unit tests for appstorage.engine.logging — Formatter & handler setup."""

import io
import json
import logging
import sys

from appstorage.engine.config import LoggingConfig
from appstorage.engine.logging import (
    JsonLogFormatter,
    configure_logging,
    storage_extra,
)


def _record(msg="hello", **extra):
    record = logging.LogRecord(
        name="appstorage.storage.folder",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonLogFormatter:
    def test_basic_fields(self):
        entry = json.loads(JsonLogFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "appstorage.storage.folder"
        assert entry["message"] == "hello"
        assert "timestamp" in entry
        assert "operation" not in entry

    def test_structured_fields(self):
        record = _record(operation="create_folder", path="/tmp/x", option="fail_if_exists")
        entry = json.loads(JsonLogFormatter().format(record))
        assert entry["operation"] == "create_folder"
        assert entry["path"] == "/tmp/x"
        assert entry["option"] == "fail_if_exists"

    def test_compact_output(self):
        line = JsonLogFormatter().format(_record())
        assert ", " not in line
        assert "\n" not in line

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JsonLogFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestStorageExtra:
    def test_drops_none(self):
        assert storage_extra("delete_file") == {"operation": "delete_file"}
        assert storage_extra("move_file", "/a", option=None) == {
            "operation": "move_file",
            "path": "/a",
        }

    def test_keeps_fields(self):
        extra = storage_extra("create_file", "/a", option="open_if_exists")
        assert extra["option"] == "open_if_exists"


class TestConfigureLogging:
    def test_json_to_stream(self):
        stream = io.StringIO()
        logger = configure_logging(LoggingConfig(level="DEBUG", format="json"), stream=stream)
        assert logger.name == "appstorage"
        logging.getLogger("appstorage.storage.file").info(
            "Deleted file", extra=storage_extra("delete_file", "/tmp/a")
        )
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "Deleted file"
        assert entry["operation"] == "delete_file"

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging(LoggingConfig(level="WARNING"), stream=stream)
        logging.getLogger("appstorage.cli").info("quiet")
        assert stream.getvalue() == ""

    def test_repeat_calls_do_not_duplicate(self):
        configure_logging(LoggingConfig(), stream=io.StringIO())
        logger = configure_logging(LoggingConfig(), stream=io.StringIO())
        marked = [h for h in logger.handlers if getattr(h, "_appstorage_handler", False)]
        assert len(marked) == 1

    def test_file_handler(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = configure_logging(
            LoggingConfig(directory=str(log_dir), format="text"), stream=io.StringIO()
        )
        logging.getLogger("appstorage.storage.folder").warning("written to disk")
        for handler in logger.handlers:
            handler.flush()
        content = (log_dir / "appstorage.log").read_text(encoding="utf-8")
        assert "written to disk" in content
        assert "appstorage.storage.folder" in content
