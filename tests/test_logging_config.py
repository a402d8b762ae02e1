"""Tests for urikit/logging_config.py structured output."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

# The package lives under ./app; add it to sys.path for tests.
REPO_ROOT = Path(__file__).resolve().parents[1]
APP_ROOT = REPO_ROOT / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from urikit import logging_config  # noqa: E402
from urikit.logging_config import (  # noqa: E402
    JSONFormatter,
    PrettyFormatter,
    log_with_context,
    setup_logging,
)


def _record(**extra_fields) -> logging.LogRecord:
    logger = logging.getLogger("test.logger")
    return logger.makeRecord(
        name="test.logger",
        level=logging.INFO,
        fn="test_logging_config.py",
        lno=1,
        msg="uri modified",
        args=(),
        exc_info=None,
        extra={"extra_fields": extra_fields},
    )


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def test_json_formatter_includes_context_fields():
    formatter = JSONFormatter(service_name="urikit")
    payload = json.loads(
        formatter.format(_record(uri="http://bébé.be/", operation="append_label"))
    )

    assert payload["service"] == "urikit"
    assert payload["level"] == "INFO"
    assert payload["message"] == "uri modified"
    assert payload["uri"] == "http://bébé.be/"
    assert payload["operation"] == "append_label"


def test_pretty_formatter_truncates_long_uris():
    formatter = PrettyFormatter(service_name="urikit")
    output = formatter.format(_record(uri="http://example.com/" + "a" * 100, operation="resolve"))

    assert "uri modified" in output
    assert "operation=resolve" in output
    assert "a" * 100 not in output
    assert "..." in output


def test_log_with_context_attaches_extra_fields():
    logger = logging.getLogger("test.urikit.context")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = _ListHandler()
    logger.handlers = [handler]

    log_with_context(logger, logging.DEBUG, "resolving public suffix", host="example.com")

    assert len(handler.records) == 1
    assert handler.records[0].extra_fields == {"host": "example.com"}


def test_log_with_context_skips_disabled_levels():
    logger = logging.getLogger("test.urikit.disabled")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    handler = _ListHandler()
    logger.handlers = [handler]

    log_with_context(logger, logging.DEBUG, "not emitted", host="example.com")

    assert handler.records == []


def test_setup_logging_selects_formatter_from_log_format(monkeypatch):
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        monkeypatch.setattr(logging_config, "LOG_FORMAT", "pretty")
        setup_logging("urikit-test", level=logging.WARNING)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, PrettyFormatter)
        assert root.level == logging.WARNING

        monkeypatch.setattr(logging_config, "LOG_FORMAT", "json")
        setup_logging("urikit-test")
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
