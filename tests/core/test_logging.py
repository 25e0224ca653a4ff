"""Tests for log formatting and the logging provider."""

from __future__ import annotations

import io
import logging

from bandwise.core import BandwiseContainer, LoggingProvider
from bandwise.core.logging import TRACE, TraceLogLevelLogger
from bandwise.lib.logging import ExtraFormatter


def make_record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("bandwise.test", logging.INFO, __file__, 10, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestExtraFormatter(object):
    """Tests for ExtraFormatter."""

    def test_appends_extra_as_json(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(message)s", indent=False, stream=io.StringIO())
        assert formatter.format(make_record("evaluated", overall=7.0)) == 'evaluated {"overall": 7.0}'

    def test_without_extra(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(message)s", stream=io.StringIO())
        assert formatter.format(make_record("plain")) == "plain"

    def test_multiline_message_is_aligned(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(levelname)s %(message)s", stream=io.StringIO())
        assert formatter.format(make_record("first\nsecond")) == "INFO first\n     second"


class TestLoggingProvider(object):
    """Tests for LoggingProvider."""

    def test_trace_level(self, container: BandwiseContainer) -> None:
        container.logging()
        assert logging.getLevelName(TRACE) == "TRACE"
        assert isinstance(LoggingProvider.get_logger(name="bandwise.test.trace"), TraceLogLevelLogger)

    def test_module_scope(self, container: BandwiseContainer) -> None:
        container.logging()
        assert LoggingProvider.get_logger().name == __name__

    def test_function_scope(self, container: BandwiseContainer) -> None:
        container.logging()
        assert LoggingProvider.get_logger("fn").name == f"{__name__}.test_function_scope"
