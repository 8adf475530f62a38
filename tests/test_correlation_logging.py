"""
Tests for correlation logging functionality
"""
import json
import logging
import uuid

from weather_edge.utils.logger import (
    ColorizedJSONFormatter,
    PrettyFormatter,
    generate_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="weather_edge", level=logging.INFO, pathname=__file__, lineno=10,
        msg=msg, args=(), exc_info=None, func="test",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationLogging:
    """Test correlation ID generation and propagation"""

    def test_correlation_id_generation(self):
        correlation_id = generate_correlation_id()

        assert isinstance(correlation_id, str)
        assert len(correlation_id) == 36  # UUID4 format

    def test_correlation_id_context(self):
        logger.clear_context()
        assert get_correlation_id() is None

        test_id = str(uuid.uuid4())
        set_correlation_id(test_id)

        assert get_correlation_id() == test_id

        logger.clear_context()
        assert get_correlation_id() is None

    def test_context_is_stamped_on_records(self, caplog):
        logger.clear_context()
        logger.set_context(correlation_id="corr-1", request_id="req-1")
        logger._logger.addHandler(caplog.handler)

        try:
            logger.info("Test log message", extra={"vendor": "open-meteo"})
        finally:
            logger._logger.removeHandler(caplog.handler)
            logger.clear_context()

        record = caplog.records[-1]
        assert record.correlation_id == "corr-1"
        assert record.request_id == "req-1"
        assert record.vendor == "open-meteo"


class TestFormatters:

    def test_json_formatter(self):
        formatter = ColorizedJSONFormatter(enable_color=False)

        output = json.loads(formatter.format(make_record(correlation_id="corr-1", vendor="open-meteo")))

        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["correlation_id"] == "corr-1"
        assert output["extra"]["vendor"] == "open-meteo"

    def test_json_formatter_color(self):
        formatter = ColorizedJSONFormatter(enable_color=True)

        output = formatter.format(make_record())

        assert output.startswith("\033[32m")
        assert output.endswith("\033[0m")

    def test_pretty_formatter(self):
        formatter = PrettyFormatter(enable_color=False)

        output = formatter.format(make_record(correlation_id="corr-1"))

        assert "INFO" in output
        assert "hello" in output
        assert "[correlation_id=corr-1]" in output
