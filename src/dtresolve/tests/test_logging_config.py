"""
Unit tests for dtresolve.logging_config.
"""
import json
import logging
import sys

from dtresolve.logging_config import JSONFormatter, PrettyJSONFormatter, setup_logging


def _record(message="Resolved", level=logging.INFO, **extra):
    logger = logging.getLogger("dtresolve.test")
    return logger.makeRecord(logger.name, level, __file__, 1, message, (), None, extra=extra)


class TestJSONFormatter:
    """Tests for single-line JSON output."""

    def test_basic_fields(self):
        """Test the standard fields."""
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "dtresolve.test"
        assert data["message"] == "Resolved"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        """Test serializable extras are included and others skipped."""
        data = json.loads(JSONFormatter().format(
            _record(time_zone="UTC", round_up=True, zone_object=object())))
        assert data["time_zone"] == "UTC"
        assert data["round_up"] is True
        assert "zone_object" not in data

    def test_exception(self):
        """Test exception info is rendered."""
        try:
            raise ValueError("bad input")
        except ValueError:
            record = logging.getLogger("dtresolve.test").makeRecord(
                "dtresolve.test", logging.ERROR, __file__, 1, "Failed", (), sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad input" in data["exception"]


class TestPrettyJSONFormatter:
    """Tests for the console formatter."""

    def test_line(self):
        """Test level, logger, message and extras appear on one line."""
        line = PrettyJSONFormatter().format(_record(level=logging.WARNING, time_zone="UTC"))
        assert "[WARNING]" in line
        assert "dtresolve.test: Resolved" in line
        assert "(time_zone=UTC)" in line


class TestSetupLogging:
    """Tests for logger configuration."""

    def test_console_handler(self):
        """Test level, formatter and propagation."""
        logger = setup_logging("dtresolve", "DEBUG", "pretty")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, PrettyJSONFormatter)
        assert logger.propagate is False

    def test_unknown_level_defaults_to_info(self):
        """Test an unknown level name."""
        assert setup_logging("dtresolve", "LOUD").level == logging.INFO

    def test_file_handler(self, tmp_path):
        """Test file logs are always JSON."""
        log_file = tmp_path / "logs" / "dtresolve.log"
        logger = setup_logging("dtresolve", "INFO", "pretty", str(log_file))
        logger.info("Resolved", extra={"time_zone": "UTC"})
        for handler in logger.handlers:
            handler.flush()

        data = json.loads(log_file.read_text().strip())
        assert data["message"] == "Resolved"
        assert data["time_zone"] == "UTC"
        for handler in logger.handlers:
            handler.close()
