"""Tests for engine settings and logging setup."""

import json
import logging
from decimal import Decimal

import pytest

from moneylith.core.config import DEFAULT_SETTINGS, EngineSettings, load_settings
from moneylith.core.exceptions import ConfigurationError, InputFileError, MoneylithError
from moneylith.core.logging import JsonFormatter, get_logger, setup_logging


class TestEngineSettings:
    """Tests for EngineSettings and load_settings."""

    def test_defaults(self) -> None:
        assert DEFAULT_SETTINGS.recurring_stddev_ratio == Decimal("0.2")
        assert DEFAULT_SETTINGS.bucket_window_months == 6
        assert DEFAULT_SETTINGS.max_simulation_months == 600
        assert DEFAULT_SETTINGS.sample_transaction_limit == 5

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONEYLITH_BUCKET_WINDOW_MONTHS", "3")
        monkeypatch.setenv("MONEYLITH_RECURRING_STDDEV_RATIO", "0.1")

        settings = EngineSettings.from_env()

        assert settings.bucket_window_months == 3
        assert settings.recurring_stddev_ratio == Decimal("0.1")
        assert settings.max_simulation_months == 600

    def test_invalid_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONEYLITH_BUCKET_WINDOW_MONTHS", "0")

        with pytest.raises(ConfigurationError):
            EngineSettings.from_env()

    def test_load_without_path_uses_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONEYLITH_MAX_SIMULATION_MONTHS", "24")

        assert load_settings().max_simulation_months == 24

    def test_load_from_file(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"max_simulation_months": 12, "log_level": "DEBUG"}))

        settings = load_settings(path)

        assert settings.max_simulation_months == 12
        assert settings.log_level == "DEBUG"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{broken")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_settings(path)

    def test_non_object(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="object"):
            load_settings(path)

    def test_invalid_values(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"recurring_stddev_ratio": -1}))

        with pytest.raises(ConfigurationError):
            load_settings(path)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self) -> None:
        assert issubclass(ConfigurationError, MoneylithError)
        assert issubclass(InputFileError, MoneylithError)

    def test_input_file_error_message(self) -> None:
        error = InputFileError("debts.json", "file not found")

        assert str(error) == "debts.json: file not found"
        assert error.reason == "file not found"


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_configures_package_logger(self) -> None:
        setup_logging(level="DEBUG")

        logger = logging.getLogger("moneylith")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_setup_logging_replaces_handlers(self) -> None:
        setup_logging(level="INFO")
        setup_logging(level="WARNING", format_type="json")

        logger = logging.getLogger("moneylith")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="LOUD")

        assert logging.getLogger("moneylith").level == logging.INFO

    def test_json_formatter(self) -> None:
        record = logging.LogRecord(
            name="moneylith.test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="hello %s",
            args=("world",),
            exc_info=None,
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "moneylith.test"
        assert data["message"] == "hello world"
        assert set(data) == {"timestamp", "level", "logger", "message"}

    def test_get_logger(self) -> None:
        assert get_logger("moneylith.engine").name == "moneylith.engine"
