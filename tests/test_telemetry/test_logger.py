"""Tests for structured logging configuration."""

import json
import logging
import pathlib
from collections.abc import Iterator
from typing import Any

import pytest
import structlog

import powerpilot.telemetry.logger as logger_module
from powerpilot.telemetry import MODE_TRANSITION
from powerpilot.telemetry.logger import configure_logging, get_logger


@pytest.fixture
def log_dir(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[pathlib.Path]:
    """Point the file handler at a temporary directory at DEBUG level."""
    directory = tmp_path / "logs"
    monkeypatch.setattr(logger_module, "_get_log_dir", lambda: directory)
    monkeypatch.setattr(logger_module, "_get_log_level", lambda: "DEBUG")

    structlog.reset_defaults()
    logging.root.handlers.clear()
    configure_logging()
    yield directory

    for handler in logging.root.handlers:
        handler.close()
    logging.root.handlers.clear()
    structlog.reset_defaults()


def _last_entry(log_dir: pathlib.Path) -> dict[str, Any]:
    with open(log_dir / "current.jsonl", encoding="utf-8") as f:
        lines = f.readlines()
    assert len(lines) > 0
    return json.loads(lines[-1])


class TestLoggerConfiguration:
    """Test logger configuration and setup."""

    def test_get_logger_returns_bound_logger(self) -> None:
        """Test that get_logger returns a logger that can be used."""
        log = get_logger(__name__)
        assert hasattr(log, "info")
        assert hasattr(log, "error")
        assert hasattr(log, "warning")

    def test_get_logger_configures_on_first_call(self) -> None:
        """Test that get_logger configures logging on first call."""
        structlog.reset_defaults()

        get_logger("test.module1")
        assert structlog.is_configured()

    def test_logger_creates_log_directory(self, log_dir: pathlib.Path) -> None:
        """Test that configure_logging creates the log directory."""
        assert log_dir.exists()

    def test_logger_emits_structured_logs(self, log_dir: pathlib.Path) -> None:
        """Test that logger emits structured JSON logs to file."""
        log = get_logger("powerpilot.policy.controller")
        log.info(MODE_TRANSITION, from_mode="Balanced", to_mode="Max", scheme="performance")

        entry = _last_entry(log_dir)
        assert entry["event"] == "mode_transition"
        assert entry["from_mode"] == "Balanced"
        assert entry["to_mode"] == "Max"
        assert entry["level"] == "info"
        assert entry["component"] == "controller"

    def test_logger_includes_timestamp(self, log_dir: pathlib.Path) -> None:
        """Test that log entries include a UTC timestamp."""
        get_logger("test").info("test_event")

        timestamp = _last_entry(log_dir)["timestamp"]
        assert "T" in timestamp
        assert timestamp.endswith("Z") or timestamp.endswith("+00:00")

    def test_component_from_module_name(self, log_dir: pathlib.Path) -> None:
        """Test the component is the last part of the logger name."""
        get_logger("powerpilot.engine").info("test_event")

        assert _last_entry(log_dir)["component"] == "engine"

    def test_explicit_component_wins(self, log_dir: pathlib.Path) -> None:
        """Test a component keyword overrides the derived one."""
        get_logger("powerpilot.sampling.scheduler").info("test_event", component="sampler")

        assert _last_entry(log_dir)["component"] == "sampler"

    def test_stdlib_records_are_structured(self, log_dir: pathlib.Path) -> None:
        """Test plain logging records go through the same JSON formatter."""
        logging.getLogger("thirdparty.module").warning("plain message")

        entry = _last_entry(log_dir)
        assert entry["event"] == "plain message"
        assert entry["component"] == "module"
