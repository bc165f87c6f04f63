"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from reflectkit import reflection
from reflectkit.config.logging import configure_from_settings, configure_logging
from reflectkit.config.settings import ReflectSettings


class Empty:
    pass


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("reflectkit")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("reflectkit").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("reflectkit").level == logging.WARNING

    def test_human_mode_output(self) -> None:
        configure_logging(verbose=True, log_json=False)
        log = structlog.get_logger("reflectkit.test")
        log.warning("hello world", key="val")
        # Smoke test: verify no exception; format depends on terminal

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("reflectkit.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "reflectkit.test"
        assert "timestamp" in parsed

    def test_find_failure_is_structured_when_verbose(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        assert reflection.find_field(Empty, "missing") is None

        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip().splitlines()[0])
        assert parsed["event"].startswith("Could not resolve field 'missing'")
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "reflectkit.reflection"

    def test_find_failure_is_silent_when_not_verbose(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=False, log_json=True)

        assert reflection.find_field(Empty, "missing") is None

        captured = capfd.readouterr()
        assert captured.err == ""

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("pydantic").debug("validator noise")

        captured = capfd.readouterr()
        assert captured.err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1


class TestConfigureFromSettings:
    def test_applies_settings(self, tmp_path) -> None:
        settings = ReflectSettings(project_root=tmp_path, verbose=True)
        returned = configure_from_settings(settings)
        assert returned is settings
        assert logging.getLogger("reflectkit").level == logging.DEBUG

    def test_discovers_settings(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.reflectkit]\nverbose = true\n")
        monkeypatch.chdir(tmp_path)
        settings = configure_from_settings()
        assert settings.verbose is True
        assert settings.config_path == tmp_path / "pyproject.toml"
        assert logging.getLogger("reflectkit").level == logging.DEBUG
