"""Regression tests for runtime settings and logging configuration."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from app.config import (
    AppSettings,
    SettingsLoadError,
    config_configure_logging,
    config_load_database_url,
    config_load_settings,
)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    yield root_logger
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)


def test_config_settings_defaults_cover_local_runtime() -> None:
    settings = AppSettings(_env_file=None)

    assert settings.application_port == 3000
    assert settings.database_url.startswith("sqlite:///")
    assert settings.webhook_url is None
    assert settings.connector_username == "qbwc"
    assert settings.qbxml_version == "13.0"
    assert settings.default_max_returned == 20


def test_config_settings_normalizes_log_level_and_blank_optionals() -> None:
    settings = AppSettings(
        _env_file=None,
        log_level=" debug ",
        webhook_url="   ",
        api_username="",
        connector_session_ticket=" ",
    )

    assert settings.log_level == "DEBUG"
    assert settings.webhook_url is None
    assert settings.api_username is None
    assert settings.connector_session_ticket is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"log_level": "verbose"},
        {"connector_username": "   "},
        {"application_port": 0},
        {"webhook_timeout_seconds": 0},
        {"webhook_url": "http://[::1/hook"},
        {"webhook_url": "listener.example/hook"},
        {"api_dead_letter_default_limit": 100, "api_dead_letter_max_limit": 10},
    ],
)
def test_config_settings_rejects_invalid_values(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, **overrides)


def test_config_settings_session_ticket_falls_back_to_username() -> None:
    assert AppSettings(_env_file=None, connector_username="desk").settings_session_ticket() == "desk"
    assert AppSettings(
        _env_file=None,
        connector_username="desk",
        connector_session_ticket="fixed-ticket",
    ).settings_session_ticket() == "fixed-ticket"


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_URL", "https://listener.example/hook")
    monkeypatch.setenv("DEFAULT_MAX_RETURNED", "5")

    settings = config_load_settings()

    assert str(settings.webhook_url) == "https://listener.example/hook"
    assert settings.default_max_returned == 5


def test_config_load_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()


def test_config_load_database_url_rejects_blank_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "  ")

    with pytest.raises(SettingsLoadError, match="must not be blank"):
        config_load_database_url()


def test_config_configure_logging_sets_single_root_handler(restore_root_logger: logging.Logger) -> None:
    config_configure_logging("warning")
    config_configure_logging("debug")

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1


def test_config_configure_logging_rejects_unknown_level(restore_root_logger: logging.Logger) -> None:
    _ = restore_root_logger

    with pytest.raises(ValueError, match="unsupported log level"):
        config_configure_logging("loud")
