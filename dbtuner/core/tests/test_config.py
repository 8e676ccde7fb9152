"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dbtuner.core.config import Settings, get_settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.safe_mode is True
    assert settings.export_schema is True
    assert settings.db_host == "localhost"
    assert settings.db_port == 1433
    assert settings.lock_timeout_ms == 15000
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("TARGET_DB", "Sales")
    monkeypatch.setenv("SAFE_MODE", "false")
    monkeypatch.setenv("DB_PORT", "1500")
    settings = Settings(_env_file=None)
    assert settings.target_db == "Sales"
    assert settings.safe_mode is False
    assert settings.db_port == 1500


def test_invalid_port_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("DB_PORT", "not-a-port")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_are_frozen() -> None:
    settings = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        settings.target_db = "Other"


def test_get_settings_ignores_none_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TARGET_DB", "FromEnv")
    settings = get_settings(target_db=None, safe_mode=False)
    assert settings.target_db == "FromEnv"
    assert settings.safe_mode is False
