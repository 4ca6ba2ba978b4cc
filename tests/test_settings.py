import logging

import pytest
from pydantic import ValidationError

from glycotrack.config.settings import Settings
from glycotrack.main import create_app
from glycotrack.storage import InMemoryReportStore, create_report_store
from glycotrack.utils.logger import configure_logging, logger

ENV_NAMES = (
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "FRONTEND_ORIGIN",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "PORT",
    "HBA1C_HISTORY_LIMIT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_from_env(clean_env, tmp_path):
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-test")
    clean_env.setenv("ANTHROPIC_MODEL", "claude-test")
    clean_env.setenv("FRONTEND_ORIGIN", "http://localhost:5173, https://app.example.org")
    clean_env.setenv("HBA1C_HISTORY_LIMIT", "20")

    settings = Settings.from_env(env_file=tmp_path / "absent.env")

    assert settings.anthropic.api_key == "sk-test"
    assert settings.anthropic.model == "claude-test"
    assert settings.frontend_origins == ["http://localhost:5173", "https://app.example.org"]
    assert settings.history_limit == 20
    assert settings.port == 4000
    assert settings.supabase.configured is False


def test_defaults_without_env(clean_env, tmp_path):
    settings = Settings.from_env(env_file=tmp_path / "absent.env")

    assert settings.anthropic.api_key is None
    assert settings.anthropic.model == "claude-3-5-haiku-20241022"
    assert settings.frontend_origins == ["*"]
    assert settings.log_level == "INFO"


def test_env_file_values_are_read_and_process_env_wins(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ANTHROPIC_MODEL=claude-from-file\nLOG_LEVEL=debug\nPORT=5000\n")
    clean_env.setenv("PORT", "6000")

    settings = Settings.from_env(env_file=env_file)

    assert settings.anthropic.model == "claude-from-file"
    assert settings.log_level == "DEBUG"
    assert settings.port == 6000


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_create_app_applies_log_level():
    try:
        create_app(Settings(log_level="warning"))
        assert logger.level == logging.WARNING
    finally:
        configure_logging("INFO")


def test_unconfigured_supabase_uses_memory_store():
    assert isinstance(create_report_store(Settings().supabase), InMemoryReportStore)
