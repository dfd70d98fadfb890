"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from slack_inbox.core.config import load_app_settings


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Ensure each test sees a fresh settings instance."""

    load_app_settings.cache_clear()


def test_defaults_loaded_without_env_file() -> None:
    """Default values should be returned when no overrides are present."""

    settings = load_app_settings(include_environment=False)
    assert settings.slack.base_url == "https://slack.com/api/"
    assert settings.store.backend == "sqlite"
    assert settings.store.db_path == Path("./slack_inbox.db")
    assert settings.reminders.offsets_hours == [1, 8, 24, 72, 168, 336]
    assert settings.features.inbox_enabled is True


def test_env_file_overrides(tmp_path: Path) -> None:
    """Values defined in an env file should override defaults."""

    env_file = tmp_path / "test.env"
    env_file.write_text(
        "\n".join(
            [
                "SLACK_INBOX_STORE__BACKEND=redis",
                "SLACK_INBOX_STORE__KEY_PREFIX=staging",
                "SLACK_INBOX_FEATURES__INBOX_ENABLED=false",
                "SLACK_INBOX_REMINDERS__OFFSETS_HOURS=2, 12,48",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_app_settings(env_file=env_file, include_environment=False)
    assert settings.store.backend == "redis"
    assert settings.store.key_prefix == "staging"
    assert settings.features.inbox_enabled is False
    assert settings.reminders.offsets_hours == [2, 12, 48]


def test_environment_overrides_env_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / "test.env"
    env_file.write_text("SLACK_INBOX_SLACK__TIMEOUT_SECONDS=5\n", encoding="utf-8")
    monkeypatch.setenv("SLACK_INBOX_SLACK__TIMEOUT_SECONDS", "20")

    settings = load_app_settings(env_file=env_file)
    assert settings.slack.timeout_seconds == 20
