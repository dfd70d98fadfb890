"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class SlackSettings(BaseModel):
    """Settings controlling Slack Web API access."""

    bot_token: str | None = Field(default=None, description="Bot user OAuth token")
    base_url: str = Field(
        default="https://slack.com/api/", description="Slack Web API base URL"
    )
    timeout_seconds: float = Field(
        default=10.0, gt=0, description="Request timeout for Slack API calls"
    )


class StoreSettings(BaseModel):
    """Settings for the hash store backing the inbox."""

    backend: Literal["memory", "sqlite", "redis"] = Field(
        default="sqlite", description="Which hash store adapter to use"
    )
    db_path: Path = Field(
        default=Path("./slack_inbox.db"), description="SQLite database path"
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    key_prefix: str | None = Field(
        default=None,
        description="Prefix for every namespace, used to separate environments",
    )


class ReminderSettings(BaseModel):
    """Lead times before a deadline at which reminders fire."""

    offsets_hours: list[float] = Field(
        default_factory=lambda: [1, 8, 24, 24 * 3, 24 * 7, 24 * 14],
        description="Hours before the deadline for each reminder",
    )


class FeatureSettings(BaseModel):
    """Feature toggles consulted by the event handlers."""

    inbox_enabled: bool = Field(default=True, description="Enable the inbox feature")


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Emit key=value log lines"
    )


class WebSettings(BaseModel):
    """Settings for the HTTP surface."""

    cron_secret: str | None = Field(
        default=None, description="Bearer token required by the cron endpoint"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    slack: SlackSettings = Field(default_factory=SlackSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    reminders: ReminderSettings = Field(default_factory=ReminderSettings)
    features: FeatureSettings = Field(default_factory=FeatureSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    web: WebSettings = Field(default_factory=WebSettings)


ENV_PREFIX = "SLACK_INBOX_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _normalize_value(path: list[str], value: Any) -> Any:
    """Coerce raw environment strings into values pydantic can validate."""
    if not isinstance(value, str):
        return value
    if value == "":
        return None
    lowercase_value = value.lower()
    if lowercase_value == "true":
        return True
    if lowercase_value == "false":
        return False
    if path[-1] == "offsets_hours":
        return [segment.strip() for segment in value.split(",") if segment.strip()]
    return value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool = True
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values: dict[str, str] = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        _merge_into_tree(collected, path, _normalize_value(path, value))

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment=include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "FeatureSettings",
    "LoggingSettings",
    "ReminderSettings",
    "SlackSettings",
    "StoreSettings",
    "WebSettings",
    "load_app_settings",
]
