"""Logging setup for the CLI and the web app."""

from __future__ import annotations

import logging.config
from typing import Any

from .config import LoggingSettings

_FORMATTERS: dict[bool, dict[str, Any]] = {
    # key=value lines for log shippers
    True: {
        "format": "{asctime} level={levelname} logger={name} msg={message}",
        "style": "{",
    },
    False: {"format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s"},
}

# Third-party loggers that log every request at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore")


def build_logging_config(settings: LoggingSettings) -> dict[str, Any]:
    """Return the ``dictConfig`` mapping for ``settings``."""
    level = settings.level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"slack_inbox": _FORMATTERS[settings.structured]},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "slack_inbox",
                "level": level,
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(settings: LoggingSettings) -> None:
    """Apply ``settings`` to the root logger."""
    logging.config.dictConfig(build_logging_config(settings))


__all__ = ["build_logging_config", "configure_logging"]
