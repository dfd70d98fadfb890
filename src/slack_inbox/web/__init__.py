"""Web application entry point for Slack Inbox."""

from .app import create_app

__all__ = ["create_app"]
