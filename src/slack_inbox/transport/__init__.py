"""Transport adapters for the Slack platform."""

from .slack_client import RATE_LIMITED, SlackApiError, SlackClient

__all__ = ["RATE_LIMITED", "SlackApiError", "SlackClient"]
