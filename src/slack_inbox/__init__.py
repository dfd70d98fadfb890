"""Task inbox for Slack: attach follow-ups to messages and track responses."""

__version__ = "0.1.0"
