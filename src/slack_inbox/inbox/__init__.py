"""Inbox entries: creation, reminders, resolution and deletion."""

from .actions import ALL_RESPONSE_ACTIONS, DEFAULT_RESPONSE_ACTIONS, find_action
from .dispatcher import ReminderDispatcher
from .engine import RECEIVED_NAMESPACE, SENT_NAMESPACE, InboxService
from .handlers import InboxHandlers, SettingsFeatureFlags
from .notifications import SlackNotificationSender
from .reminders import DEFAULT_REMINDER_OFFSETS, compute_reminders, due_reminders

__all__ = [
    "ALL_RESPONSE_ACTIONS",
    "DEFAULT_REMINDER_OFFSETS",
    "DEFAULT_RESPONSE_ACTIONS",
    "InboxHandlers",
    "InboxService",
    "RECEIVED_NAMESPACE",
    "ReminderDispatcher",
    "SENT_NAMESPACE",
    "SettingsFeatureFlags",
    "SlackNotificationSender",
    "compute_reminders",
    "due_reminders",
    "find_action",
]
