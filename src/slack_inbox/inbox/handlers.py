"""Glue between Slack interaction events and the inbox service."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.config import FeatureSettings
from ..core.interfaces import EphemeralSender, FeatureFlags
from ..core.models import CreateInboxEntryOptions, SentInboxEntry
from .engine import InboxService

LOGGER = logging.getLogger(__name__)

INBOX_FEATURE = "inbox"
DISABLED_NOTICE = "The inbox feature is not enabled."


@dataclass(slots=True)
class SettingsFeatureFlags(FeatureFlags):
    """Feature flags read from application settings."""

    settings: FeatureSettings

    def is_enabled(self, name: str) -> bool:
        if name == INBOX_FEATURE:
            return self.settings.inbox_enabled
        return False


class InboxHandlers:
    """Entry points called by the platform event handlers."""

    def __init__(
        self,
        service: InboxService,
        flags: FeatureFlags,
        ephemeral: EphemeralSender,
    ) -> None:
        self._service = service
        self._flags = flags
        self._ephemeral = ephemeral

    def create(self, options: CreateInboxEntryOptions) -> SentInboxEntry | None:
        """Create an entry, or tell the author the feature is disabled."""
        if not self._flags.is_enabled(INBOX_FEATURE):
            LOGGER.info("Inbox disabled; rejecting entry from %s", options.user_id)
            self._ephemeral.post_ephemeral(
                options.channel, options.user_id, DISABLED_NOTICE
            )
            return None
        return self._service.create_entry(options)

    def resolve(
        self, recipient_id: str, sender_id: str, message_ts: str, action_id: str
    ) -> SentInboxEntry | None:
        """Record a recipient's button click and clear it from their inbox.

        Clicks that :meth:`InboxService.record_resolution` rejects change
        nothing.
        """
        updated = self._service.record_resolution(
            sender_id, message_ts, recipient_id, action_id
        )
        if updated is not None:
            self._service.remove_received(recipient_id, message_ts)
        return updated

    def delete(self, sender_id: str, message_ts: str) -> bool:
        """Delete an entry the sender no longer wants to track."""
        return self._service.delete_entry(sender_id, message_ts)


__all__ = [
    "DISABLED_NOTICE",
    "INBOX_FEATURE",
    "InboxHandlers",
    "SettingsFeatureFlags",
]
