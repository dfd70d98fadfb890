"""Send due reminders for received inbox entries."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.interfaces import NotificationError, NotificationKind
from ..core.models import DispatchReport, ReceivedInboxEntry
from .engine import InboxService
from .reminders import due_reminders

LOGGER = logging.getLogger(__name__)


class ReminderDispatcher:
    """Scan received inboxes and notify recipients whose reminders are due.

    Meant to be triggered periodically (cron hitting the web endpoint or the
    ``remind`` CLI command). Each entry with at least one due reminder gets a
    single notification and all of its due reminders are consumed, so a missed
    run never produces a burst of overdue messages. After a rate-limit the run
    stops sending; unreached entries keep their reminders for the next run.
    """

    def __init__(self, service: InboxService) -> None:
        self._service = service

    def run(self, user_ids: Sequence[str] | None = None) -> DispatchReport:
        """Dispatch due reminders for ``user_ids`` (default: every recipient)."""
        now = self._service.now()
        targets = list(user_ids) if user_ids is not None else self._service.received_user_ids()
        inboxes = self._service.load_received_many(targets)

        checked = 0
        sent = 0
        rate_limited = False
        updates: dict[str, list[ReceivedInboxEntry]] = {}

        for user_id, entries in inboxes.items():
            if rate_limited:
                break
            changed = False
            for index, entry in enumerate(entries):
                checked += 1
                due, remaining = due_reminders(entry.reminders, now)
                if not due:
                    continue
                try:
                    handle = self._service.notifier.send(
                        user_id, entry, NotificationKind.REMINDER
                    )
                except NotificationError as exc:
                    if exc.is_rate_limited:
                        LOGGER.error(
                            "Rate-limited while sending reminders; stopping after %d",
                            sent,
                        )
                        rate_limited = True
                        break
                    LOGGER.warning(
                        "Failed to send reminder for %s to %s: %s",
                        entry.message.ts,
                        user_id,
                        exc,
                    )
                    entries[index] = entry.with_reminder_sent(None, remaining)
                    changed = True
                    continue
                entries[index] = entry.with_reminder_sent(handle.ts, remaining)
                changed = True
                sent += 1
            if changed:
                updates[user_id] = entries

        self._service.save_received(updates)
        LOGGER.info(
            "Reminder run checked %d entr(ies) for %d user(s), sent %d",
            checked,
            len(inboxes),
            sent,
        )
        return DispatchReport(checked=checked, sent=sent, rate_limited=rate_limited)


__all__ = ["ReminderDispatcher"]
