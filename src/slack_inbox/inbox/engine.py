"""Inbox entry lifecycle: creation, fan-out, resolution and deletion.

Every entry is stored twice: once in the sender's ``inbox:sent`` list and once
in each recipient's ``inbox:received`` list. The copies share only the source
message ts and the sender id. Writes are read-modify-write on whole per-user
lists with no cross-key transaction, so concurrent writers for the same user
can lose updates and a failure between the sender and recipient writes leaves
the copies out of step. Neither case is compensated here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from ..core.datetime_utils import utc_now
from ..core.interfaces import (
    ChatPlatform,
    HashStore,
    NotificationError,
    NotificationKind,
    NotificationSender,
    iter_members,
)
from ..core.models import (
    CreateInboxEntryOptions,
    InboxAction,
    InboxEntry,
    InboxEntryResolution,
    MessageRef,
    ReceivedInboxEntry,
    SentInboxEntry,
)
from .reminders import DEFAULT_REMINDER_OFFSETS, compute_reminders

LOGGER = logging.getLogger(__name__)

SENT_NAMESPACE = "inbox:sent"
RECEIVED_NAMESPACE = "inbox:received"

ReceivedInboxUpdate = Callable[
    [list[ReceivedInboxEntry], str], list[ReceivedInboxEntry]
]


class InboxService:
    """Create, resolve, read and delete inbox entries."""

    def __init__(
        self,
        store: HashStore,
        platform: ChatPlatform,
        notifier: NotificationSender,
        *,
        reminder_offsets: Sequence[timedelta] = DEFAULT_REMINDER_OFFSETS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._platform = platform
        self._notifier = notifier
        self._reminder_offsets = tuple(reminder_offsets)
        self._clock = clock

    @property
    def notifier(self) -> NotificationSender:
        return self._notifier

    def now(self) -> datetime:
        """Current time according to the injected clock."""
        return self._clock()

    # Creation -----------------------------------------------------------------
    def create_entry(self, options: CreateInboxEntryOptions) -> SentInboxEntry:
        """Create an entry for every member of the source channel.

        With ``enable_reminders`` and a deadline, reminders are scheduled on the
        fixed offsets. With ``notify_on_create``, each recipient is sent a
        notification in member order until Slack rate-limits the bot; the
        remaining recipients still get the entry in their inbox.
        """
        reminders: list[datetime] = []
        if options.enable_reminders and options.deadline is not None:
            reminders = compute_reminders(
                options.deadline, self._clock(), self._reminder_offsets
            )

        recipient_ids: tuple[str, ...] = ()
        if options.channel:
            recipient_ids = tuple(iter_members(self._platform, options.channel))

        permalink = self._platform.get_permalink(options.channel, options.ts)

        entry = InboxEntry(
            message=MessageRef(channel=options.channel, ts=options.ts, url=permalink),
            description=options.description,
            actions=tuple(options.actions),
            deadline=options.deadline,
            reminders=tuple(reminders),
        )

        sent_entry = SentInboxEntry.from_entry(entry, recipient_ids)
        # Whole-list replace: concurrent creations by one sender can race.
        existing = self.load_sent(options.user_id)
        self._save_sent(options.user_id, [sent_entry, *existing])

        message_ts: dict[str, tuple[str, ...]] = {}
        if options.notify_on_create:
            message_ts = self._notify_recipients(
                ReceivedInboxEntry.from_entry(entry, options.user_id), recipient_ids
            )

        self.update_all_received_inboxes(
            recipient_ids,
            lambda inbox, recipient_id: [
                ReceivedInboxEntry.from_entry(
                    entry, options.user_id, message_ts.get(recipient_id)
                ),
                *inbox,
            ],
        )
        LOGGER.info(
            "Created inbox entry %s from %s for %d recipient(s) with %d reminder(s)",
            options.ts,
            options.user_id,
            len(recipient_ids),
            len(reminders),
        )
        return sent_entry

    def _notify_recipients(
        self, entry: ReceivedInboxEntry, recipient_ids: Sequence[str]
    ) -> dict[str, tuple[str, ...]]:
        """Send "new entry" notifications in order, stopping on rate limiting."""
        message_ts: dict[str, tuple[str, ...]] = {}
        for recipient_id in recipient_ids:
            try:
                handle = self._notifier.send(recipient_id, entry, NotificationKind.NEW)
            except NotificationError as exc:
                if exc.is_rate_limited:
                    LOGGER.error(
                        "Rate-limited while notifying recipients of %s; "
                        "%d of %d notified",
                        entry.message.ts,
                        len(message_ts),
                        len(recipient_ids),
                    )
                    break
                LOGGER.warning(
                    "Failed to notify %s about %s: %s",
                    recipient_id,
                    entry.message.ts,
                    exc,
                )
                continue
            LOGGER.debug("Sent notification to %s (%s)", handle.channel, handle.ts)
            message_ts[recipient_id] = (handle.ts,)
        return message_ts

    # Reads --------------------------------------------------------------------
    def load_sent(self, user_id: str) -> list[SentInboxEntry]:
        """Return the entries ``user_id`` has sent, newest first."""
        raw = self._store.hget(SENT_NAMESPACE, user_id) or []
        return [SentInboxEntry.from_dict(item) for item in raw]

    def load_received(self, user_id: str) -> list[ReceivedInboxEntry]:
        """Return the entries ``user_id`` has received, newest first."""
        raw = self._store.hget(RECEIVED_NAMESPACE, user_id) or []
        return [ReceivedInboxEntry.from_dict(item) for item in raw]

    def load_received_many(
        self, user_ids: Sequence[str]
    ) -> dict[str, list[ReceivedInboxEntry]]:
        """Return received lists for ``user_ids`` in one store call."""
        if not user_ids:
            return {}
        raw = self._store.hmget(RECEIVED_NAMESPACE, *user_ids)
        return {
            user_id: [ReceivedInboxEntry.from_dict(item) for item in raw.get(user_id) or []]
            for user_id in user_ids
        }

    def received_user_ids(self) -> list[str]:
        """Return every user with a stored received list."""
        return self._store.hkeys(RECEIVED_NAMESPACE)

    # Deletion -----------------------------------------------------------------
    def delete_entry(self, sender_id: str, message_ts: str) -> bool:
        """Remove an entry from its sender and every recipient.

        Returns ``False`` without writing anything when the sender has no entry
        for ``message_ts``. Recipient copies are removed before the sender's,
        so a failure in between leaves the entry visible to the sender and a
        retry completes the deletion.
        """
        existing = self.load_sent(sender_id)
        target = next(
            (entry for entry in existing if entry.message.ts == message_ts), None
        )
        if target is None:
            LOGGER.debug("No sent entry %s for %s; nothing to delete", message_ts, sender_id)
            return False

        self.update_all_received_inboxes(
            target.recipient_ids,
            lambda inbox, _recipient_id: [
                entry for entry in inbox if entry.message.ts != message_ts
            ],
        )
        self._save_sent(
            sender_id, [entry for entry in existing if entry.message.ts != message_ts]
        )
        LOGGER.info(
            "Deleted inbox entry %s from %s and %d recipient(s)",
            message_ts,
            sender_id,
            len(target.recipient_ids),
        )
        return True

    # Resolution ---------------------------------------------------------------
    def record_resolution(
        self,
        sender_id: str,
        message_ts: str,
        recipient_id: str,
        action_id: str,
        timestamp: datetime | None = None,
    ) -> SentInboxEntry | None:
        """Store ``recipient_id``'s chosen action on the sender's copy.

        ``action_id`` must name one of the entry's own actions and
        ``recipient_id`` must be one of its recipients. A later resolution by
        the same recipient replaces the earlier one. Returns the updated entry,
        or ``None`` without writing when the entry is gone or the resolution is
        not valid for it.
        """
        entries = self.load_sent(sender_id)
        index = next(
            (i for i, entry in enumerate(entries) if entry.message.ts == message_ts),
            None,
        )
        if index is None:
            LOGGER.warning(
                "Resolution from %s for unknown entry %s of %s",
                recipient_id,
                message_ts,
                sender_id,
            )
            return None

        entry = entries[index]
        if recipient_id not in entry.recipient_ids:
            LOGGER.warning(
                "Ignoring resolution from %s: not a recipient of entry %s",
                recipient_id,
                message_ts,
            )
            return None
        action = _offered_action(entry, action_id)
        if action is None:
            LOGGER.warning(
                "Ignoring resolution %s from %s: not offered on entry %s",
                action_id,
                recipient_id,
                message_ts,
            )
            return None

        resolutions = dict(entry.resolutions)
        resolutions[recipient_id] = InboxEntryResolution(
            action=action, timestamp=timestamp or self._clock()
        )
        updated = replace(entry, resolutions=resolutions)
        entries[index] = updated
        self._save_sent(sender_id, entries)
        LOGGER.info(
            "Recorded %s from %s on entry %s", action_id, recipient_id, message_ts
        )
        return updated

    def update_received_entry(
        self,
        recipient_id: str,
        message_ts: str,
        update: Callable[[ReceivedInboxEntry], ReceivedInboxEntry | None],
    ) -> bool:
        """Rewrite one entry of a recipient's received list.

        ``update`` returns the replacement entry, or ``None`` to drop it.
        Returns ``False`` without writing when the recipient has no such entry.
        """
        entries = self.load_received(recipient_id)
        for index, entry in enumerate(entries):
            if entry.message.ts != message_ts:
                continue
            replacement = update(entry)
            if replacement is None:
                del entries[index]
            else:
                entries[index] = replacement
            self.save_received({recipient_id: entries})
            return True
        return False

    def remove_received(self, recipient_id: str, message_ts: str) -> bool:
        """Drop one entry from a recipient's received list."""
        return self.update_received_entry(recipient_id, message_ts, lambda _entry: None)

    # Fan-out ------------------------------------------------------------------
    def update_all_received_inboxes(
        self, recipient_ids: Sequence[str], update: ReceivedInboxUpdate
    ) -> None:
        """Apply ``update`` to every recipient's received list in one batch.

        Lists are read with a single ``hmget`` (missing users start empty) and
        written back with a single ``hset``. None of the store adapters report
        per-key failures, so the write succeeds or fails as a whole.
        """
        if not recipient_ids:
            return
        inboxes = self.load_received_many(recipient_ids)
        self.save_received(
            {
                recipient_id: update(inboxes.get(recipient_id, []), recipient_id)
                for recipient_id in recipient_ids
            }
        )

    def _save_sent(self, user_id: str, entries: list[SentInboxEntry]) -> None:
        self._store.hset(
            SENT_NAMESPACE, {user_id: [entry.to_dict() for entry in entries]}
        )

    def save_received(self, updates: dict[str, list[ReceivedInboxEntry]]) -> None:
        """Replace the received lists of several users in one batch."""
        if not updates:
            return
        self._store.hset(
            RECEIVED_NAMESPACE,
            {
                user_id: [entry.to_dict() for entry in entries]
                for user_id, entries in updates.items()
            },
        )


def _offered_action(entry: InboxEntry, action_id: str) -> InboxAction | None:
    return next((action for action in entry.actions if action.action_id == action_id), None)


__all__ = [
    "InboxService",
    "RECEIVED_NAMESPACE",
    "ReceivedInboxUpdate",
    "SENT_NAMESPACE",
]
