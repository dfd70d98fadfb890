"""Core domain models used across the application.

Entries are stored as JSON documents in the hash store. ``to_dict`` and
``from_dict`` translate between the dataclasses and that stored shape, whose
keys (``recipientIds``, ``senderId``, ``action_id`` ...) are kept stable so
records written by earlier deployments stay readable.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

from .datetime_utils import parse_datetime, serialize_datetime


class ActionStyle(StrEnum):
    """Button style for an inbox action; ``None`` means the default style."""

    PRIMARY = "primary"
    DANGER = "danger"


@dataclass(frozen=True, slots=True)
class InboxAction:
    """A button a recipient can click to resolve an entry."""

    label: str
    action_id: str
    style: ActionStyle | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label, "action_id": self.action_id}
        if self.style is not None:
            payload["style"] = self.style.value
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InboxAction:
        style = data.get("style")
        return cls(
            label=data["label"],
            action_id=data["action_id"],
            style=ActionStyle(style) if style else None,
        )


@dataclass(frozen=True, slots=True)
class MessageRef:
    """Pointer to the Slack message an entry is attached to."""

    channel: str
    ts: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"channel": self.channel, "ts": self.ts, "url": self.url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageRef:
        return cls(channel=data["channel"], ts=data["ts"], url=data.get("url", ""))


@dataclass(frozen=True, slots=True)
class InboxEntryResolution:
    """A single recipient's chosen action, written back to the sender's copy."""

    action: InboxAction
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.to_dict(),
            "timestamp": serialize_datetime(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InboxEntryResolution:
        timestamp = parse_datetime(data.get("timestamp"))
        if timestamp is None:
            raise ValueError("Resolution is missing its timestamp")
        return cls(action=InboxAction.from_dict(data["action"]), timestamp=timestamp)


@dataclass(slots=True)
class InboxEntry:
    """Fields shared by the sent and received views of an entry."""

    message: MessageRef
    description: str
    actions: tuple[InboxAction, ...]
    deadline: datetime | None = None
    # Ordered earliest to latest.
    reminders: tuple[datetime, ...] = ()

    def _base_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": self.message.to_dict(),
            "description": self.description,
            "actions": [action.to_dict() for action in self.actions],
            "reminders": [serialize_datetime(value) for value in self.reminders],
        }
        if self.deadline is not None:
            payload["deadline"] = serialize_datetime(self.deadline)
        return payload

    def to_dict(self) -> dict[str, Any]:
        return self._base_dict()

    @staticmethod
    def _base_fields(data: dict[str, Any]) -> dict[str, Any]:
        reminders = tuple(
            parsed
            for parsed in (parse_datetime(raw) for raw in data.get("reminders") or ())
            if parsed is not None
        )
        return {
            "message": MessageRef.from_dict(data["message"]),
            "description": data.get("description", ""),
            "actions": tuple(
                InboxAction.from_dict(action) for action in data.get("actions") or ()
            ),
            "deadline": parse_datetime(data.get("deadline")),
            "reminders": reminders,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InboxEntry:
        return cls(**cls._base_fields(data))


@dataclass(slots=True)
class SentInboxEntry(InboxEntry):
    """An entry as seen by its author, aggregating recipient resolutions."""

    recipient_ids: tuple[str, ...] = ()
    resolutions: dict[str, InboxEntryResolution] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload = self._base_dict()
        payload["recipientIds"] = list(self.recipient_ids)
        payload["resolutions"] = {
            user_id: resolution.to_dict()
            for user_id, resolution in self.resolutions.items()
        }
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SentInboxEntry:
        return cls(
            **cls._base_fields(data),
            recipient_ids=tuple(data.get("recipientIds") or ()),
            resolutions={
                user_id: InboxEntryResolution.from_dict(raw)
                for user_id, raw in (data.get("resolutions") or {}).items()
            },
        )

    @classmethod
    def from_entry(
        cls, entry: InboxEntry, recipient_ids: tuple[str, ...]
    ) -> SentInboxEntry:
        return cls(
            message=entry.message,
            description=entry.description,
            actions=entry.actions,
            deadline=entry.deadline,
            reminders=entry.reminders,
            recipient_ids=recipient_ids,
        )

    def pending_recipients(self) -> tuple[str, ...]:
        """Recipients that have not resolved the entry yet."""
        return tuple(
            user_id for user_id in self.recipient_ids if user_id not in self.resolutions
        )


@dataclass(slots=True)
class ReceivedInboxEntry(InboxEntry):
    """An entry as seen by one recipient."""

    sender_id: str = ""
    # One ts per notification sent to this recipient, used to address edits.
    reminder_message_ts: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = self._base_dict()
        payload["senderId"] = self.sender_id
        if self.reminder_message_ts is not None:
            payload["reminderMessageTs"] = list(self.reminder_message_ts)
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReceivedInboxEntry:
        message_ts = data.get("reminderMessageTs")
        return cls(
            **cls._base_fields(data),
            sender_id=data.get("senderId", ""),
            reminder_message_ts=tuple(message_ts) if message_ts is not None else None,
        )

    @classmethod
    def from_entry(
        cls,
        entry: InboxEntry,
        sender_id: str,
        reminder_message_ts: tuple[str, ...] | None = None,
    ) -> ReceivedInboxEntry:
        return cls(
            message=entry.message,
            description=entry.description,
            actions=entry.actions,
            deadline=entry.deadline,
            reminders=entry.reminders,
            sender_id=sender_id,
            reminder_message_ts=reminder_message_ts,
        )

    def with_reminder_sent(
        self, message_ts: str | None, remaining: tuple[datetime, ...]
    ) -> ReceivedInboxEntry:
        """Return a copy with consumed reminders and the new message ts appended."""
        sent = self.reminder_message_ts or ()
        if message_ts is not None:
            sent = (*sent, message_ts)
        return replace(
            self, reminders=remaining, reminder_message_ts=sent or self.reminder_message_ts
        )


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class CreateInboxEntryOptions:
    """Input for creating a new entry from a source message."""

    channel: str
    ts: str
    user_id: str
    description: str
    actions: tuple[InboxAction, ...]
    deadline: datetime | None = None
    notify_on_create: bool = False
    enable_reminders: bool = False


@dataclass(frozen=True, slots=True)
class MessageHandle:
    """Channel and timestamp of a delivered Slack message."""

    channel: str
    ts: str


@dataclass(frozen=True, slots=True)
class MemberPage:
    """One page of channel members; ``next_cursor`` is empty on the last page."""

    members: tuple[str, ...]
    next_cursor: str | None = None


@dataclass(slots=True)
class DispatchReport:
    """Outcome summary for a reminder dispatch run."""

    checked: int
    sent: int
    rate_limited: bool


__all__ = [
    "ActionStyle",
    "CreateInboxEntryOptions",
    "DispatchReport",
    "InboxAction",
    "InboxEntry",
    "InboxEntryResolution",
    "MemberPage",
    "MessageHandle",
    "MessageRef",
    "ReceivedInboxEntry",
    "SentInboxEntry",
]
