"""Protocol interfaces for decoupling components."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum, StrEnum
from typing import Any, Protocol

from .models import MemberPage, MessageHandle, ReceivedInboxEntry


class InboxError(RuntimeError):
    """Base class for errors raised by the inbox layer."""


class StoreError(InboxError):
    """Raised when the hash store backend fails to read or write."""


class DeliveryFailure(Enum):
    """Why a notification could not be delivered."""

    RATE_LIMITED = "rate_limited"
    OTHER = "other"


class NotificationError(InboxError):
    """Raised by a notification sender when a message was not delivered."""

    def __init__(
        self, message: str, *, kind: DeliveryFailure = DeliveryFailure.OTHER
    ) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def is_rate_limited(self) -> bool:
        """Return ``True`` when the platform throttled the delivery."""
        return self.kind is DeliveryFailure.RATE_LIMITED


class NotificationKind(StrEnum):
    """Which notification is being sent for an entry."""

    NEW = "new"
    REMINDER = "reminder"


class HashStore(Protocol):
    """Per-namespace mapping from a secondary key to a JSON-compatible value."""

    def hget(self, namespace: str, key: str) -> Any | None:
        """Return the value stored under ``key`` or ``None`` when absent."""
        raise NotImplementedError

    def hset(self, namespace: str, values: Mapping[str, Any]) -> None:
        """Store every key/value pair of ``values``, replacing previous values."""
        raise NotImplementedError

    def hmget(self, namespace: str, *keys: str) -> dict[str, Any]:
        """Return stored values for ``keys``; absent keys are omitted."""
        raise NotImplementedError

    def hkeys(self, namespace: str) -> list[str]:
        """Return every key stored in ``namespace``."""
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources."""
        raise NotImplementedError


class ChatPlatform(Protocol):
    """Read access to channel membership and message links."""

    def list_members(self, channel: str, cursor: str | None = None) -> MemberPage:
        """Return one page of members for ``channel``."""
        raise NotImplementedError

    def get_permalink(self, channel: str, message_ts: str) -> str:
        """Return a stable link to the message identified by ``message_ts``."""
        raise NotImplementedError


class NotificationSender(Protocol):
    """Renders and delivers one notification about an entry to a recipient."""

    def send(
        self,
        recipient_id: str,
        entry: ReceivedInboxEntry,
        kind: NotificationKind,
    ) -> MessageHandle:
        """Deliver the notification or raise :class:`NotificationError`."""
        raise NotImplementedError


class EphemeralSender(Protocol):
    """Posts a message only one user in a channel can see."""

    def post_ephemeral(self, channel: str, user: str, text: str) -> None:
        """Show ``text`` to ``user`` in ``channel``."""
        raise NotImplementedError


class FeatureFlags(Protocol):
    """Evaluates named feature flags."""

    def is_enabled(self, name: str) -> bool:
        """Return whether the feature ``name`` is enabled."""
        raise NotImplementedError


def iter_members(platform: ChatPlatform, channel: str) -> Iterable[str]:
    """Yield every member of ``channel`` by following pagination cursors."""
    cursor: str | None = None
    while True:
        page = platform.list_members(channel, cursor)
        yield from page.members
        cursor = page.next_cursor
        if not cursor:
            return


__all__ = [
    "ChatPlatform",
    "DeliveryFailure",
    "EphemeralSender",
    "FeatureFlags",
    "HashStore",
    "InboxError",
    "NotificationError",
    "NotificationKind",
    "NotificationSender",
    "StoreError",
    "iter_members",
]
