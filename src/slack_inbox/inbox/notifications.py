"""Direct-message notifications about inbox entries."""

from __future__ import annotations

import logging
from typing import Any

from ..core.interfaces import (
    DeliveryFailure,
    NotificationError,
    NotificationKind,
    NotificationSender,
)
from ..core.models import InboxAction, MessageHandle, ReceivedInboxEntry
from ..transport import SlackApiError, SlackClient

LOGGER = logging.getLogger(__name__)

_HEADLINES = {
    NotificationKind.NEW: "You have a new message in your inbox from <@{sender}>:",
    NotificationKind.REMINDER: "Reminder: <@{sender}> is waiting for your response:",
}


def action_value(entry: ReceivedInboxEntry) -> str:
    """Encode the identifiers a button click needs to find the entry again."""
    return f"{entry.sender_id}:{entry.message.ts}"


def parse_action_value(value: str) -> tuple[str, str]:
    """Inverse of :func:`action_value`, returning ``(sender_id, message_ts)``."""
    sender_id, _, message_ts = value.partition(":")
    if not sender_id or not message_ts:
        raise ValueError(f"Malformed action value: {value!r}")
    return sender_id, message_ts


def build_notification_blocks(
    entry: ReceivedInboxEntry, kind: NotificationKind
) -> list[dict[str, Any]]:
    """Render the Block Kit payload for one notification."""
    blocks: list[dict[str, Any]] = [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": _HEADLINES[kind].format(sender=entry.sender_id),
            },
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*{entry.description}*"},
        },
    ]
    context = [f"<{entry.message.url}|View original message>"]
    if entry.deadline is not None:
        unix = int(entry.deadline.timestamp())
        context.append(
            f"Due <!date^{unix}^{{date_short_pretty}} at {{time}}|{entry.deadline.isoformat()}>"
        )
    blocks.append(
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": text} for text in context],
        }
    )
    if entry.actions:
        blocks.append(
            {
                "type": "actions",
                "elements": [
                    _button(action, action_value(entry)) for action in entry.actions
                ],
            }
        )
    return blocks


def _button(action: InboxAction, value: str) -> dict[str, Any]:
    button: dict[str, Any] = {
        "type": "button",
        "text": {"type": "plain_text", "text": action.label, "emoji": True},
        "action_id": action.action_id,
        "value": value,
    }
    if action.style is not None:
        button["style"] = action.style.value
    return button


class SlackNotificationSender(NotificationSender):
    """Deliver notifications as Slack direct messages."""

    def __init__(self, client: SlackClient) -> None:
        self._client = client

    def send(
        self,
        recipient_id: str,
        entry: ReceivedInboxEntry,
        kind: NotificationKind,
    ) -> MessageHandle:
        """Post the notification to ``recipient_id``'s direct message channel."""
        headline = _HEADLINES[kind].format(sender=entry.sender_id)
        try:
            handle = self._client.post_message(
                recipient_id,
                text=f"{headline} {entry.description}",
                blocks=build_notification_blocks(entry, kind),
            )
        except SlackApiError as exc:
            failure = (
                DeliveryFailure.RATE_LIMITED
                if exc.is_rate_limited
                else DeliveryFailure.OTHER
            )
            raise NotificationError(str(exc), kind=failure) from exc
        LOGGER.debug(
            "Sent %s notification to %s (%s, %s)",
            kind.value,
            recipient_id,
            handle.channel,
            handle.ts,
        )
        return handle


__all__ = [
    "SlackNotificationSender",
    "action_value",
    "build_notification_blocks",
    "parse_action_value",
]
