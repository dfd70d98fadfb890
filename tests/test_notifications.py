"""Tests for Slack notification rendering and delivery."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from slack_inbox.core.interfaces import (
    DeliveryFailure,
    NotificationError,
    NotificationKind,
)
from slack_inbox.core.models import MessageHandle, MessageRef, ReceivedInboxEntry
from slack_inbox.inbox.actions import DECLINE, DONE
from slack_inbox.inbox.notifications import (
    SlackNotificationSender,
    build_notification_blocks,
    parse_action_value,
)
from slack_inbox.transport import SlackApiError


class StubSlackClient:
    """Slack client stub capturing posted messages."""

    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.posted: list[tuple[str, str, list]] = []

    def post_message(self, channel: str, text: str, blocks=None) -> MessageHandle:
        if self.error:
            raise SlackApiError("chat.postMessage", self.error)
        self.posted.append((channel, text, blocks))
        return MessageHandle(channel="D1", ts="1700000000.000300")


def _entry() -> ReceivedInboxEntry:
    return ReceivedInboxEntry(
        message=MessageRef(channel="C1", ts="1700000000.000100", url="https://x.test/p1"),
        description="Approve the budget",
        actions=(DONE, DECLINE),
        deadline=datetime(2025, 11, 10, 12, 0, tzinfo=timezone.utc),
        sender_id="U_SENDER",
    )


def test_blocks_include_buttons_with_entry_reference() -> None:
    blocks = build_notification_blocks(_entry(), NotificationKind.NEW)

    actions_block = blocks[-1]
    assert actions_block["type"] == "actions"
    buttons = actions_block["elements"]
    assert [button["action_id"] for button in buttons] == [
        DONE.action_id,
        DECLINE.action_id,
    ]
    assert buttons[1]["style"] == "danger"
    assert parse_action_value(buttons[0]["value"]) == ("U_SENDER", "1700000000.000100")
    assert "<@U_SENDER>" in blocks[0]["text"]["text"]
    context_texts = [element["text"] for element in blocks[2]["elements"]]
    assert any("https://x.test/p1" in text for text in context_texts)
    assert any(text.startswith("Due <!date^1762776000^") for text in context_texts)


def test_reminder_headline_differs_from_new() -> None:
    new = build_notification_blocks(_entry(), NotificationKind.NEW)
    reminder = build_notification_blocks(_entry(), NotificationKind.REMINDER)

    assert reminder[0]["text"]["text"].startswith("Reminder:")
    assert new[0] != reminder[0]


def test_sender_posts_direct_message() -> None:
    client = StubSlackClient()
    sender = SlackNotificationSender(client)  # type: ignore[arg-type]

    handle = sender.send("U1", _entry(), NotificationKind.NEW)

    assert handle.ts == "1700000000.000300"
    channel, text, blocks = client.posted[0]
    assert channel == "U1"
    assert "Approve the budget" in text
    assert blocks


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        ("rate_limited", DeliveryFailure.RATE_LIMITED),
        ("channel_not_found", DeliveryFailure.OTHER),
    ],
)
def test_slack_errors_map_to_delivery_failures(
    error: str, expected: DeliveryFailure
) -> None:
    sender = SlackNotificationSender(StubSlackClient(error))  # type: ignore[arg-type]

    with pytest.raises(NotificationError) as excinfo:
        sender.send("U1", _entry(), NotificationKind.REMINDER)

    assert excinfo.value.kind is expected


def test_parse_action_value_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_action_value("no-separator")
