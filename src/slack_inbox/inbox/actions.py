"""Built-in response actions recipients can choose from."""

from __future__ import annotations

from ..core.models import ActionStyle, InboxAction

DONE = InboxAction(
    label="✅ Done", action_id="message_action_done", style=ActionStyle.PRIMARY
)
DISMISS = InboxAction(label="🗑️ Dismiss", action_id="message_action_dismiss")
ACCEPT = InboxAction(
    label="✅ Accept", action_id="message_action_accept", style=ActionStyle.PRIMARY
)
DECLINE = InboxAction(
    label="❌ Decline", action_id="message_action_decline", style=ActionStyle.DANGER
)
THUMBS_UP = InboxAction(label="👍 Thumbs Up", action_id="message_action_thumbsup")

ALL_RESPONSE_ACTIONS: tuple[InboxAction, ...] = (
    DONE,
    DISMISS,
    ACCEPT,
    DECLINE,
    THUMBS_UP,
)
DEFAULT_RESPONSE_ACTIONS: tuple[InboxAction, ...] = (DONE, DISMISS)

_BY_ID = {action.action_id: action for action in ALL_RESPONSE_ACTIONS}


def find_action(action_id: str) -> InboxAction | None:
    """Return the built-in action with ``action_id`` if one exists."""
    return _BY_ID.get(action_id)


__all__ = [
    "ACCEPT",
    "ALL_RESPONSE_ACTIONS",
    "DECLINE",
    "DEFAULT_RESPONSE_ACTIONS",
    "DISMISS",
    "DONE",
    "THUMBS_UP",
    "find_action",
]
