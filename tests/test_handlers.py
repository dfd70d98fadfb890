"""Tests for the event handler entry points."""

from __future__ import annotations

from slack_inbox.core.config import FeatureSettings
from slack_inbox.core.models import CreateInboxEntryOptions
from slack_inbox.inbox import (
    DEFAULT_RESPONSE_ACTIONS,
    InboxHandlers,
    InboxService,
    SettingsFeatureFlags,
)
from slack_inbox.inbox.actions import ACCEPT, DONE
from slack_inbox.inbox.handlers import DISABLED_NOTICE


class RecordingEphemeral:
    def __init__(self) -> None:
        self.notices: list[tuple[str, str, str]] = []

    def post_ephemeral(self, channel: str, user: str, text: str) -> None:
        self.notices.append((channel, user, text))


def _options() -> CreateInboxEntryOptions:
    return CreateInboxEntryOptions(
        channel="C1",
        ts="1.0",
        user_id="U_SENDER",
        description="Fill in the survey",
        actions=DEFAULT_RESPONSE_ACTIONS,
    )


def test_disabled_feature_posts_notice_instead_of_creating(
    service: InboxService,
) -> None:
    ephemeral = RecordingEphemeral()
    flags = SettingsFeatureFlags(FeatureSettings(inbox_enabled=False))
    handlers = InboxHandlers(service, flags, ephemeral)

    assert handlers.create(_options()) is None

    assert ephemeral.notices == [("C1", "U_SENDER", DISABLED_NOTICE)]
    assert service.load_sent("U_SENDER") == []


def test_resolve_records_action_and_clears_recipient_copy(
    service: InboxService,
) -> None:
    handlers = InboxHandlers(
        service, SettingsFeatureFlags(FeatureSettings()), RecordingEphemeral()
    )
    handlers.create(_options())

    updated = handlers.resolve("U2", "U_SENDER", "1.0", DONE.action_id)

    assert updated is not None
    assert updated.resolutions["U2"].action == DONE
    assert service.load_received("U2") == []
    assert len(service.load_received("U1")) == 1


def test_resolve_ignores_clicks_the_entry_does_not_accept(
    service: InboxService,
) -> None:
    handlers = InboxHandlers(
        service, SettingsFeatureFlags(FeatureSettings()), RecordingEphemeral()
    )
    handlers.create(_options())

    assert handlers.resolve("U_STRANGER", "U_SENDER", "1.0", DONE.action_id) is None
    assert handlers.resolve("U1", "U_SENDER", "1.0", ACCEPT.action_id) is None
    assert handlers.resolve("U1", "U_SENDER", "1.0", "message_action_bogus") is None

    (stored,) = service.load_sent("U_SENDER")
    assert stored.resolutions == {}
    assert len(service.load_received("U1")) == 1


def test_delete_delegates_to_service(service: InboxService) -> None:
    handlers = InboxHandlers(
        service, SettingsFeatureFlags(FeatureSettings()), RecordingEphemeral()
    )
    handlers.create(_options())

    assert handlers.delete("U_SENDER", "1.0") is True
    assert handlers.delete("U_SENDER", "1.0") is False


def test_unknown_feature_flags_are_off() -> None:
    assert not SettingsFeatureFlags(FeatureSettings()).is_enabled("wishlist")
