"""Tests for the command-line interface."""

from __future__ import annotations

from datetime import timedelta

import pytest

from slack_inbox.cli import build_parser, execute
from slack_inbox.core import AppSettings, ServiceContainer
from slack_inbox.core.config import StoreSettings
from slack_inbox.core.models import (
    CreateInboxEntryOptions,
    InboxEntry,
    MessageRef,
    ReceivedInboxEntry,
)
from slack_inbox.inbox import DEFAULT_RESPONSE_ACTIONS, InboxService, ReminderDispatcher

from .fakes import NOW, FakePlatform, RecordingNotifier, RecordingStore


def _container(notifier: RecordingNotifier) -> ServiceContainer:
    container = ServiceContainer()
    container.register(
        "inbox",
        lambda _c: InboxService(
            RecordingStore(),
            FakePlatform({"C1": [["U1"]]}),
            notifier,
            clock=lambda: NOW,
        ),
    )
    container.register("dispatcher", lambda c: ReminderDispatcher(c.resolve("inbox")))
    return container


def _run(container: ServiceContainer, *argv: str) -> int:
    args = build_parser().parse_args(list(argv))
    return execute(args, AppSettings(store=StoreSettings(backend="memory")), container)


def _seed(container: ServiceContainer) -> None:
    container.resolve("inbox").create_entry(
        CreateInboxEntryOptions(
            channel="C1",
            ts="1700000000.000100",
            user_id="U_SENDER",
            description="Sign the contract",
            actions=DEFAULT_RESPONSE_ACTIONS,
            deadline=NOW + timedelta(minutes=30),
        )
    )


def test_info_is_default(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(_container(RecordingNotifier())) == 0
    output = capsys.readouterr().out
    assert "Store backend: memory" in output
    assert "Database path" not in output


def test_sent_and_received_tables(capsys: pytest.CaptureFixture[str]) -> None:
    container = _container(RecordingNotifier())
    _seed(container)

    assert _run(container, "sent", "U_SENDER") == 0
    sent_output = capsys.readouterr().out
    assert "Showing 1 sent entr(ies):" in sent_output
    assert "0/1" in sent_output
    assert "Sign the contract" in sent_output

    assert _run(container, "received", "U1") == 0
    received_output = capsys.readouterr().out
    assert "U_SENDER" in received_output

    assert _run(container, "received", "U2") == 0
    assert "No received entries found." in capsys.readouterr().out


def test_delete_reports_missing_entry(capsys: pytest.CaptureFixture[str]) -> None:
    container = _container(RecordingNotifier())
    _seed(container)

    assert _run(container, "delete", "U_SENDER", "1700000000.000100") == 0
    assert _run(container, "delete", "U_SENDER", "1700000000.000100") == 1
    assert "No entry" in capsys.readouterr().out


def test_remind_exit_code_signals_rate_limit(
    capsys: pytest.CaptureFixture[str],
) -> None:
    container = _container(RecordingNotifier(rate_limited={"U1"}))
    inbox: InboxService = container.resolve("inbox")
    entry = InboxEntry(
        message=MessageRef(channel="C1", ts="1.0", url="https://example.test/1"),
        description="Overdue",
        actions=DEFAULT_RESPONSE_ACTIONS,
        deadline=NOW + timedelta(minutes=30),
        reminders=(NOW - timedelta(minutes=30),),
    )
    inbox.save_received({"U1": [ReceivedInboxEntry.from_entry(entry, "U_SENDER")]})

    assert _run(container, "remind", "U1") == 2
    assert "rate-limited" in capsys.readouterr().out
    assert inbox.load_received("U1")[0].reminders == entry.reminders
