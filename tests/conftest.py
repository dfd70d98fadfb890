"""Shared fixtures for inbox tests."""

from __future__ import annotations

import pytest

from slack_inbox.inbox import InboxService

from .fakes import NOW, FakePlatform, RecordingNotifier, RecordingStore


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def platform() -> FakePlatform:
    return FakePlatform({"C1": [["U1", "U2"], ["U3"]]})


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def service(
    store: RecordingStore, platform: FakePlatform, notifier: RecordingNotifier
) -> InboxService:
    return InboxService(store, platform, notifier, clock=lambda: NOW)
