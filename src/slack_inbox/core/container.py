"""Simple service container for dependency management."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from .config import AppSettings

T = TypeVar("T")


class ServiceContainer:
    """Minimal dependency container with lazy singleton semantics."""

    def __init__(self) -> None:
        """Initialise container storage."""
        self._factories: dict[str, Callable[[ServiceContainer], Any]] = {}
        self._instances: dict[str, Any] = {}

    def register(self, key: str, factory: Callable[[ServiceContainer], T]) -> None:
        """Register a factory under a given key."""
        self._factories[key] = factory
        self._instances.pop(key, None)

    def resolve(self, key: str) -> Any:
        """Resolve a dependency by key, invoking its factory once."""
        if key in self._instances:
            return self._instances[key]
        if key not in self._factories:
            msg = f"Service '{key}' is not registered"
            raise KeyError(msg)
        instance = self._factories[key](self)
        self._instances[key] = instance
        return instance

    def close(self) -> None:
        """Close resolved services that hold connections, then forget them."""
        for instance in self._instances.values():
            closer = getattr(instance, "close", None)
            if callable(closer):
                closer()
        self._instances.clear()


def build_container(settings: AppSettings) -> ServiceContainer:
    """Register the default store, Slack client and inbox services."""
    # Imported lazily so ``core`` stays free of adapter dependencies.
    # pylint: disable=import-outside-toplevel
    from ..inbox import (
        InboxHandlers,
        InboxService,
        ReminderDispatcher,
        SettingsFeatureFlags,
        SlackNotificationSender,
    )
    from ..inbox.reminders import offsets_from_hours
    from ..storage import create_store
    from ..transport import SlackClient

    container = ServiceContainer()
    container.register("settings", lambda _c: settings)
    container.register("store", lambda _c: create_store(settings.store))
    container.register("slack", lambda _c: SlackClient(settings.slack))
    container.register(
        "notifier", lambda c: SlackNotificationSender(c.resolve("slack"))
    )
    container.register(
        "inbox",
        lambda c: InboxService(
            c.resolve("store"),
            c.resolve("slack"),
            c.resolve("notifier"),
            reminder_offsets=offsets_from_hours(settings.reminders.offsets_hours),
        ),
    )
    container.register("dispatcher", lambda c: ReminderDispatcher(c.resolve("inbox")))
    container.register(
        "handlers",
        lambda c: InboxHandlers(
            c.resolve("inbox"),
            SettingsFeatureFlags(settings.features),
            c.resolve("slack"),
        ),
    )
    return container


__all__ = ["ServiceContainer", "build_container"]
