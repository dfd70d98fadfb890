"""FastAPI application exposing inbox reads, deletion and reminder dispatch."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from slack_inbox.core import (
    AppSettings,
    ServiceContainer,
    build_container,
    load_app_settings,
)
from slack_inbox.core.interfaces import InboxError
from slack_inbox.inbox import InboxService, ReminderDispatcher
from .security import CronAuthenticator

LOGGER = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = settings or load_app_settings()
    services = container or build_container(app_settings)
    cron_auth = CronAuthenticator(app_settings.web.cron_secret)
    app = FastAPI(title="Slack Inbox")

    def get_inbox() -> InboxService:
        return services.resolve("inbox")

    def get_dispatcher() -> ReminderDispatcher:
        return services.resolve("dispatcher")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """Release store and Slack connections."""
        services.close()
        LOGGER.info("Services closed")

    @app.exception_handler(InboxError)
    async def inbox_error_handler(_request: Request, exc: InboxError) -> JSONResponse:
        LOGGER.error("Inbox request failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/inbox/{user_id}/sent")
    def list_sent(
        user_id: str,
        inbox: InboxService = Depends(get_inbox),  # noqa: B008
    ) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in inbox.load_sent(user_id)]

    @app.get("/inbox/{user_id}/received")
    def list_received(
        user_id: str,
        inbox: InboxService = Depends(get_inbox),  # noqa: B008
    ) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in inbox.load_received(user_id)]

    @app.delete("/inbox/{user_id}/sent/{message_ts}")
    def delete_sent(
        user_id: str,
        message_ts: str,
        inbox: InboxService = Depends(get_inbox),  # noqa: B008
    ) -> dict[str, bool]:
        return {"deleted": inbox.delete_entry(user_id, message_ts)}

    @app.post("/cron/reminders")
    def run_reminders(
        request: Request,
        dispatcher: ReminderDispatcher = Depends(get_dispatcher),  # noqa: B008
    ) -> dict[str, Any]:
        cron_auth.validate(request)
        report = dispatcher.run()
        return {
            "checked": report.checked,
            "sent": report.sent,
            "rate_limited": report.rate_limited,
        }

    return app


__all__ = ["create_app"]
