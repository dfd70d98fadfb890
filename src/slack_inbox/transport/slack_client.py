"""Slack Web API client covering the calls the inbox needs."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Any

import httpx

from ..core.config import SlackSettings
from ..core.interfaces import ChatPlatform, EphemeralSender, InboxError
from ..core.models import MemberPage, MessageHandle

LOGGER = logging.getLogger(__name__)

RATE_LIMITED = "rate_limited"


class SlackApiError(InboxError):
    """Raised when Slack rejects a call or cannot be reached.

    ``error`` carries Slack's error code (``channel_not_found``,
    ``rate_limited`` ...) or ``http_error`` for transport failures.
    """

    def __init__(
        self, method: str, error: str, *, retry_after: float | None = None
    ) -> None:
        super().__init__(f"Slack API call {method} failed: {error}")
        self.method = method
        self.error = error
        self.retry_after = retry_after

    @property
    def is_rate_limited(self) -> bool:
        """Return ``True`` when Slack throttled the request."""
        return self.error == RATE_LIMITED


class SlackClient(ChatPlatform, EphemeralSender):
    """Thin synchronous client for the Slack Web API.

    Example:
        >>> with SlackClient(SlackSettings(bot_token="xoxb-...")) as client:
        ...     client.get_permalink("C123", "1700000000.000100")
    """

    def __init__(
        self, settings: SlackSettings, http_client: httpx.Client | None = None
    ) -> None:
        """Initialize the client; an ``http_client`` may be injected for tests."""
        self._settings = settings
        headers = {}
        if settings.bot_token:
            headers["Authorization"] = f"Bearer {settings.bot_token}"
        self._http = http_client or httpx.Client(
            base_url=_normalize_base_url(settings.base_url),
            headers=headers,
            timeout=settings.timeout_seconds,
        )

    def __enter__(self) -> SlackClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    # ChatPlatform -------------------------------------------------------------
    def list_members(self, channel: str, cursor: str | None = None) -> MemberPage:
        """Return one page of ``conversations.members``."""
        params: dict[str, Any] = {"channel": channel}
        if cursor:
            params["cursor"] = cursor
        data = self._call("conversations.members", params=params)
        metadata = data.get("response_metadata") or {}
        return MemberPage(
            members=tuple(data.get("members") or ()),
            next_cursor=metadata.get("next_cursor") or None,
        )

    def get_permalink(self, channel: str, message_ts: str) -> str:
        """Return the permalink for a message via ``chat.getPermalink``."""
        data = self._call(
            "chat.getPermalink", params={"channel": channel, "message_ts": message_ts}
        )
        permalink = data.get("permalink")
        if not isinstance(permalink, str):
            raise SlackApiError("chat.getPermalink", "missing_permalink")
        return permalink

    # Messaging ----------------------------------------------------------------
    def post_message(
        self,
        channel: str,
        text: str,
        blocks: Sequence[dict[str, Any]] | None = None,
    ) -> MessageHandle:
        """Post a message; a user id as ``channel`` delivers a direct message."""
        payload: dict[str, Any] = {"channel": channel, "text": text}
        if blocks:
            payload["blocks"] = list(blocks)
        data = self._call("chat.postMessage", json=payload)
        return MessageHandle(channel=data["channel"], ts=data["ts"])

    def post_ephemeral(self, channel: str, user: str, text: str) -> None:
        """Show ``text`` to a single ``user`` in ``channel``."""
        self._call(
            "chat.postEphemeral", json={"channel": channel, "user": user, "text": text}
        )

    # Internals ----------------------------------------------------------------
    def _call(
        self,
        method: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        LOGGER.debug("Calling Slack method %s", method)
        try:
            if json is not None:
                response = self._http.post(method, json=json)
            else:
                response = self._http.get(method, params=params)
        except httpx.HTTPError as exc:
            LOGGER.error("Network error calling Slack method %s: %s", method, exc)
            raise SlackApiError(method, "http_error") from exc

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            raise SlackApiError(method, RATE_LIMITED, retry_after=retry_after)
        try:
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise SlackApiError(method, f"http_{response.status_code}") from exc
        except ValueError as exc:
            raise SlackApiError(method, "invalid_json") from exc

        if not data.get("ok", False):
            error = str(data.get("error") or "unknown_error")
            LOGGER.warning("Slack method %s returned error %s", method, error)
            raise SlackApiError(method, error)
        return data


def _normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/"


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


__all__ = ["SlackApiError", "SlackClient", "RATE_LIMITED"]
