"""Bearer token check for the scheduler-triggered endpoints."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from fastapi import HTTPException, Request, status


@dataclass(slots=True)
class CronAuthenticator:
    """Validate the ``Authorization: Bearer`` header sent by the cron trigger."""

    secret: str | None

    def validate(self, request: Request) -> None:
        """Raise 401 unless the request carries the configured secret.

        With no secret configured every request is accepted, which suits local
        development only.
        """
        if not self.secret:
            return
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing bearer token.",
            )
        if not secrets.compare_digest(token, self.secret):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid bearer token.",
            )


__all__ = ["CronAuthenticator"]
