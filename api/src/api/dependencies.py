"""FastAPI dependency injection."""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Request, status
from lunary.config import get_settings
from pipeline.notifications.push_client import PushClient
from pipeline.notifications.tracker import NotificationTracker


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth[7:].strip()
        return token or None
    return None


def require_cron_secret(request: Request) -> None:
    """Reject the request unless it carries ``Bearer <CRON_SECRET>``.

    Open when no secret is configured, as in local development.
    """
    secret = get_settings().cron_secret.strip()
    if not secret:
        return
    token = _extract_bearer_token(request) or ""
    if not secrets.compare_digest(token.encode(), secret.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_tracker(request: Request) -> NotificationTracker:
    tracker = getattr(request.app.state, "notification_tracker", None)
    if tracker is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification tracker not initialized",
        )
    return tracker


def get_push_client(request: Request) -> PushClient:
    client = getattr(request.app.state, "push_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push client not initialized",
        )
    return client
