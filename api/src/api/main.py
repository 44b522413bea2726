"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from lunary.config import get_settings
from lunary.database import close_engine, get_session_factory
from pipeline.notifications.push_client import PushClient
from pipeline.notifications.tracker import NotificationTracker

from api.routers import cosmic, cron, health, notifications

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    tracker: NotificationTracker | None = None
    push_client: PushClient | None = None
    try:
        tracker = NotificationTracker(get_session_factory())
        if not await tracker.initialize():
            logger.warning("Notification ledger not ready at startup; dedup will retry lazily")
        push_client = PushClient.from_settings()
        app.state.notification_tracker = tracker
        app.state.push_client = push_client
        yield
    finally:
        if tracker is not None:
            tracker.reset()
        if push_client is not None:
            await push_client.close()
        app.state.notification_tracker = None
        app.state.push_client = None
        await close_engine()


def _warn_insecure_defaults() -> None:
    settings = get_settings()
    if not settings.cron_secret:
        logger.warning("CRON_SECRET is empty; cron and preview endpoints are unauthenticated")
    if not settings.notifications_api_token:
        logger.warning("NOTIFICATIONS_API_TOKEN is empty; push sends are unauthenticated")


def create_app() -> FastAPI:
    app = FastAPI(title="Lunary Notifications API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    _warn_insecure_defaults()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.site_url],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(health.router, tags=["health"])
    app.include_router(cron.router, prefix="/cron", tags=["cron"])
    app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
    app.include_router(cosmic.router, prefix="/v1", tags=["public"])
    return app


app = create_app()
