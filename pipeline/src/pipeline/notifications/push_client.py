"""Client for the push delivery service (``POST /notifications/send``)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from lunary.config import Settings, get_settings
from lunary.schemas.notifications import NotificationPayload

logger = logging.getLogger(__name__)


class NotificationSendError(RuntimeError):
    """Raised when the delivery service rejects or fails a broadcast."""


@dataclass(frozen=True)
class SendResult:
    success: bool
    recipient_count: int
    successful: int
    failed: int


class PushClient:
    """Broadcasts one notification payload to every subscriber."""

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> PushClient:
        settings = settings or get_settings()
        return cls(
            settings.notifications_api_url,
            token=settings.notifications_api_token,
            timeout=settings.notifications_timeout_seconds,
        )

    @staticmethod
    def _raise_for_status_with_context(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = response.text.strip()
            if len(detail) > 400:
                detail = detail[:400]
            raise NotificationSendError(
                f"Push send failed ({response.status_code}) at {response.request.url}: {detail}"
            ) from exc

    async def send(self, payload: NotificationPayload) -> SendResult:
        try:
            response = await self._client.post(
                "/notifications/send",
                json={"payload": payload.model_dump(mode="json")},
            )
        except httpx.HTTPError as exc:
            raise NotificationSendError(f"Push send request failed: {exc}") from exc
        self._raise_for_status_with_context(response)

        try:
            body = response.json()
            result = SendResult(
                success=bool(body.get("success", False)),
                recipient_count=int(body.get("recipientCount", 0)),
                successful=int(body.get("successful", 0)),
                failed=int(body.get("failed", 0)),
            )
        except (ValueError, TypeError, AttributeError) as exc:
            raise NotificationSendError(f"Malformed push send response: {exc}") from exc

        logger.info(
            "Push '%s' delivered: %d successful, %d failed of %d",
            payload.title,
            result.successful,
            result.failed,
            result.recipient_count,
        )
        return result

    async def close(self) -> None:
        await self._client.aclose()
