"""Publisher posting messages to chat webhooks (Slack, Chime and alike)."""

from __future__ import annotations

from ..exceptions import ValidationError
from ..util import split_payload
from .base import HttpPublisher

DEFAULT_MESSAGE_FIELD = "Content"


class WebhookPublisher(HttpPublisher):
    """Posts ``{field: message}`` to the url given as ``url`` or ``url|field``."""

    publisher_id = "Webhook"

    async def publish(self, request: str, message: str) -> None:
        url, field = split_payload(request)
        self._require(url, "webhook url")
        if not url.lower().startswith("https://"):
            raise ValidationError("Webhook url must use https.")
        key = (field or "").strip() or DEFAULT_MESSAGE_FIELD
        await self._post(url, {key: message})
