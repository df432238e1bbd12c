"""Publisher base class and shared behavior."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from ..exceptions import PublishError, ValidationError
from ..http import HttpClient
from ..models import PublisherInfo


class BasePublisher(ABC):
    """Base class for notification sinks."""

    publisher_id: ClassVar[str]
    requires_payload: ClassVar[bool] = False

    @property
    def name(self) -> str:
        return self.publisher_id

    @property
    def info(self) -> PublisherInfo:
        return PublisherInfo(id=self.publisher_id, requires_payload=self.requires_payload)

    @abstractmethod
    async def publish(self, request: str, message: str) -> None:
        """Deliver ``message`` using the sink-specific ``request`` payload."""


class HttpPublisher(BasePublisher):
    """Publisher that delivers messages as JSON POST requests."""

    requires_payload = True

    def __init__(self, http: HttpClient) -> None:
        if http is None:
            raise ValidationError("HTTP client is required.")
        self._http = http

    async def _post(self, url: str, body: Mapping[str, Any]) -> None:
        status = await self._http.post_json(url, body)
        if not 200 <= status < 300:
            raise PublishError(
                f"{self.publisher_id} failed to publish message with status {status}.",
                status=status,
            )

    def _require(self, value: str, field: str) -> str:
        if not value:
            raise ValidationError(f"{self.publisher_id} requires a {field}.")
        return value
