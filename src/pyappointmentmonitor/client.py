"""Client facade owning the shared HTTP session."""

from __future__ import annotations

import aiohttp

from .http import DEFAULT_TIMEOUT, HttpClient
from .publisher.base import BasePublisher
from .publisher.registry import build_publishers
from .service import TtpService


class Client:
    """Facade for the scheduler service and publishers."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        endpoint: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
        pushover_token: str | None = None,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._endpoint = endpoint
        self._timeout = timeout or DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)
        self._pushover_token = pushover_token
        self._http: HttpClient | None = None

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._http = None

    def get_service(self) -> TtpService:
        return TtpService(self._ensure_http(), endpoint=self._endpoint)

    def get_publishers(self) -> dict[str, BasePublisher]:
        return build_publishers(self._ensure_http(), pushover_token=self._pushover_token)

    def _ensure_http(self) -> HttpClient:
        if self._http is None:
            self._http = HttpClient(
                self._ensure_session(),
                timeout=self._timeout,
                retry_count=self._retry_count,
            )
        return self._http

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session
