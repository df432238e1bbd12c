"""Thin JSON-over-HTTP capability shared by the API service and publishers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from .exceptions import NetworkError, ProviderError, ValidationError

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)
DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "pyappointmentmonitor",
}


class HttpClient:
    """Stateless wrapper around a shared aiohttp session.

    Holds no per-request state, so one instance is safe to use from many
    concurrent tasks. Only GET requests are retried.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        if session is None:
            raise ValidationError("Session is required.")
        self._session = session
        self._timeout = timeout or DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)

    async def get_json(self, url: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return await self._request("GET", url, expect_json=True, params=params)

    async def post_json(self, url: str, payload: Mapping[str, Any]) -> int:
        """POST a JSON body and return the response status."""
        return await self._request("POST", url, expect_json=False, json=dict(payload))

    async def _request(self, method: str, url: str, *, expect_json: bool, **kwargs: Any) -> Any:
        retries = self._retry_count if method.upper() == "GET" else 0
        attempts = retries + 1
        for attempt in range(attempts):
            try:
                async with self._session.request(
                    method,
                    url,
                    headers=DEFAULT_HEADERS,
                    timeout=self._timeout,
                    ssl=True,
                    **kwargs,
                ) as response:
                    if not expect_json:
                        return response.status
                    self._raise_for_status(response, url)
                    try:
                        return await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError) as exc:
                        body = await response.text()
                        _LOGGER.error("Request to %s returned invalid JSON: %s", url, body[:500])
                        raise ProviderError(f"Response from {url} did not contain valid JSON.") from exc
            except (aiohttp.ClientError, TimeoutError) as exc:
                if attempt >= attempts - 1:
                    _LOGGER.error("Request to %s failed due to %s", url, exc)
                    raise NetworkError(f"Request to {url} failed.") from exc
                _LOGGER.warning(
                    "Retrying %s %s after error %s (attempt %s/%s)",
                    method,
                    url,
                    exc,
                    attempt + 1,
                    attempts,
                )
        raise NetworkError(f"Request to {url} failed.")

    def _raise_for_status(self, response: aiohttp.ClientResponse, url: str) -> None:
        if 200 <= response.status < 300:
            return
        raise ProviderError(
            f"Request to {url} failed with status {response.status}.",
            error_code=f"http_{response.status}",
        )
