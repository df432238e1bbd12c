"""Publisher sending push notifications through Pushover."""

from __future__ import annotations

from ..exceptions import PublishError
from ..http import HttpClient
from ..util import parse_params, split_payload
from .base import HttpPublisher

PUSHOVER_MESSAGES_URL = "https://api.pushover.net/1/messages.json"


class PushoverPublisher(HttpPublisher):
    """Sends ``userToken`` or ``userToken|key=value&...`` notifications.

    Extra parameters are merged last, so they override ``user`` or
    ``message`` when the keys collide.
    """

    publisher_id = "Pushover"

    def __init__(self, http: HttpClient, token: str | None = None) -> None:
        super().__init__(http)
        self._token = token or None

    async def publish(self, request: str, message: str) -> None:
        if self._token is None:
            raise PublishError("Pushover application token is not configured.")
        user, extra = split_payload(request)
        self._require(user, "user token")
        body = {
            "token": self._token,
            "user": user,
            "message": message,
        }
        body.update(parse_params(extra))
        await self._post(PUSHOVER_MESSAGES_URL, body)
