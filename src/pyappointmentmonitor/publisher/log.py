"""Publisher writing messages to the operational log."""

from __future__ import annotations

import logging

from .base import BasePublisher

_LOGGER = logging.getLogger(__name__)


class LogPublisher(BasePublisher):
    publisher_id = "Log"

    async def publish(self, request: str, message: str) -> None:
        _LOGGER.info(message)
