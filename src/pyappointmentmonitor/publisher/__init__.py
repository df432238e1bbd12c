"""Notification sinks."""

from .base import BasePublisher, HttpPublisher
from .log import LogPublisher
from .pushover import PushoverPublisher
from .registry import build_publishers, dispatch, get_publisher, list_publishers, validate_selections
from .webhook import WebhookPublisher

__all__ = [
    "BasePublisher",
    "HttpPublisher",
    "LogPublisher",
    "PushoverPublisher",
    "WebhookPublisher",
    "build_publishers",
    "dispatch",
    "get_publisher",
    "list_publishers",
    "validate_selections",
]
