"""Library exceptions."""

from __future__ import annotations

from collections.abc import Iterable


class PyAppointmentMonitorError(Exception):
    """Base exception for the library."""

    error_type = "unknown"
    default_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        detail: str | None = None,
        user_message: str | None = None,
    ) -> None:
        text = message if message is not None else detail
        super().__init__(text or "")
        self.error_code = error_code or self.default_code
        self.detail = detail if detail is not None else text
        self.user_message = user_message


class ConfigError(PyAppointmentMonitorError):
    """Raised when the run configuration is invalid."""

    error_type = "config"
    default_code = "config_error"


class LocationsNotFoundError(ConfigError):
    """Raised when requested location ids are unknown to the remote API."""

    default_code = "locations_not_found"

    def __init__(self, missing_ids: Iterable[int]) -> None:
        self.missing_ids = tuple(sorted(set(missing_ids)))
        super().__init__(
            f"Following location ids are not valid: {list(self.missing_ids)}",
            user_message="Check the location ids with the `locations` command.",
        )


class ValidationError(PyAppointmentMonitorError):
    """Raised when inputs fail validation."""

    error_type = "validation"
    default_code = "validation_error"


class FetchError(PyAppointmentMonitorError):
    """Raised when data could not be fetched from the scheduling API."""

    error_type = "fetch"
    default_code = "fetch_error"


class NetworkError(FetchError):
    """Raised when network communication fails."""

    error_type = "network"
    default_code = "network_error"


class ProviderError(FetchError):
    """Raised when the remote API returns an error or an unreadable response."""

    error_type = "provider"
    default_code = "provider_error"


class PublishError(PyAppointmentMonitorError):
    """Raised when a publisher fails to deliver a message."""

    error_type = "publish"
    default_code = "publish_error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int | None = None,
        **kwargs: str | None,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status = status
