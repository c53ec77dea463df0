"""Exception hierarchy for the TeraSwitch adapter.

All adapter exceptions inherit from TeraSwitchError, so callers can catch
every failure the API client or a resource adapter produces with a single
except clause.
"""

from __future__ import annotations


class TeraSwitchError(Exception):
    """Base exception for all TeraSwitch adapter errors."""


class NotFoundError(TeraSwitchError):
    """Raised when the backend answers 404 for an entity."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"not found: {path}")


class TransportError(TeraSwitchError):
    """Raised when the request never produced an HTTP response."""


class RemoteError(TeraSwitchError):
    """Raised when the backend rejected a request.

    Covers both non-200 responses and 200 responses whose envelope reports
    ``success=false`` or carries no ``result``.
    """

    def __init__(self, status: int, message: str, context: str | None = None) -> None:
        self.status = status
        self.message = message
        self.context = context
        if context:
            text = f"{context}: message={message}"
        else:
            text = f"unexpected response status ({status}): {message}"
        super().__init__(text)


class UnsupportedError(TeraSwitchError):
    """Raised for operations deliberately not implemented for a resource type."""

    def __init__(self, resource_type: str, operation: str) -> None:
        self.resource_type = resource_type
        self.operation = operation
        super().__init__(
            f"support for {operation} on {resource_type} is not implemented"
        )


class InvalidIdentityError(TeraSwitchError):
    """Raised when an externally supplied identity is not a numeric ID."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"ID should be numeric, got {value!r}")


class ConfigurationError(TeraSwitchError):
    """Raised for invalid configuration or missing required settings."""
