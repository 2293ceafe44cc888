"""Exception hierarchy for the Sponsored Messaging SDK."""

from __future__ import annotations

from typing import Optional


class SponsoredMessagingError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(SponsoredMessagingError):
    """Raised when the client is constructed with missing or invalid settings."""


class ValidationError(SponsoredMessagingError):
    """Raised when a call is made with missing or invalid arguments."""


class ServiceError(SponsoredMessagingError):
    """The sponsorship service answered with a non-2xx status."""

    def __init__(
            self,
            message: str,
            *,
            status_code: int,
            response_snippet: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_snippet = response_snippet

    def __str__(self) -> str:
        return f"{self.message} (status={self.status_code})"


class TransportError(SponsoredMessagingError):
    """The request never produced a response (DNS, connection, timeout)."""

    def __init__(self, message: str, *, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class UnexpectedResponseError(SponsoredMessagingError):
    """A 2xx response whose body is not the JSON the SDK expects."""

    def __init__(
            self,
            message: str,
            *,
            status_code: Optional[int] = None,
            response_snippet: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_snippet = response_snippet


class RenderError(SponsoredMessagingError):
    """The host document is missing an element the display adapter needs."""
