"""Typed exceptions for asanakit.

All library errors inherit from AsanaError.
Two kinds come back from an API call:
- TransportError: the request never produced a usable response
- RequestError: the API answered with a non-2xx status
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from asanakit.models import ErrorDetail


class AsanaError(Exception):
    """Base exception for all asanakit errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class TransportError(AsanaError):
    """Network failure or an unreadable response payload."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        method: str | None = None,
    ):
        context = {"url": url, "method": method}
        super().__init__(message, context={k: v for k, v in context.items() if v is not None})
        self.url = url
        self.method = method


class TimeoutError(TransportError):
    """Request timed out."""

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: float | None = None,
        url: str | None = None,
        method: str | None = None,
    ):
        super().__init__(message, url=url, method=method)
        if timeout_seconds:
            self.context["timeout_seconds"] = timeout_seconds
        self.timeout_seconds = timeout_seconds


class RequestError(AsanaError):
    """The API responded with a non-2xx status.

    Attributes:
        code: HTTP status code of the response.
        message: Joined error messages from the error envelope,
            or the HTTP reason phrase when the body carried none.
        errors: Decoded entries of the error envelope.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int,
        errors: list[ErrorDetail] | None = None,
    ):
        super().__init__(message, context={"code": code})
        self.code = code
        self.errors = errors or []


class ValidationError(AsanaError):
    """Caller input rejected before any request was sent."""

    def __init__(self, message: str, *, field: str | None = None, value: Any = None):
        context: dict[str, Any] = {}
        if field:
            context["field"] = field
        if value is not None:
            # Truncate long values for readability
            str_val = str(value)
            context["value"] = str_val[:100] + "..." if len(str_val) > 100 else str_val
        super().__init__(message, context=context)
        self.field = field
        self.value = value


class ConfigError(AsanaError):
    """Configuration could not be loaded or is invalid."""

    def __init__(self, message: str, *, path: str | None = None):
        context: dict[str, Any] = {}
        if path:
            context["path"] = path
        super().__init__(message, context=context)
        self.path = path
