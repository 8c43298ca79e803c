"""HTTP transport wrapper.

Provides a clean interface for API requests with:
- Typed response objects
- JSON or form-urlencoded request bodies
- Transport failures mapped to TransportError
- Centralized logging
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from asanakit.errors import TimeoutError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    """Structured HTTP response.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        reason: HTTP reason phrase ("OK", "Unauthorized", etc.)
        body: Response body as string
        json: Parsed JSON body (None if not JSON)
        headers: Response headers as dict
        elapsed_ms: Request duration in milliseconds
        ok: True if status code is 2xx
    """

    status_code: int
    body: str
    json: dict[str, Any] | list[Any] | None
    headers: dict[str, str]
    reason: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """True if response has 2xx status code."""
        return 200 <= self.status_code < 300


def request(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: Mapping[str, str] | None = None,
    json_body: dict[str, Any] | list[Any] | None = None,
    form: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> HTTPResponse:
    """Make an HTTP request with consistent error handling.

    Args:
        client: httpx.Client instance
        method: HTTP method (GET, POST, PUT, DELETE)
        url: Target URL
        headers: Optional request headers
        params: Optional query parameters
        json_body: Optional JSON body, sent as application/json
        form: Optional flat key/value body, sent form-urlencoded with keys sorted
        timeout: Optional timeout override (uses client default if not set)

    Returns:
        HTTPResponse with status, body, and parsed JSON

    Raises:
        TransportError: If the request could not be completed
        TimeoutError: If request times out
    """
    if json_body is not None and form is not None:
        raise ValueError("json_body and form are mutually exclusive")

    method = method.upper()
    logger.debug(f"HTTP {method} {url}")

    kwargs: dict[str, Any] = {}
    if params:
        kwargs["params"] = dict(params)
    if json_body is not None:
        kwargs["json"] = json_body
    if form is not None:
        kwargs["data"] = dict(sorted(form.items()))

    try:
        response = client.request(
            method=method,
            url=url,
            headers=headers,
            timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            **kwargs,
        )
    except httpx.TimeoutException as e:
        raise TimeoutError(
            f"Request timed out: {method} {url}",
            timeout_seconds=timeout if timeout is not None else client.timeout.connect,
            url=url,
            method=method,
        ) from e
    except httpx.RequestError as e:
        raise TransportError(
            f"Request failed: {e}",
            url=url,
            method=method,
        ) from e

    # Parse JSON if content-type indicates JSON
    json_data = None
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        with contextlib.suppress(ValueError):
            json_data = response.json()

    elapsed_ms = round(response.elapsed.total_seconds() * 1000, 2)

    result = HTTPResponse(
        status_code=response.status_code,
        reason=response.reason_phrase,
        body=response.text,
        json=json_data,
        headers=dict(response.headers),
        elapsed_ms=elapsed_ms,
    )

    logger.debug(f"HTTP {method} {url} -> {result.status_code} in {elapsed_ms}ms")
    return result
