"""Asana REST API client.

Each operation is an independent round trip:
build the request, send it, decode the {"data": ...} envelope.

Example:
    with AsanaClient(token="...") as client:
        for workspace in client.list_workspaces():
            print(workspace.name)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx
import pydantic
from pydantic import TypeAdapter

from asanakit import __version__
from asanakit.clients.http import HTTPResponse, request
from asanakit.errors import RequestError, TransportError, ValidationError
from asanakit.models import (
    ErrorDetail,
    Filter,
    Project,
    Tag,
    Task,
    TaskUpdate,
    User,
    Webhook,
    Workspace,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.asana.com/api/1.0/"
USER_AGENT = f"asanakit/{__version__}"
DEFAULT_TIMEOUT = 30.0

_ERRORS_ADAPTER = TypeAdapter(list[ErrorDetail])


def decode_response(response: HTTPResponse, target: Any) -> Any:
    """Decode an API response into the target type.

    Args:
        response: Response returned by the transport.
        target: Type to validate the envelope payload into
            (a model, a list of models, or None to discard it).

    Returns:
        The decoded payload, or None when target is None.

    Raises:
        RequestError: If the response status is not 2xx.
        TransportError: If a 2xx body is not a valid data envelope.
    """
    if not response.ok:
        raise _request_error(response)

    payload = response.json if response.json is not None else _parse_body(response)
    if not isinstance(payload, dict) or "data" not in payload:
        raise TransportError("Response is missing the data envelope")

    if target is None:
        return None

    try:
        return TypeAdapter(target).validate_python(payload["data"])
    except pydantic.ValidationError as e:
        raise TransportError(f"Unexpected response payload: {e}") from e


def _parse_body(response: HTTPResponse) -> Any:
    if not response.body:
        return None
    try:
        return json.loads(response.body)
    except ValueError as e:
        raise TransportError(f"Response body is not valid JSON: {e}") from e


def _request_error(response: HTTPResponse) -> RequestError:
    """Build a RequestError from a non-2xx response.

    The error body is best effort: an empty or malformed body still
    produces a RequestError carrying the status code.
    """
    payload = response.json
    if payload is None and response.body:
        try:
            payload = json.loads(response.body)
        except ValueError:
            payload = None

    errors: list[ErrorDetail] = []
    if isinstance(payload, dict):
        try:
            errors = _ERRORS_ADAPTER.validate_python(payload.get("errors") or [])
        except pydantic.ValidationError:
            logger.debug(f"Ignoring malformed error envelope: {response.body[:200]}")

    message = "; ".join(str(e) for e in errors) or response.reason or f"HTTP {response.status_code}"
    return RequestError(message, code=response.status_code, errors=errors)


def _require_id(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer", field=field, value=value)
    return value


class AsanaClient:
    """Client for the Asana REST API.

    Attributes:
        base_url: Root URL that request paths are resolved against.
        user_agent: Value sent in the User-Agent header.
        http: Underlying httpx.Client.
    """

    def __init__(
        self,
        http: httpx.Client | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = USER_AGENT,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Create a client.

        Args:
            http: Transport to use. When omitted the client creates
                its own and closes it in close().
            base_url: API root URL.
            user_agent: Identifying User-Agent value.
            token: Personal access token, sent as a bearer header.
            timeout: Default timeout in seconds for an owned transport.
        """
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(timeout=timeout, follow_redirects=True)
        self.base_url = base_url
        self.user_agent = user_agent
        self._token = token

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> AsanaClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AsanaClient(base_url={self.base_url!r}, user_agent={self.user_agent!r})"

    # Workspaces

    def list_workspaces(self, *, timeout: float | None = None) -> list[Workspace]:
        """List the workspaces visible to the authenticated user."""
        return self._call("GET", "workspaces", list[Workspace], timeout=timeout)

    # Users

    def list_users(self, opts: Filter | None = None, *, timeout: float | None = None) -> list[User]:
        """List users, optionally narrowed by opts (e.g. workspace)."""
        return self._call("GET", "users", list[User], opts=opts, timeout=timeout)

    def get_authenticated_user(self, *, timeout: float | None = None) -> User:
        """Return the user the token belongs to."""
        return self._call("GET", "users/me", User, timeout=timeout)

    # Projects

    def list_projects(
        self, opts: Filter | None = None, *, timeout: float | None = None
    ) -> list[Project]:
        return self._call("GET", "projects", list[Project], opts=opts, timeout=timeout)

    def list_project_tasks(
        self,
        project_id: int,
        opts: Filter | None = None,
        *,
        timeout: float | None = None,
    ) -> list[Task]:
        _require_id(project_id, "project_id")
        return self._call(
            "GET", f"projects/{project_id}/tasks", list[Task], opts=opts, timeout=timeout
        )

    # Tasks

    def list_tasks(self, opts: Filter | None = None, *, timeout: float | None = None) -> list[Task]:
        """List tasks. The API requires an assignee+workspace or project filter."""
        return self._call("GET", "tasks", list[Task], opts=opts, timeout=timeout)

    def get_task(self, task_id: int, *, timeout: float | None = None) -> Task:
        _require_id(task_id, "task_id")
        return self._call("GET", f"tasks/{task_id}", Task, timeout=timeout)

    def update_task(
        self,
        task_id: int,
        update: TaskUpdate,
        opts: Filter | None = None,
        *,
        timeout: float | None = None,
    ) -> Task:
        """Update a task, sending only the fields set on update.

        Args:
            task_id: Task to update.
            update: Fields to change.
            opts: Optional query parameters (e.g. opt_fields).
            timeout: Optional per-call timeout in seconds.

        Returns:
            The updated task as returned by the API.
        """
        _require_id(task_id, "task_id")
        return self._call(
            "PUT",
            f"tasks/{task_id}",
            Task,
            opts=opts,
            json_body=update.to_payload(),
            timeout=timeout,
        )

    def create_task(
        self,
        fields: Mapping[str, str],
        opts: Filter | None = None,
        *,
        timeout: float | None = None,
    ) -> Task:
        """Create a task from flat form fields.

        Args:
            fields: Task attributes, e.g. {"workspace": "1", "name": "Write docs"}.
                Sent form-urlencoded with keys sorted.
            opts: Optional query parameters.
            timeout: Optional per-call timeout in seconds.

        Returns:
            The created task.
        """
        if not fields:
            raise ValidationError("fields must not be empty", field="fields")
        return self._call("POST", "tasks", Task, opts=opts, form=fields, timeout=timeout)

    # Tags

    def list_tags(self, opts: Filter | None = None, *, timeout: float | None = None) -> list[Tag]:
        return self._call("GET", "tags", list[Tag], opts=opts, timeout=timeout)

    # Webhooks

    def get_webhook(self, webhook_id: int, *, timeout: float | None = None) -> Webhook:
        _require_id(webhook_id, "webhook_id")
        return self._call("GET", f"webhooks/{webhook_id}", Webhook, timeout=timeout)

    def get_webhooks(
        self, opts: Filter | None = None, *, timeout: float | None = None
    ) -> list[Webhook]:
        return self._call("GET", "webhooks", list[Webhook], opts=opts, timeout=timeout)

    def create_webhook(
        self, resource_id: int, target: str, *, timeout: float | None = None
    ) -> Webhook:
        """Register a webhook that delivers events on resource_id to target."""
        _require_id(resource_id, "resource_id")
        if not target:
            raise ValidationError("target must not be empty", field="target")
        return self._call(
            "POST",
            "webhooks",
            Webhook,
            form={"resource": str(resource_id), "target": target},
            timeout=timeout,
        )

    def delete_webhook(self, webhook_id: int, *, timeout: float | None = None) -> None:
        _require_id(webhook_id, "webhook_id")
        self._call("DELETE", f"webhooks/{webhook_id}", None, timeout=timeout)

    # Plumbing

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _call(
        self,
        method: str,
        path: str,
        target: Any,
        *,
        opts: Filter | None = None,
        json_body: dict[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        response = request(
            self.http,
            method,
            self._url(path),
            headers=self._headers(),
            params=opts.to_params() if opts is not None else None,
            json_body=json_body,
            form=form,
            timeout=timeout,
        )
        return decode_response(response, target)
