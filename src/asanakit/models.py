"""Typed records for Asana API resources.

Entities are immutable snapshots of remote state at fetch time. They mirror
the JSON shapes of the API: unknown fields are ignored and missing fields
fall back to zero-like defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """Base for every decoded API record."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Workspace(Entity):
    id: int = 0
    gid: str = ""
    name: str = ""
    is_organization: bool = False


class User(Entity):
    id: int = 0
    gid: str = ""
    name: str = ""
    email: str = ""


class Team(Entity):
    gid: str = ""
    name: str = ""


class Project(Entity):
    id: int = 0
    gid: str = ""
    name: str = ""
    notes: str = ""
    archived: bool = False
    team: Team | None = None


class Task(Entity):
    id: int = 0
    gid: str = ""
    name: str = ""
    notes: str = ""
    completed: bool = False
    assignee: User | None = None
    due_on: str | None = None


class Tag(Entity):
    id: int = 0
    gid: str = ""
    name: str = ""


class Resource(Entity):
    """The object a webhook is attached to (usually a project)."""

    id: int = 0
    gid: str = ""
    name: str = ""


class Webhook(Entity):
    id: int = 0
    gid: str = ""
    resource: Resource = Field(default_factory=Resource)
    target: str = ""
    active: bool = False


class ErrorDetail(Entity):
    """One entry of the error envelope returned on non-2xx responses."""

    message: str = ""
    phrase: str = ""

    def __str__(self) -> str:
        return f"{self.message} - {self.phrase}"


class TaskUpdate(BaseModel):
    """Fields to change on a task.

    Only fields that are set (not None) are sent, so
    TaskUpdate(notes="x") produces {"data": {"notes": "x"}}.
    """

    name: str | None = None
    notes: str | None = None
    completed: bool | None = None
    assignee: int | str | None = None
    due_on: str | None = None
    hearted: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the set fields wrapped in the data envelope."""
        return {"data": self.model_dump(exclude_none=True)}


class Filter(BaseModel):
    """Query parameters accepted by the list endpoints.

    Values are passed through to the API untouched. limit and offset are
    forwarded verbatim; following pagination cursors is left to the caller.
    """

    archived: bool | None = None
    assignee: int | str | None = None
    project: int | None = None
    workspace: int | None = None
    opt_fields: list[str] = Field(default_factory=list)
    opt_expand: list[str] = Field(default_factory=list)
    limit: int | None = None
    offset: str | None = None

    def to_params(self) -> dict[str, str]:
        """Encode as query parameters, omitting unset values."""
        params: dict[str, str] = {}
        for key, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, list):
                if value:
                    params[key] = ",".join(value)
            elif isinstance(value, bool):
                params[key] = "true" if value else "false"
            else:
                params[key] = str(value)
        return params
