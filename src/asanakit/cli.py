"""Command-line interface for the Asana API."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from asanakit.client import AsanaClient
from asanakit.config import Settings, build_client, load_settings
from asanakit.errors import AsanaError, ConfigError, RequestError
from asanakit.models import Filter, TaskUpdate

app = typer.Typer(
    name="asana",
    help="Query and update Asana from the command line.",
    no_args_is_help=True,
)

task_app = typer.Typer(
    name="task",
    help="Single-task commands.",
    no_args_is_help=True,
)
app.add_typer(task_app, name="task")

webhooks_app = typer.Typer(
    name="webhooks",
    help="Webhook commands.",
    no_args_is_help=True,
)
app.add_typer(webhooks_app, name="webhooks")

console = Console()

T = TypeVar("T")


@dataclass(frozen=True)
class CLIState:
    settings: Settings
    as_json: bool = False


@app.callback()
def main_callback(
    ctx: typer.Context,
    token: str | None = typer.Option(
        None,
        "--token",
        help="Personal access token (default: $ASANA_TOKEN)",
    ),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="API root URL (default: $ASANA_BASE_URL or the public API)",
    ),
    config_path: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML config file (default: $ASANA_CONFIG)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print raw JSON instead of tables",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Resolve settings shared by every command."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        settings = load_settings(config_path, token=token, base_url=base_url)
    except ConfigError as e:
        console.print(f"[red]Config Error:[/red] {e}")
        raise typer.Exit(code=1) from None

    ctx.obj = CLIState(settings=settings, as_json=as_json)


def _call(ctx: typer.Context, fn: Callable[[AsanaClient], T]) -> T:
    """Run fn against a fresh client, turning library errors into exit code 1."""
    state: CLIState = ctx.obj
    with build_client(state.settings) as client:
        try:
            return fn(client)
        except RequestError as e:
            console.print(f"[red]API Error ({e.code}):[/red] {e.message}")
            raise typer.Exit(code=1) from None
        except AsanaError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(code=1) from None


def _render(
    ctx: typer.Context,
    items: Sequence[BaseModel] | BaseModel,
    columns: Sequence[str],
    *,
    title: str,
) -> None:
    state: CLIState = ctx.obj
    if isinstance(items, BaseModel):
        items = [items]

    if state.as_json:
        console.print_json(json.dumps([item.model_dump(mode="json") for item in items]))
        return

    if not items:
        console.print(f"[yellow]No {title.lower()} found.[/yellow]")
        return

    table = Table(title=title)
    for i, column in enumerate(columns):
        table.add_column(column.replace("_", " ").title(), style="cyan" if i == 0 else None)

    for item in items:
        table.add_row(*(_cell(getattr(item, column)) for column in columns))

    console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, BaseModel):
        return str(getattr(value, "name", "") or getattr(value, "gid", ""))
    return str(value)


def _filter(
    workspace: int | None = None,
    project: int | None = None,
    assignee: str | None = None,
    archived: bool | None = None,
    fields: list[str] | None = None,
) -> Filter:
    return Filter(
        workspace=workspace,
        project=project,
        assignee=assignee,
        archived=archived,
        opt_fields=fields or [],
    )


@app.command("workspaces")
def workspaces_cmd(ctx: typer.Context) -> None:
    """List workspaces."""
    workspaces = _call(ctx, lambda c: c.list_workspaces())
    _render(ctx, workspaces, ["id", "name"], title="Workspaces")


@app.command("users")
def users_cmd(
    ctx: typer.Context,
    workspace: int | None = typer.Option(None, "--workspace", "-w", help="Workspace ID"),
) -> None:
    """List users."""
    users = _call(ctx, lambda c: c.list_users(_filter(workspace=workspace)))
    _render(ctx, users, ["id", "name", "email"], title="Users")


@app.command("me")
def me_cmd(ctx: typer.Context) -> None:
    """Show the user the token belongs to."""
    user = _call(ctx, lambda c: c.get_authenticated_user())
    _render(ctx, user, ["id", "name", "email"], title="User")


@app.command("projects")
def projects_cmd(
    ctx: typer.Context,
    workspace: int | None = typer.Option(None, "--workspace", "-w", help="Workspace ID"),
    archived: bool | None = typer.Option(
        None,
        "--archived/--active",
        help="Only archived or only active projects (default: both)",
    ),
) -> None:
    """List projects."""
    projects = _call(
        ctx, lambda c: c.list_projects(_filter(workspace=workspace, archived=archived))
    )
    _render(ctx, projects, ["id", "name", "team", "archived"], title="Projects")


@app.command("tasks")
def tasks_cmd(
    ctx: typer.Context,
    workspace: int | None = typer.Option(None, "--workspace", "-w", help="Workspace ID"),
    project: int | None = typer.Option(None, "--project", "-p", help="Project ID"),
    assignee: str | None = typer.Option(None, "--assignee", "-a", help="User ID or 'me'"),
    fields: list[str] | None = typer.Option(
        None, "--field", "-f", help="Extra field to request (repeatable)"
    ),
) -> None:
    """List tasks.

    Example:
        asana tasks --workspace 1 --assignee me
    """
    opts = _filter(workspace=workspace, assignee=assignee, fields=fields)
    if project is not None:
        tasks = _call(ctx, lambda c: c.list_project_tasks(project, opts))
    else:
        tasks = _call(ctx, lambda c: c.list_tasks(opts))
    _render(ctx, tasks, ["id", "name", "completed", "due_on"], title="Tasks")


@app.command("tags")
def tags_cmd(
    ctx: typer.Context,
    workspace: int | None = typer.Option(None, "--workspace", "-w", help="Workspace ID"),
) -> None:
    """List tags."""
    tags = _call(ctx, lambda c: c.list_tags(_filter(workspace=workspace)))
    _render(ctx, tags, ["id", "name"], title="Tags")


@task_app.command("get")
def task_get_cmd(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID"),
) -> None:
    """Show one task."""
    task = _call(ctx, lambda c: c.get_task(task_id))
    _render(ctx, task, ["id", "name", "notes", "completed", "assignee", "due_on"], title="Task")


@task_app.command("update")
def task_update_cmd(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID"),
    name: str | None = typer.Option(None, "--name", help="New task name"),
    notes: str | None = typer.Option(None, "--notes", help="New task notes"),
    completed: bool | None = typer.Option(
        None,
        "--completed/--incomplete",
        help="Mark the task completed or incomplete",
    ),
    assignee: str | None = typer.Option(None, "--assignee", help="User ID or 'me'"),
    due_on: str | None = typer.Option(None, "--due-on", help="Due date (YYYY-MM-DD)"),
) -> None:
    """Update fields on a task. Only the options given are sent."""
    update = TaskUpdate(
        name=name,
        notes=notes,
        completed=completed,
        assignee=assignee,
        due_on=due_on,
    )
    if not update.to_payload()["data"]:
        console.print("[yellow]Nothing to update.[/yellow]")
        raise typer.Exit(code=1)

    task = _call(ctx, lambda c: c.update_task(task_id, update))
    _render(ctx, task, ["id", "name", "notes", "completed", "due_on"], title="Task")


@task_app.command("create")
def task_create_cmd(
    ctx: typer.Context,
    fields: list[str] = typer.Option(
        ...,
        "--field",
        "-f",
        help="Task field as key=value (repeatable), e.g. -f workspace=1 -f name=Docs",
    ),
) -> None:
    """Create a task from key=value fields."""
    values: dict[str, str] = {}
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            console.print(f"[red]Error:[/red] Expected key=value, got {item!r}")
            raise typer.Exit(code=1)
        values[key] = value

    task = _call(ctx, lambda c: c.create_task(values))
    _render(ctx, task, ["id", "name", "notes"], title="Task")


@webhooks_app.command("list")
def webhooks_list_cmd(
    ctx: typer.Context,
    workspace: int | None = typer.Option(None, "--workspace", "-w", help="Workspace ID"),
) -> None:
    """List webhooks."""
    webhooks = _call(ctx, lambda c: c.get_webhooks(_filter(workspace=workspace)))
    _render(ctx, webhooks, ["id", "resource", "target", "active"], title="Webhooks")


@webhooks_app.command("get")
def webhooks_get_cmd(
    ctx: typer.Context,
    webhook_id: int = typer.Argument(..., help="Webhook ID"),
) -> None:
    """Show one webhook."""
    webhook = _call(ctx, lambda c: c.get_webhook(webhook_id))
    _render(ctx, webhook, ["id", "resource", "target", "active"], title="Webhook")


@webhooks_app.command("create")
def webhooks_create_cmd(
    ctx: typer.Context,
    resource_id: int = typer.Argument(..., help="ID of the resource to watch"),
    target: str = typer.Argument(..., help="URL that receives events"),
) -> None:
    """Register a webhook."""
    webhook = _call(ctx, lambda c: c.create_webhook(resource_id, target))
    _render(ctx, webhook, ["id", "resource", "target", "active"], title="Webhook")


@webhooks_app.command("delete")
def webhooks_delete_cmd(
    ctx: typer.Context,
    webhook_id: int = typer.Argument(..., help="Webhook ID"),
) -> None:
    """Delete a webhook."""
    _call(ctx, lambda c: c.delete_webhook(webhook_id))
    console.print(f"[green]✓ Deleted webhook {webhook_id}[/green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
