import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import typer
from rich.console import Console
from rich.table import Table

from cigrader.cli.formatters.result_formatter import format_build_status
from cigrader.cli.theme import theme
from cigrader.cli.wiring import admin_client, result_client, settings_for
from cigrader.domain.errors import GradingError
from cigrader.domain.ports.ci_admin_port import CIPermission

console = Console()

T = TypeVar("T")

ConfigOption = typer.Option(None, "--config", "-c", help="Config file")


def _run(action: Callable[[], Awaitable[T]], failure: str) -> T:
    try:
        return asyncio.run(action())
    except GradingError as e:
        console.print(f"[{theme.ERROR_BOLD}]{failure}:[/] {e}")
        raise typer.Exit(1) from e


def plan_status(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    config: Path | None = ConfigOption,
) -> None:
    """Show whether the plan is enabled and whether it is building."""

    async def status() -> None:
        settings = settings_for(config)
        build_status = await result_client(settings).fetch_build_status(plan_key)
        enabled = await admin_client(settings).is_plan_enabled(plan_key)
        format_build_status(console, plan_key, build_status)
        if not enabled:
            console.print(f"[{theme.WARNING}]Plan is disabled[/]")

    _run(status, "Could not query plan")


def trigger_build(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    config: Path | None = ConfigOption,
) -> None:
    """Queue a build of the plan."""
    _run(lambda: admin_client(settings_for(config)).trigger_build(plan_key), "Trigger failed")
    console.print(f"[{theme.SUCCESS}]Build of {plan_key} queued[/]")


def enable_plan(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    config: Path | None = ConfigOption,
) -> None:
    """Enable a disabled build plan."""
    _run(lambda: admin_client(settings_for(config)).enable_plan(plan_key), "Enable failed")
    console.print(f"[{theme.SUCCESS}]Plan {plan_key} enabled[/]")


def delete_plan(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config: Path | None = ConfigOption,
) -> None:
    """Delete a build plan."""
    if not yes:
        typer.confirm(f"Delete build plan {plan_key}?", abort=True)
    _run(lambda: admin_client(settings_for(config)).delete_plan(plan_key), "Delete failed")
    console.print(f"[{theme.SUCCESS}]Plan {plan_key} deleted[/]")


def delete_project(
    project_key: str = typer.Argument(..., help="CI project key"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config: Path | None = ConfigOption,
) -> None:
    """Delete a CI project and all its plans."""
    if not yes:
        typer.confirm(f"Delete CI project {project_key} with all plans?", abort=True)
    _run(lambda: admin_client(settings_for(config)).delete_project(project_key), "Delete failed")
    console.print(f"[{theme.SUCCESS}]Project {project_key} deleted[/]")


def grant_permissions(
    project_key: str = typer.Argument(..., help="CI project key"),
    groups: list[str] = typer.Option(..., "--group", "-g", help="User group (repeatable)"),
    permissions: list[CIPermission] = typer.Option(
        ..., "--permission", "-p", help="Permission to grant (repeatable)"
    ),
    config: Path | None = ConfigOption,
) -> None:
    """Grant project permissions to user groups."""
    _run(
        lambda: admin_client(settings_for(config)).give_project_permissions(
            project_key, groups, permissions
        ),
        "Granting permissions failed",
    )
    console.print(f"[{theme.SUCCESS}]Permissions on {project_key} updated[/]")


def lock_down_project(
    project_key: str = typer.Argument(..., help="CI project key"),
    config: Path | None = ConfigOption,
) -> None:
    """Remove the read access the CI server grants to everyone by default."""
    _run(
        lambda: admin_client(settings_for(config)).remove_default_project_permissions(project_key),
        "Removing default permissions failed",
    )
    console.print(f"[{theme.SUCCESS}]Default permissions removed from {project_key}[/]")


def check_project(
    project_key: str = typer.Argument(..., help="CI project key"),
    project_name: str = typer.Argument(..., help="CI project name"),
    config: Path | None = ConfigOption,
) -> None:
    """Check that a project key and name are still free on the CI server."""
    message = _run(
        lambda: admin_client(settings_for(config)).check_project_exists(project_key, project_name),
        "Check failed",
    )
    if message:
        console.print(f"[{theme.WARNING}]{message}[/]")
        raise typer.Exit(1)
    console.print(f"[{theme.SUCCESS}]{project_key} / {project_name} is available[/]")


def plan_exists(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    config: Path | None = ConfigOption,
) -> None:
    """Check that a build plan exists."""
    exists = _run(lambda: admin_client(settings_for(config)).plan_exists(plan_key), "Check failed")
    if not exists:
        console.print(f"[{theme.ERROR}]Plan {plan_key} not found[/]")
        raise typer.Exit(1)
    console.print(f"[{theme.SUCCESS}]Plan {plan_key} exists[/]")


def ci_health(config: Path | None = ConfigOption) -> None:
    """Show whether the CI server is up."""
    health = _run(lambda: admin_client(settings_for(config)).health(), "Health check failed")

    table = Table(title="CI server")
    table.add_column("Property", style=theme.INFO)
    table.add_column("Value")
    table.add_row("URL", health.url)
    table.add_row(
        "Status",
        f"[{theme.SUCCESS}]up[/]" if health.is_up else f"[{theme.ERROR}]down[/]",
    )
    if health.error:
        table.add_row("Error", health.error)
    console.print(table)

    if not health.is_up:
        raise typer.Exit(1)
