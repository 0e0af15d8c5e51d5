import asyncio
from datetime import UTC, datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from cigrader.application.services.participation_resolver import role_from_plan_key
from cigrader.cli.formatters.result_formatter import format_results
from cigrader.cli.theme import theme
from cigrader.cli.wiring import grading_store, settings_for
from cigrader.domain.entities import Participation, PendingSubmission
from cigrader.domain.errors import GradingError
from cigrader.domain.value_objects import SubmissionType
from cigrader.infrastructure.persistence.json_grading_store import JsonGradingStore

console = Console()

ConfigOption = typer.Option(None, "--config", "-c", help="Config file")
StateDirOption = typer.Option(None, "--state-dir", help="State directory")


def add_participation(
    participation_id: int = typer.Argument(..., help="Participation ID"),
    plan_key: str = typer.Argument(..., help="Build plan key"),
    exercise_id: int = typer.Option(..., "--exercise", "-e", help="Exercise ID"),
    due_date: datetime | None = typer.Option(None, "--due", help="Due date (ISO 8601)"),
    static_analysis: bool = typer.Option(
        False, "--static-analysis", help="Report static analysis findings"
    ),
    config: Path | None = ConfigOption,
    state_dir: Path | None = StateDirOption,
) -> None:
    """Bind a participation to a build plan. The role follows from the plan key."""
    participation = Participation(
        id=participation_id,
        role=role_from_plan_key(plan_key),
        plan_key=plan_key.upper(),
        exercise_id=exercise_id,
        due_date=_aware(due_date),
        static_analysis_enabled=static_analysis,
        initialized_at=datetime.now(UTC),
    )
    store = _store(config, state_dir)
    asyncio.run(store.save_participation(participation))
    console.print(
        f"[{theme.SUCCESS}]Participation {participation.id}[/] "
        f"({participation.role.value}) bound to {participation.plan_key}"
    )


def list_participations(
    config: Path | None = ConfigOption,
    state_dir: Path | None = StateDirOption,
) -> None:
    """List all participations."""
    store = _store(config, state_dir)
    participations = asyncio.run(store.list_participations())

    if not participations:
        console.print(f"[{theme.DIM}]No participations found[/]")
        return

    table = Table(title="Participations")
    table.add_column("ID", style=theme.INFO)
    table.add_column("Role")
    table.add_column("Plan")
    table.add_column("Exercise", style=theme.DIM)
    table.add_column("Due", style=theme.DIM)

    for p in participations:
        table.add_row(
            str(p.id),
            p.role.value,
            p.plan_key,
            str(p.exercise_id),
            p.due_date.strftime("%Y-%m-%d %H:%M") if p.due_date else "-",
        )

    console.print(table)


def record_submission(
    participation_id: int = typer.Argument(..., help="Participation ID"),
    commit_hash: str = typer.Argument(..., help="Commit hash of the push"),
    submission_type: SubmissionType = typer.Option(
        SubmissionType.MANUAL, "--type", help="Submission type"
    ),
    config: Path | None = ConfigOption,
    state_dir: Path | None = StateDirOption,
) -> None:
    """Record a pending submission for a push, before its build finishes."""
    store = _store(config, state_dir)

    async def record() -> PendingSubmission:
        if await store.get_participation(participation_id) is None:
            console.print(f"[{theme.ERROR_BOLD}]Participation not found:[/] {participation_id}")
            raise typer.Exit(1)
        return await store.save_submission(
            PendingSubmission(
                participation_id=participation_id,
                commit_hash=commit_hash,
                submission_type=submission_type,
                submission_date=datetime.now(UTC),
            )
        )

    submission = asyncio.run(record())
    console.print(f"[{theme.SUCCESS}]Submission {submission.id}[/] pending for {commit_hash}")


def show_results(
    participation_id: int = typer.Argument(..., help="Participation ID"),
    config: Path | None = ConfigOption,
    state_dir: Path | None = StateDirOption,
) -> None:
    """List the results of a participation."""
    store = _store(config, state_dir)
    results = asyncio.run(store.list_results(participation_id))

    if not results:
        console.print(f"[{theme.DIM}]No results for participation {participation_id}[/]")
        return
    format_results(console, results)


def _store(config: Path | None, state_dir: Path | None) -> JsonGradingStore:
    try:
        return grading_store(settings_for(config, state_dir))
    except GradingError as e:
        console.print(f"[{theme.ERROR_BOLD}]Invalid configuration:[/] {e}")
        raise typer.Exit(1) from e


def _aware(moment: datetime | None) -> datetime | None:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment
