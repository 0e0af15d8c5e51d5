import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console

from cigrader.application.use_cases.fetch_build_logs import FetchBuildLogs
from cigrader.cli.formatters.result_formatter import format_build_logs
from cigrader.cli.theme import theme
from cigrader.cli.wiring import grading_store, result_client, settings_for
from cigrader.domain.errors import GradingError
from cigrader.domain.services.build_log_filter import BuildLogFilter

console = Console()


def filter_log(
    log_file: Path = typer.Argument(..., help="Raw build log, '-' for stdin"),
) -> None:
    """Print a build log with CI noise removed."""
    if str(log_file) == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = log_file.read_text("utf-8").splitlines()

    for line in BuildLogFilter().filter_lines(lines):
        typer.echo(line)


def fetch_logs(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    submission_id: int = typer.Argument(..., help="Submission the logs belong to"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
    state_dir: Path | None = typer.Option(None, "--state-dir", help="State directory"),
) -> None:
    """Show the filtered build log of a submission, fetching it if needed."""
    try:
        asyncio.run(_fetch_logs(plan_key, submission_id, config, state_dir))
    except GradingError as e:
        console.print(f"[{theme.ERROR_BOLD}]Could not load build logs:[/] {e}")
        raise typer.Exit(1) from e


async def _fetch_logs(
    plan_key: str,
    submission_id: int,
    config: Path | None,
    state_dir: Path | None,
) -> None:
    settings = settings_for(config, state_dir)
    use_case = FetchBuildLogs(
        grading_store(settings),
        result_client(settings),
        attempts=settings.log_fetch_attempts,
    )
    entries = await use_case.execute(plan_key, submission_id)

    if not entries:
        console.print(f"[{theme.DIM}]No build logs available[/]")
        return
    format_build_logs(console, entries)
