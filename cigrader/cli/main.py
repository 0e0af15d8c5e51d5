import sys
from pathlib import Path

import typer
from loguru import logger

from cigrader.cli.commands import artifact, ingest, logs, participation, plan


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure loguru logging."""
    logger.remove()

    file_path = log_file or Path("cigrader.log")
    logger.add(
        file_path,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="10 MB",
        encoding="utf-8",
    )

    if verbose:
        logger.add(
            sys.stderr,
            format="{time:HH:mm:ss} | {level: <8} | {message}",
            level="DEBUG",
        )


app = typer.Typer(
    name="cigrader",
    help="cigrader - grade CI build results for programming exercises",
    no_args_is_help=True,
)

app.command(name="ingest")(ingest.ingest_notification)
app.command(name="artifact")(artifact.download_artifact)

# Build log subcommand group
logs_app = typer.Typer(help="Build log commands")
logs_app.command(name="filter")(logs.filter_log)
logs_app.command(name="fetch")(logs.fetch_logs)
app.add_typer(logs_app, name="logs")

# Build plan subcommand group
plan_app = typer.Typer(help="Build plan administration")
plan_app.command(name="status")(plan.plan_status)
plan_app.command(name="trigger")(plan.trigger_build)
plan_app.command(name="enable")(plan.enable_plan)
plan_app.command(name="delete")(plan.delete_plan)
plan_app.command(name="delete-project")(plan.delete_project)
plan_app.command(name="grant")(plan.grant_permissions)
plan_app.command(name="lock-down")(plan.lock_down_project)
plan_app.command(name="check-project")(plan.check_project)
plan_app.command(name="exists")(plan.plan_exists)
plan_app.command(name="health")(plan.ci_health)
app.add_typer(plan_app, name="plan")

# Participation subcommand group
participation_app = typer.Typer(help="Participation and submission records")
participation_app.command(name="add")(participation.add_participation)
participation_app.command(name="list")(participation.list_participations)
participation_app.command(name="submit")(participation.record_submission)
participation_app.command(name="results")(participation.show_results)
app.add_typer(participation_app, name="participation")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output", is_eager=True),
    log_file: Path | None = typer.Option(None, "--log-file", help="Log file path"),
) -> None:
    """cigrader - grade CI build results for programming exercises."""
    setup_logging(verbose=verbose, log_file=log_file)


if __name__ == "__main__":
    app()
