import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console

from cigrader.application.use_cases.process_build_notification import ProcessBuildNotification
from cigrader.application.webhook_gateway import WebhookGateway
from cigrader.cli.formatters.result_formatter import format_outcome
from cigrader.cli.theme import theme
from cigrader.cli.wiring import grading_store, settings_for
from cigrader.domain.errors import GradingError
from cigrader.infrastructure.notifications.logging_broadcaster import LoggingBroadcaster

console = Console()


def ingest_notification(
    notification: Path = typer.Argument(..., help="Notification JSON file, '-' for stdin"),
    token: str | None = typer.Option(
        None, "--token", "-t", envvar="CIGRADER_WEBHOOK_TOKEN", help="Webhook token"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
    state_dir: Path | None = typer.Option(None, "--state-dir", help="State directory"),
) -> None:
    """Ingest a build-completion notification as if the CI server had posted it."""
    payload = sys.stdin.read() if str(notification) == "-" else notification.read_text("utf-8")
    try:
        asyncio.run(_ingest(payload, token, config, state_dir))
    except GradingError as e:
        console.print(f"[{theme.ERROR_BOLD}]Ingestion failed:[/] {e}")
        raise typer.Exit(1) from e


async def _ingest(
    payload: str,
    token: str | None,
    config: Path | None,
    state_dir: Path | None,
) -> None:
    settings = settings_for(config, state_dir)
    use_case = ProcessBuildNotification(grading_store(settings), LoggingBroadcaster())
    gateway = WebhookGateway(settings.require_webhook_secret(), use_case.execute)

    outcome = await gateway.receive(token, payload, source="cli")
    format_outcome(console, outcome)
