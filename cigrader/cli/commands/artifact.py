import asyncio
import time
from pathlib import Path

import typer
from rich.console import Console

from cigrader.application.services.artifact_resolver import ArtifactResolver
from cigrader.application.use_cases.retrieve_latest_artifact import RetrieveLatestArtifact
from cigrader.cli.theme import theme
from cigrader.cli.wiring import result_client, settings_for
from cigrader.domain.errors import GradingError
from cigrader.domain.value_objects import ArtifactCancelled

console = Console()


def download_artifact(
    plan_key: str = typer.Argument(..., help="Build plan key"),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the artifact"),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Give up after this many seconds"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Download the artifact of the plan's latest build."""
    try:
        asyncio.run(_download(plan_key, output, timeout, config))
    except GradingError as e:
        console.print(f"[{theme.ERROR_BOLD}]Artifact unavailable:[/] {e}")
        raise typer.Exit(1) from e


async def _download(
    plan_key: str,
    output: Path,
    timeout: float | None,
    config: Path | None,
) -> None:
    settings = settings_for(config)
    client = result_client(settings)
    resolver = ArtifactResolver(
        client,
        max_hops=settings.max_artifact_hops,
        hop_timeout_s=settings.artifact_hop_timeout_s,
        fetch_attempts=settings.artifact_fetch_attempts,
    )
    deadline = time.monotonic() + timeout if timeout is not None else None

    use_case = RetrieveLatestArtifact(
        client, resolver, attempts=settings.artifact_fetch_attempts
    )
    outcome = await use_case.execute(plan_key, deadline)
    if isinstance(outcome, ArtifactCancelled):
        console.print(
            f"[{theme.WARNING}]Timed out after {outcome.hops} hops[/] at {outcome.last_uri}"
        )
        raise typer.Exit(1)

    output.write_bytes(outcome.content)
    console.print(
        f"[{theme.SUCCESS}]Saved[/] {len(outcome.content)} bytes "
        f"({outcome.content_type}) to {output}"
    )
