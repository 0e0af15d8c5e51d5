from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cigrader.application.dto.ingest_outcome import GradedBuild, Ignored, IngestOutcome
from cigrader.cli.theme import theme
from cigrader.domain.entities import BuildLogEntry, Result
from cigrader.domain.value_objects import BuildStatus, FeedbackCategory, IgnoreReason

_IGNORE_MESSAGES = {
    IgnoreReason.FIRST_BUILD: "initial build of a new plan",
    IgnoreReason.DUPLICATE: "build was already graded",
}

_STATUS_STYLES = {
    BuildStatus.INACTIVE: theme.BUILD_INACTIVE,
    BuildStatus.QUEUED: theme.BUILD_QUEUED,
    BuildStatus.BUILDING: theme.BUILD_BUILDING,
}


def format_outcome(console: Console, outcome: IngestOutcome) -> None:
    if isinstance(outcome, Ignored):
        console.print(
            f"[{theme.WARNING}]Ignored[/] notification for plan {outcome.plan_key}: "
            f"{_IGNORE_MESSAGES[outcome.reason]}"
        )
        return
    format_graded_build(console, outcome)


def format_graded_build(console: Console, graded: GradedBuild) -> None:
    result = graded.result
    submission = graded.submission
    style = theme.SUCCESS_BOLD if result.successful else theme.ERROR_BOLD

    console.print(f"[{style}]{result.result_string}[/] for plan {graded.participation.plan_key}")
    console.print(
        f"[{theme.DIM}]result {result.id or '-'} / submission {submission.id or '-'} "
        f"({submission.submission_type.value}, commit {submission.commit_hash or '-'})[/]"
    )
    rated = "rated" if result.rated else "not rated"
    console.print(f"[{theme.RESULT_RATED if result.rated else theme.RESULT_UNRATED}]{rated}[/]")
    if submission.build_failed:
        console.print(f"[{theme.ERROR}]Build failed: no tests were run[/]")

    if result.has_feedback:
        format_feedback(console, result)
    if graded.build_logs:
        console.print(f"[{theme.DIM}]{len(graded.build_logs)} build log lines stored[/]")


def format_feedback(console: Console, result: Result) -> None:
    table = Table(title="Feedback")
    table.add_column("Key", style=theme.INFO)
    table.add_column("Category")
    table.add_column("Detail")

    for feedback in result.failed_feedbacks:
        category_style = (
            theme.FEEDBACK_STATIC
            if feedback.category == FeedbackCategory.STATIC_ANALYSIS
            else theme.FEEDBACK_FAILED
        )
        table.add_row(
            feedback.key,
            f"[{category_style}]{feedback.category.value}[/]",
            escape((feedback.detail_text or "")[:120]),
        )

    console.print(table)


def format_results(console: Console, results: list[Result]) -> None:
    table = Table(title="Results")
    table.add_column("ID", style=theme.INFO)
    table.add_column("Completed", style=theme.DIM)
    table.add_column("Result")
    table.add_column("Rated")

    for result in results:
        table.add_row(
            str(result.id),
            result.completion_date.strftime("%Y-%m-%d %H:%M"),
            result.result_string,
            "yes" if result.rated else "no",
        )

    console.print(table)


def format_build_logs(console: Console, entries: list[BuildLogEntry]) -> None:
    for entry in entries:
        text = escape(entry.text)
        if "ERROR" in entry.text:
            text = f"[{theme.LOG_ERROR}]{text}[/]"
        console.print(f"[{theme.LOG_TIMESTAMP}]{entry.timestamp:%H:%M:%S}[/] {text}", highlight=False)


def format_build_status(console: Console, plan_key: str, status: BuildStatus) -> None:
    console.print(f"{plan_key}: [{_STATUS_STYLES[status]}]{status.value}[/]")
