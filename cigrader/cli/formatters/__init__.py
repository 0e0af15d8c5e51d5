from cigrader.cli.formatters.result_formatter import (
    format_build_logs,
    format_build_status,
    format_feedback,
    format_graded_build,
    format_outcome,
    format_results,
)

__all__ = [
    "format_build_logs",
    "format_build_status",
    "format_feedback",
    "format_graded_build",
    "format_outcome",
    "format_results",
]
