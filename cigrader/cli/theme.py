"""CLI theme configuration - all colors in one place.

Colors use Rich markup syntax (e.g., "green", "bold red", "dim italic").
"""


class Theme:
    """Terminal color theme for the cigrader CLI."""

    # -------------------------------------------------------------------------
    # Status colors
    # -------------------------------------------------------------------------
    SUCCESS = "green"
    SUCCESS_BOLD = "bold green"
    ERROR = "red"
    ERROR_BOLD = "bold red"
    WARNING = "yellow"
    WARNING_BOLD = "bold yellow"
    INFO = "cyan"

    # -------------------------------------------------------------------------
    # Text styles
    # -------------------------------------------------------------------------
    HEADER = "bold"
    DIM = "grey62"

    # -------------------------------------------------------------------------
    # Results and feedback
    # -------------------------------------------------------------------------
    RESULT_RATED = "bold green"
    RESULT_UNRATED = "yellow"
    FEEDBACK_FAILED = "red"
    FEEDBACK_STATIC = "magenta"

    # -------------------------------------------------------------------------
    # Build status
    # -------------------------------------------------------------------------
    BUILD_INACTIVE = "grey62"
    BUILD_QUEUED = "yellow"
    BUILD_BUILDING = "bold cyan"

    # -------------------------------------------------------------------------
    # Build logs
    # -------------------------------------------------------------------------
    LOG_TIMESTAMP = "grey62"
    LOG_ERROR = "red"


# Default theme instance - import this in other modules
theme = Theme()
