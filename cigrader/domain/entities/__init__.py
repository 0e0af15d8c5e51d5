from cigrader.domain.entities.build_log_entry import BuildLogEntry
from cigrader.domain.entities.participation import Participation
from cigrader.domain.entities.result import Feedback, Result
from cigrader.domain.entities.submission import PendingSubmission

__all__ = [
    "BuildLogEntry",
    "Feedback",
    "Participation",
    "PendingSubmission",
    "Result",
]
