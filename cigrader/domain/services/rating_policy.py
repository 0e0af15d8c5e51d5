from datetime import datetime

from cigrader.domain.entities.submission import PendingSubmission
from cigrader.domain.value_objects import SubmissionType


def is_rated(due_date: datetime | None, submission: PendingSubmission) -> bool:
    """Decide whether an automatic result counts toward the grade.

    | due date | submission type          | rated                       |
    |----------|--------------------------|-----------------------------|
    | none     | any                      | yes                         |
    | set      | INSTRUCTOR, TEST         | yes                         |
    | set      | MANUAL, OTHER, EXTERNAL  | iff submitted <= due date   |
    """
    if due_date is None:
        return True

    match submission.submission_type:
        case SubmissionType.INSTRUCTOR | SubmissionType.TEST:
            return True
        case SubmissionType.MANUAL | SubmissionType.OTHER | SubmissionType.EXTERNAL:
            return submission.submission_date <= due_date
