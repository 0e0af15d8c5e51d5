from pydantic import BaseModel

from cigrader.domain.entities import BuildLogEntry, Participation, PendingSubmission, Result
from cigrader.domain.value_objects import IgnoreReason


class Ignored(BaseModel, frozen=True):
    """The notification was understood but produces no result."""

    reason: IgnoreReason
    plan_key: str
    commit_hash: str | None = None


class GradedBuild(BaseModel, frozen=True):
    """Everything one notification produced, ready to be committed together."""

    participation: Participation
    submission: PendingSubmission
    result: Result
    build_logs: list[BuildLogEntry]

    @property
    def submission_is_new(self) -> bool:
        return self.submission.id is None


IngestOutcome = GradedBuild | Ignored
