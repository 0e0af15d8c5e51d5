from datetime import datetime

from pydantic import BaseModel

from cigrader.domain.value_objects import SubmissionType


class PendingSubmission(BaseModel, frozen=True):
    """A submission waiting for (or linked to) its automatic build result.

    Usually created by the push handler before the build notification arrives.
    ``id`` stays None for submissions synthesized during ingestion until the
    store persists them.
    """

    id: int | None = None
    participation_id: int
    commit_hash: str | None
    submission_type: SubmissionType
    submission_date: datetime
    result_id: int | None = None
    submitted: bool = True
    build_failed: bool = False
    build_artifact: bool = False

    @property
    def is_pending(self) -> bool:
        return self.result_id is None

    def has_commit(self, commit_hash: str | None) -> bool:
        if self.commit_hash is None or commit_hash is None:
            return False
        return self.commit_hash.lower() == commit_hash.lower()
