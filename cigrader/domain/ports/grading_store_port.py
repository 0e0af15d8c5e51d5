from abc import abstractmethod

from cigrader.domain.entities import BuildLogEntry, Participation, PendingSubmission, Result
from cigrader.domain.ports.participation_repo_port import ParticipationRepoPort
from cigrader.domain.ports.submission_repo_port import SubmissionRepoPort


class GradingStorePort(ParticipationRepoPort, SubmissionRepoPort):
    """Port for the persistence store, the only writer of grading records."""

    @abstractmethod
    async def save_participation(self, participation: Participation) -> Participation:
        """Insert or replace a participation."""

    @abstractmethod
    async def get_participation(self, participation_id: int) -> Participation | None:
        """Load a participation by id."""

    @abstractmethod
    async def save_submission(self, submission: PendingSubmission) -> PendingSubmission:
        """Insert or replace a submission. Assigns an id to new submissions."""

    @abstractmethod
    async def get_submission(self, submission_id: int) -> PendingSubmission | None:
        """Load a submission by id."""

    @abstractmethod
    async def get_result(self, result_id: int) -> Result | None:
        """Load a result by id."""

    @abstractmethod
    async def commit_graded_build(
        self,
        result: Result,
        submission: PendingSubmission,
        build_logs: list[BuildLogEntry],
    ) -> tuple[Result, PendingSubmission]:
        """Persist result, submission and logs in one transaction.

        Links the result to the submission and replaces the submission's
        build logs. Raises DuplicateResultError if the stored submission
        already has a result.
        """

    @abstractmethod
    async def load_build_logs(self, submission_id: int) -> list[BuildLogEntry]:
        """Load the stored (already filtered) build logs of a submission."""

    @abstractmethod
    async def replace_build_logs(self, submission_id: int, entries: list[BuildLogEntry]) -> None:
        """Replace the stored build logs of a submission."""
