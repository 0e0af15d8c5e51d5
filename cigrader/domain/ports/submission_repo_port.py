from abc import ABC, abstractmethod

from cigrader.domain.entities.submission import PendingSubmission


class SubmissionRepoPort(ABC):
    """Port for reading the submissions of a participation."""

    @abstractmethod
    async def list_for_participation(self, participation_id: int) -> list[PendingSubmission]:
        """Return all submissions of the participation, linked or not, in any order."""
