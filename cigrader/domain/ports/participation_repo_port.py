from abc import ABC, abstractmethod

from cigrader.domain.entities.participation import Participation


class ParticipationRepoPort(ABC):
    """Port for participation lookups by build plan."""

    @abstractmethod
    async def find_by_plan_key(self, plan_key: str) -> list[Participation]:
        """Return every participation currently bound to the plan key.

        Plan keys compare case-insensitively.
        """
