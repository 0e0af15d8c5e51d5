from abc import ABC, abstractmethod

from cigrader.domain.entities import Participation, Result


class NotificationBroadcasterPort(ABC):
    """Port for telling interested clients about a new result."""

    @abstractmethod
    async def broadcast_new_result(self, participation: Participation, result: Result) -> None:
        """Publish a freshly persisted result."""
