from loguru import logger

from cigrader.domain.entities import Participation, Result
from cigrader.domain.ports.broadcaster_port import NotificationBroadcasterPort


class LoggingBroadcaster(NotificationBroadcasterPort):
    """Announces new results in the log and remembers what it published."""

    def __init__(self) -> None:
        self.published: list[tuple[int, Result]] = []

    async def broadcast_new_result(self, participation: Participation, result: Result) -> None:
        self.published.append((participation.id, result))
        logger.bind(participation_id=participation.id, result_id=result.id).info(
            "New result for participation {} ({}): {}",
            participation.id,
            participation.plan_key,
            result.result_string,
        )
