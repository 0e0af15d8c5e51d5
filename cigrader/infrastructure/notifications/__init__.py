from cigrader.infrastructure.notifications.logging_broadcaster import LoggingBroadcaster

__all__ = ["LoggingBroadcaster"]
