import hmac
from collections.abc import Awaitable, Callable

from loguru import logger

from cigrader.application.dto.ingest_outcome import IngestOutcome
from cigrader.application.orchestrator import RawNotification
from cigrader.domain.errors import AuthorizationError, ConfigurationError

BEARER_PREFIX = "Bearer "

NotificationHandler = Callable[[RawNotification], Awaitable[IngestOutcome]]


class WebhookGateway:
    """Entry point for build notifications posted by the CI server.

    The CI server sends the shared secret in the Authorization header. The
    token is checked before the payload is looked at.
    """

    def __init__(self, secret: str, handler: NotificationHandler) -> None:
        if not secret:
            raise ConfigurationError("Webhook secret must not be empty")
        self._secret = secret.encode()
        self._handler = handler

    def authorize(self, authorization: str | None, source: str | None = None) -> None:
        token = authorization or ""
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX) :]

        if not token or not hmac.compare_digest(token.encode(), self._secret):
            logger.warning(
                "Security: rejected build notification from {} ({} token)",
                source or "unknown source",
                "missing" if not token else "invalid",
            )
            raise AuthorizationError("Invalid or missing webhook token")

    async def receive(
        self,
        authorization: str | None,
        payload: RawNotification,
        source: str | None = None,
    ) -> IngestOutcome:
        self.authorize(authorization, source)
        return await self._handler(payload)
