from cigrader.domain.value_objects.artifact_types import ArtifactFailureReason


class GradingError(Exception):
    """Base class for errors raised while ingesting a build notification."""


class NotificationValidationError(GradingError):
    """The notification payload is malformed or misses required fields."""


class ParticipationNotFoundError(GradingError):
    """No participation is bound to the notification's plan key.

    The CI server does not resend, so the notification is dropped.
    """

    def __init__(self, plan_key: str) -> None:
        super().__init__(f"No participation found for build plan {plan_key}")
        self.plan_key = plan_key


class AuthorizationError(GradingError):
    """The webhook call carried a missing or wrong shared secret."""


class DuplicateResultError(GradingError):
    """A submission already has a result; a second one must not be linked."""

    def __init__(self, submission_id: int) -> None:
        super().__init__(f"Submission {submission_id} already has a result")
        self.submission_id = submission_id


class TransientIOError(GradingError):
    """Temporary failure talking to the CI server. Safe to retry."""


class ArtifactResolutionError(GradingError):
    """The build artifact is unavailable."""

    def __init__(self, reason: ArtifactFailureReason, detail: str) -> None:
        super().__init__(f"Artifact unavailable ({reason.value}): {detail}")
        self.reason = reason
        self.detail = detail


class CIRequestError(GradingError):
    """The CI server rejected a request (non-retryable HTTP error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(GradingError):
    """A required collaborator or setting is not configured."""
