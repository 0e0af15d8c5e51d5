import html
from typing import Any

from loguru import logger
from pydantic import ValidationError

from cigrader.application.dto.ingest_outcome import GradedBuild, Ignored, IngestOutcome
from cigrader.application.services.participation_resolver import ParticipationResolver
from cigrader.application.services.submission_correlator import SubmissionCorrelator
from cigrader.domain.entities import BuildLogEntry
from cigrader.domain.errors import NotificationValidationError
from cigrader.domain.ports.participation_repo_port import ParticipationRepoPort
from cigrader.domain.ports.submission_repo_port import SubmissionRepoPort
from cigrader.domain.services.build_log_filter import BuildLogFilter
from cigrader.domain.services.result_builder import ResultBuilder
from cigrader.domain.value_objects import BuildNotification

RawNotification = dict[str, Any] | str | bytes


class GradingOrchestrator:
    """Turns one build notification into a graded build, without side effects.

    Persisting the outcome and telling clients about it is left to the
    caller (see ProcessBuildNotification), so the whole pipeline can be
    exercised against read-only repositories.
    """

    def __init__(
        self,
        participation_repo: ParticipationRepoPort,
        submission_repo: SubmissionRepoPort,
        result_builder: ResultBuilder | None = None,
        log_filter: BuildLogFilter | None = None,
    ) -> None:
        self.participation_resolver = ParticipationResolver(participation_repo)
        self.submission_correlator = SubmissionCorrelator(submission_repo)
        self.result_builder = result_builder or ResultBuilder()
        self.log_filter = log_filter or BuildLogFilter()

    async def ingest(self, raw: RawNotification) -> IngestOutcome:
        """Parse and process a raw notification payload.

        Raises:
            NotificationValidationError: payload does not match the schema.
            ParticipationNotFoundError: no participation is bound to the plan.
        """
        return await self.process(self.parse(raw))

    def parse(self, raw: RawNotification) -> BuildNotification:
        try:
            if isinstance(raw, dict):
                return BuildNotification.model_validate(raw)
            return BuildNotification.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Rejected malformed build notification: {} error(s)", e.error_count())
            raise NotificationValidationError(str(e)) from e

    async def process(self, notification: BuildNotification) -> IngestOutcome:
        plan_key = notification.plan_key
        participation = await self.participation_resolver.resolve(plan_key)

        correlated = await self.submission_correlator.correlate(participation, notification)
        if isinstance(correlated, Ignored):
            return correlated

        result = self.result_builder.build(notification, participation, correlated)
        submission = self.result_builder.mark_build_outcome(correlated, result, notification)
        build_logs = self.log_filter.filter(self._log_entries(notification, submission.id))

        logger.info(
            "Graded build of plan {} for participation {}: {} (rated={})",
            plan_key,
            participation.id,
            result.result_string,
            result.rated,
        )
        return GradedBuild(
            participation=participation,
            submission=submission,
            result=result,
            build_logs=build_logs,
        )

    def _log_entries(
        self,
        notification: BuildNotification,
        submission_id: int | None,
    ) -> list[BuildLogEntry]:
        return [
            BuildLogEntry(
                timestamp=line.date,
                text=html.unescape(line.log),
                submission_id=submission_id,
            )
            for job in notification.build.jobs
            for line in job.logs
        ]
