from loguru import logger
from tenacity import RetryError

from cigrader.application.services.transient_retry import DEFAULT_FETCH_ATTEMPTS, retry_transient
from cigrader.domain.entities import BuildLogEntry
from cigrader.domain.ports.ci_result_port import CIResultPort
from cigrader.domain.ports.grading_store_port import GradingStorePort
from cigrader.domain.services.build_log_filter import BuildLogFilter


class FetchBuildLogs:
    """Return the filtered build log of a submission.

    Logs stored during ingestion are returned as they are. Otherwise the
    latest log of the plan is fetched from the CI server, filtered and
    stored for the submission.
    """

    def __init__(
        self,
        store: GradingStorePort,
        ci_results: CIResultPort,
        log_filter: BuildLogFilter | None = None,
        attempts: int = DEFAULT_FETCH_ATTEMPTS,
        wait_multiplier: float = 1.0,
    ) -> None:
        self.store = store
        self.ci_results = ci_results
        self.log_filter = log_filter or BuildLogFilter()
        self._fetch_with_retry = retry_transient(
            self.ci_results.fetch_latest_build_logs,
            "build logs",
            attempts=attempts,
            wait_multiplier=wait_multiplier,
        )

    async def execute(self, plan_key: str, submission_id: int) -> list[BuildLogEntry]:
        stored = await self.store.load_build_logs(submission_id)
        if stored:
            logger.debug("Using {} stored log lines of submission {}", len(stored), submission_id)
            return stored

        try:
            raw_entries = await self._fetch_with_retry(plan_key)
        except RetryError as e:
            logger.error(
                "Giving up on build logs of plan {} after {} attempts: {}",
                plan_key,
                e.last_attempt.attempt_number,
                e.last_attempt.exception(),
            )
            return []

        entries = [
            entry.model_copy(update={"submission_id": submission_id})
            for entry in self.log_filter.filter(raw_entries)
        ]
        await self.store.replace_build_logs(submission_id, entries)
        logger.info("Stored {} filtered log lines for submission {}", len(entries), submission_id)
        return entries
