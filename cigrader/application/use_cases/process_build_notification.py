import asyncio
import weakref

from loguru import logger

from cigrader.application.dto.ingest_outcome import GradedBuild, Ignored, IngestOutcome
from cigrader.application.orchestrator import GradingOrchestrator, RawNotification
from cigrader.domain.errors import DuplicateResultError
from cigrader.domain.ports.broadcaster_port import NotificationBroadcasterPort
from cigrader.domain.ports.grading_store_port import GradingStorePort
from cigrader.domain.value_objects import IgnoreReason


class ProcessBuildNotification:
    """Ingest a notification and commit what it produced.

    Notifications for the same plan are processed one at a time so that two
    deliveries of the same build cannot both see the submission as pending.
    """

    def __init__(
        self,
        store: GradingStorePort,
        broadcaster: NotificationBroadcasterPort,
        orchestrator: GradingOrchestrator | None = None,
    ) -> None:
        self.store = store
        self.broadcaster = broadcaster
        self.orchestrator = orchestrator or GradingOrchestrator(store, store)
        self._plan_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def execute(self, raw: RawNotification) -> IngestOutcome:
        notification = self.orchestrator.parse(raw)

        async with self._plan_lock(notification.plan_key):
            outcome = await self.orchestrator.process(notification)
            if isinstance(outcome, Ignored):
                logger.info(
                    "Ignored build notification for plan {}: {}",
                    outcome.plan_key,
                    outcome.reason.value,
                )
                return outcome

            try:
                result, submission = await self.store.commit_graded_build(
                    outcome.result, outcome.submission, outcome.build_logs
                )
            except DuplicateResultError as e:
                logger.info("Submission {} already graded, ignoring redelivery", e.submission_id)
                return Ignored(
                    reason=IgnoreReason.DUPLICATE,
                    plan_key=notification.plan_key,
                    commit_hash=outcome.submission.commit_hash,
                )

        committed = outcome.model_copy(
            update={
                "result": result,
                "submission": submission,
                "build_logs": [
                    entry.model_copy(update={"submission_id": submission.id})
                    for entry in outcome.build_logs
                ],
            }
        )
        logger.info(
            "Stored result {} for submission {} of participation {}",
            result.id,
            submission.id,
            outcome.participation.id,
        )
        await self._broadcast(committed)
        return committed

    def _plan_lock(self, plan_key: str) -> asyncio.Lock:
        # Entries vanish once no task holds or awaits the lock
        lock = self._plan_locks.get(plan_key)
        if lock is None:
            lock = asyncio.Lock()
            self._plan_locks[plan_key] = lock
        return lock

    async def _broadcast(self, graded: GradedBuild) -> None:
        try:
            await self.broadcaster.broadcast_new_result(graded.participation, graded.result)
        except Exception as e:
            # The result is committed; a failed push only delays the clients
            logger.error("Failed to broadcast result {}: {}", graded.result.id, e)
