from loguru import logger

from cigrader.application.dto.ingest_outcome import Ignored
from cigrader.domain.entities import Participation, PendingSubmission
from cigrader.domain.ports.submission_repo_port import SubmissionRepoPort
from cigrader.domain.value_objects import BuildNotification, IgnoreReason, SubmissionType


def relevant_commit_hash(
    notification: BuildNotification,
    submission_type: SubmissionType,
) -> str | None:
    """Commit hash of the repository that triggered a submission of this type.

    Student and instructor pushes go to the assignment repository, test
    pushes to the tests repository. Other submissions are not matched by hash.
    """
    match submission_type:
        case SubmissionType.MANUAL | SubmissionType.INSTRUCTOR:
            return notification.assignment_commit_hash
        case SubmissionType.TEST:
            return notification.tests_commit_hash
        case SubmissionType.OTHER | SubmissionType.EXTERNAL:
            return None


def _linked_commit_hash(
    notification: BuildNotification,
    submission_type: SubmissionType,
) -> str | None:
    # Fallback submissions are stored with the assignment hash
    return relevant_commit_hash(notification, submission_type) or notification.assignment_commit_hash


class SubmissionCorrelator:
    def __init__(self, submission_repo: SubmissionRepoPort) -> None:
        self.submission_repo = submission_repo

    async def correlate(
        self,
        participation: Participation,
        notification: BuildNotification,
    ) -> PendingSubmission | Ignored:
        """Find the submission a build belongs to, or create one.

        Returns Ignored for the plan's initial build and for redelivered
        notifications whose submission already has a result.
        """
        if notification.is_first_build():
            logger.debug("Ignoring first build of plan {}", notification.plan_key)
            return Ignored(reason=IgnoreReason.FIRST_BUILD, plan_key=notification.plan_key)

        submissions = await self.submission_repo.list_for_participation(participation.id)
        newest_first = sorted(submissions, key=lambda s: s.submission_date, reverse=True)

        for candidate in newest_first:
            if not candidate.is_pending:
                continue
            commit_hash = relevant_commit_hash(notification, candidate.submission_type)
            if candidate.has_commit(commit_hash):
                return candidate

        linked_newest_first = [s for s in newest_first if not s.is_pending]
        for position, linked in enumerate(linked_newest_first):
            # Every build carries the tests commit, so an older TEST submission
            # sharing it says nothing about this build
            if linked.submission_type == SubmissionType.TEST and position > 0:
                continue
            commit_hash = _linked_commit_hash(notification, linked.submission_type)
            if linked.has_commit(commit_hash):
                logger.info(
                    "Submission {} for commit {} already has result {}, ignoring redelivery",
                    linked.id,
                    commit_hash,
                    linked.result_id,
                )
                return Ignored(
                    reason=IgnoreReason.DUPLICATE,
                    plan_key=notification.plan_key,
                    commit_hash=commit_hash,
                )

        return self._synthesize(participation, notification)

    def _synthesize(
        self,
        participation: Participation,
        notification: BuildNotification,
    ) -> PendingSubmission:
        # Builds triggered manually on the CI server, or pushes whose
        # submission was never recorded. The assignment hash is kept as
        # provenance even though OTHER submissions are not matched by hash.
        commit_hash = notification.assignment_commit_hash
        logger.warning(
            "No pending submission for commit {} (participation {}, plan {}), creating one",
            commit_hash,
            participation.id,
            participation.plan_key,
        )
        return PendingSubmission(
            participation_id=participation.id,
            commit_hash=commit_hash,
            submission_type=SubmissionType.OTHER,
            submission_date=notification.build.build_completed_date,
            submitted=True,
        )
