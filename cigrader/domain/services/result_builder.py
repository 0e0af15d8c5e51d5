from cigrader.domain.entities import Feedback, Participation, PendingSubmission, Result
from cigrader.domain.services.rating_policy import is_rated
from cigrader.domain.value_objects import (
    NO_TESTS_FOUND,
    AssessmentType,
    BuildJob,
    BuildNotification,
    FeedbackCategory,
    JobTestCase,
    StaticAnalysisIssue,
)


class ResultBuilder:
    """Turns a build notification into an automatic, not yet scored Result."""

    def build(
        self,
        notification: BuildNotification,
        participation: Participation,
        submission: PendingSubmission,
    ) -> Result:
        build = notification.build
        feedbacks, has_feedback = self._collect_feedback(
            build.jobs, participation.static_analysis_enabled
        )

        return Result(
            submission_id=submission.id,
            participation_id=participation.id,
            successful=build.successful,
            result_string=self.result_string(notification),
            completion_date=build.build_completed_date,
            assessment_type=AssessmentType.AUTOMATIC,
            rated=is_rated(participation.due_date, submission),
            has_feedback=has_feedback,
            feedbacks=feedbacks,
        )

    def result_string(self, notification: BuildNotification) -> str:
        summary = notification.build.test_summary
        if summary.description == NO_TESTS_FOUND:
            return NO_TESTS_FOUND
        return f"{summary.successful_count} of {summary.total_count} passed"

    def mark_build_outcome(
        self,
        submission: PendingSubmission,
        result: Result,
        notification: BuildNotification,
    ) -> PendingSubmission:
        """Copy build-level flags from the result onto the submission."""
        return submission.model_copy(
            update={
                "build_failed": result.result_string == NO_TESTS_FOUND,
                "build_artifact": notification.build.artifact,
            }
        )

    def _collect_feedback(
        self,
        jobs: list[BuildJob],
        static_analysis_enabled: bool,
    ) -> tuple[list[Feedback], bool]:
        feedbacks: list[Feedback] = []
        has_feedback = False

        for job in jobs:
            feedbacks.extend(_test_feedback(test, passed=False) for test in job.failed_tests)
            feedbacks.extend(_test_feedback(test, passed=True) for test in job.successful_tests)

            static_feedback: list[Feedback] = []
            if static_analysis_enabled:
                for report in job.static_code_analysis_reports:
                    static_feedback.extend(
                        _static_analysis_feedback(report.tool, issue) for issue in report.issues
                    )
                feedbacks.extend(static_feedback)

            # Passed tests alone are not worth showing
            if job.failed_tests or static_feedback:
                has_feedback = True

        return feedbacks, has_feedback


def _test_feedback(test: JobTestCase, passed: bool) -> Feedback:
    detail = "\n".join(test.errors) if test.errors else None
    return Feedback(
        key=test.name,
        passed=passed,
        detail_text=detail,
        category=FeedbackCategory.TEST_CASE,
    )


def _static_analysis_feedback(tool: str, issue: StaticAnalysisIssue) -> Feedback:
    location = issue.file_path
    if issue.start_line is not None:
        location = f"{location}:{issue.start_line}"
    return Feedback(
        key=f"{tool}-{issue.category}-{issue.rule}",
        passed=False,
        detail_text=f"{location}: {issue.message}" if location else issue.message,
        category=FeedbackCategory.STATIC_ANALYSIS,
    )
