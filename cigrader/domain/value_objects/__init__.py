from cigrader.domain.value_objects.artifact_types import (
    ArtifactCancelled,
    ArtifactFailureReason,
    ArtifactReference,
    FetchedPage,
    TerminalArtifact,
)
from cigrader.domain.value_objects.build_notification import (
    FIRST_BUILD_MARKER,
    NO_TESTS_FOUND,
    BuildInfo,
    BuildJob,
    BuildNotification,
    BuildTestSummary,
    JobLogLine,
    JobTestCase,
    PlanInfo,
    StaticAnalysisIssue,
    StaticAnalysisReport,
    VcsChange,
)
from cigrader.domain.value_objects.grading_enums import (
    AssessmentType,
    BuildStatus,
    FeedbackCategory,
    IgnoreReason,
    ParticipationRole,
    SubmissionType,
)

__all__ = [
    "ArtifactCancelled",
    "ArtifactFailureReason",
    "ArtifactReference",
    "AssessmentType",
    "BuildInfo",
    "BuildJob",
    "BuildNotification",
    "BuildStatus",
    "BuildTestSummary",
    "FIRST_BUILD_MARKER",
    "FeedbackCategory",
    "FetchedPage",
    "IgnoreReason",
    "JobLogLine",
    "JobTestCase",
    "NO_TESTS_FOUND",
    "ParticipationRole",
    "PlanInfo",
    "StaticAnalysisIssue",
    "StaticAnalysisReport",
    "SubmissionType",
    "TerminalArtifact",
    "VcsChange",
]
