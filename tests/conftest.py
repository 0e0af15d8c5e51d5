from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from cigrader.domain.entities import Participation, PendingSubmission
from cigrader.domain.value_objects import ParticipationRole, SubmissionType

ASSIGNMENT_HASH = "a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2"
TESTS_HASH = "0f9e8d7c6b5a0f9e8d7c6b5a0f9e8d7c6b5a0f9e"

NotificationFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    state_dir = tmp_path / ".cigrader"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def make_notification() -> NotificationFactory:
    """Build a notification payload in the CI server's wire format."""

    def factory(
        plan_key: str = "EX1-STUDENT1",
        successful: bool = True,
        total: int = 5,
        passed: int = 5,
        description: str | None = None,
        reason: str | None = "Code has changed",
        assignment_hash: str | None = ASSIGNMENT_HASH,
        tests_hash: str | None = TESTS_HASH,
        failed_tests: list[dict[str, Any]] | None = None,
        sca_reports: list[dict[str, Any]] | None = None,
        logs: list[dict[str, Any]] | None = None,
        completed: str = "2026-10-10T12:00:00Z",
        artifact: bool = False,
    ) -> dict[str, Any]:
        vcs = []
        if assignment_hash is not None:
            vcs.append({"id": assignment_hash, "repositoryName": "assignment"})
        if tests_hash is not None:
            vcs.append({"id": tests_hash, "repositoryName": "tests"})

        return {
            "plan": {"key": plan_key},
            "build": {
                "successful": successful,
                "buildCompletedDate": completed,
                "reason": reason,
                "artifact": artifact,
                "testSummary": {
                    "totalCount": total,
                    "successfulCount": passed,
                    "description": description or f"{passed} of {total} passed",
                },
                "vcs": vcs,
                "jobs": [
                    {
                        "id": 1,
                        "failedTests": failed_tests or [],
                        "successfulTests": [],
                        "staticCodeAnalysisReports": sca_reports or [],
                        "logs": logs or [],
                    }
                ],
            },
        }

    return factory


@pytest.fixture
def student_participation() -> Participation:
    return Participation(
        id=7,
        role=ParticipationRole.STUDENT,
        plan_key="EX1-STUDENT1",
        exercise_id=1,
        initialized_at=datetime(2026, 10, 1, tzinfo=UTC),
    )


@pytest.fixture
def pending_submission() -> PendingSubmission:
    return PendingSubmission(
        id=11,
        participation_id=7,
        commit_hash=ASSIGNMENT_HASH,
        submission_type=SubmissionType.MANUAL,
        submission_date=datetime(2026, 10, 10, 11, 58, tzinfo=UTC),
    )


@pytest.fixture
def assignment_hash() -> str:
    return ASSIGNMENT_HASH


@pytest.fixture
def tests_hash() -> str:
    return TESTS_HASH
