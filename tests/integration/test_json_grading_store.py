"""Integration tests for JsonGradingStore persistence."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from cigrader.domain.entities import BuildLogEntry, Participation, PendingSubmission, Result
from cigrader.domain.errors import DuplicateResultError
from cigrader.domain.value_objects import SubmissionType
from cigrader.infrastructure.persistence.json_grading_store import JsonGradingStore

NOW = datetime(2026, 10, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def store(temp_state_dir: Path) -> JsonGradingStore:
    return JsonGradingStore(temp_state_dir)


def _result(participation_id: int = 7) -> Result:
    return Result(
        participation_id=participation_id,
        successful=True,
        result_string="5 of 5 passed",
        completion_date=NOW,
        rated=True,
    )


def _submission(commit_hash: str = "abc", submission_id: int | None = None) -> PendingSubmission:
    return PendingSubmission(
        id=submission_id,
        participation_id=7,
        commit_hash=commit_hash,
        submission_type=SubmissionType.MANUAL,
        submission_date=NOW,
    )


class TestParticipations:
    async def test_save_and_find_by_plan_key(
        self, store: JsonGradingStore, student_participation: Participation
    ) -> None:
        await store.save_participation(student_participation)

        assert await store.find_by_plan_key("ex1-student1") == [student_participation]
        assert await store.get_participation(student_participation.id) == student_participation
        assert await store.find_by_plan_key("EX1-OTHER") == []

    async def test_missing_participation(self, store: JsonGradingStore) -> None:
        assert await store.get_participation(1) is None
        assert await store.list_participations() == []


class TestSubmissions:
    async def test_assigns_ids(self, store: JsonGradingStore) -> None:
        first = await store.save_submission(_submission("a"))
        second = await store.save_submission(_submission("b"))

        assert (first.id, second.id) == (1, 2)
        assert await store.list_for_participation(7) == [first, second]
        assert await store.list_for_participation(8) == []

    async def test_update_keeps_id(self, store: JsonGradingStore) -> None:
        saved = await store.save_submission(_submission())
        updated = await store.save_submission(saved.model_copy(update={"build_failed": True}))

        assert updated.id == saved.id
        assert (await store.get_submission(saved.id)).build_failed


class TestCommitGradedBuild:
    async def test_links_result_and_submission(self, store: JsonGradingStore) -> None:
        submission = await store.save_submission(_submission())
        logs = [BuildLogEntry(timestamp=NOW, text="compiling")]

        result, linked = await store.commit_graded_build(_result(), submission, logs)

        assert result.id == 1
        assert result.submission_id == submission.id
        assert linked.result_id == result.id
        assert await store.get_result(result.id) == result
        assert (await store.get_submission(submission.id)).result_id == result.id
        stored_logs = await store.load_build_logs(submission.id)
        assert [e.text for e in stored_logs] == ["compiling"]
        assert stored_logs[0].submission_id == submission.id

    async def test_persists_new_submission(self, store: JsonGradingStore) -> None:
        result, submission = await store.commit_graded_build(_result(), _submission(), [])

        assert submission.id is not None
        assert await store.list_for_participation(7) == [submission]
        assert result.submission_id == submission.id

    async def test_second_result_is_rejected(self, store: JsonGradingStore) -> None:
        submission = await store.save_submission(_submission())
        await store.commit_graded_build(_result(), submission, [])

        with pytest.raises(DuplicateResultError):
            await store.commit_graded_build(_result(), submission, [])

        assert len(await store.list_results(7)) == 1

    async def test_survives_new_instance(self, temp_state_dir: Path) -> None:
        result, submission = await JsonGradingStore(temp_state_dir).commit_graded_build(
            _result(), _submission(), []
        )

        reopened = JsonGradingStore(temp_state_dir)
        assert await reopened.get_result(result.id) == result
        assert await reopened.get_submission(submission.id) == submission


class TestBuildLogs:
    async def test_replace_build_logs(self, store: JsonGradingStore) -> None:
        await store.replace_build_logs(3, [BuildLogEntry(timestamp=NOW, text="old")])
        await store.replace_build_logs(3, [BuildLogEntry(timestamp=NOW, text="new")])

        assert [e.text for e in await store.load_build_logs(3)] == ["new"]
        assert await store.load_build_logs(4) == []

    async def test_no_temp_files_left(self, store: JsonGradingStore) -> None:
        await store.replace_build_logs(3, [BuildLogEntry(timestamp=NOW, text="x")])
        assert not list(store.store_dir.glob(".tmp_*"))
