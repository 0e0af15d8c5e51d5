from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from cigrader.domain.entities import BuildLogEntry, Participation, PendingSubmission, Result
from cigrader.domain.errors import DuplicateResultError
from cigrader.domain.ports.grading_store_port import GradingStorePort
from cigrader.infrastructure.persistence.async_file_lock import async_file_lock
from cigrader.infrastructure.persistence.atomic_io import read_json, write_json

PARTICIPATIONS = "participations"
SUBMISSIONS = "submissions"
RESULTS = "results"
BUILD_LOGS = "build_logs"

ModelT = TypeVar("ModelT", bound=BaseModel)
Collection = dict[str, Any]


def _next_id(collection: Collection) -> int:
    return max((int(key) for key in collection), default=0) + 1


class JsonGradingStore(GradingStorePort):
    """File-based grading store, one JSON document per collection.

    Layout under ``state_dir/grading``::

        participations.json   {id: participation}
        submissions.json      {id: submission}
        results.json          {id: result}
        build_logs.json       {submission id: [entry, ...]}

    Every operation holds a single lock file, so several processes can
    share the directory.
    """

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir
        self.store_dir = state_dir / "grading"

    def _path(self, collection: str) -> Path:
        return self.store_dir / f"{collection}.json"

    def _lock(self) -> AbstractAsyncContextManager[None]:
        return async_file_lock(self.store_dir / ".lock")

    async def _load(self, collection: str) -> Collection:
        return await read_json(self._path(collection), default={})

    async def _dump(self, collection: str, data: Collection) -> None:
        await write_json(self._path(collection), data)

    async def _get(self, collection: str, key: int, model: type[ModelT]) -> ModelT | None:
        async with self._lock():
            raw = (await self._load(collection)).get(str(key))
        return model.model_validate(raw) if raw is not None else None

    # Participations

    async def save_participation(self, participation: Participation) -> Participation:
        async with self._lock():
            participations = await self._load(PARTICIPATIONS)
            participations[str(participation.id)] = participation.model_dump(mode="json")
            await self._dump(PARTICIPATIONS, participations)
        logger.info("Saved participation {} for plan {}", participation.id, participation.plan_key)
        return participation

    async def get_participation(self, participation_id: int) -> Participation | None:
        return await self._get(PARTICIPATIONS, participation_id, Participation)

    async def find_by_plan_key(self, plan_key: str) -> list[Participation]:
        async with self._lock():
            participations = await self._load(PARTICIPATIONS)
        wanted = plan_key.upper()
        return [
            Participation.model_validate(raw)
            for raw in participations.values()
            if raw["plan_key"].upper() == wanted
        ]

    async def list_participations(self) -> list[Participation]:
        async with self._lock():
            participations = await self._load(PARTICIPATIONS)
        return sorted(
            (Participation.model_validate(raw) for raw in participations.values()),
            key=lambda p: p.id,
        )

    # Submissions

    async def save_submission(self, submission: PendingSubmission) -> PendingSubmission:
        async with self._lock():
            submissions = await self._load(SUBMISSIONS)
            if submission.id is None:
                submission = submission.model_copy(update={"id": _next_id(submissions)})
            submissions[str(submission.id)] = submission.model_dump(mode="json")
            await self._dump(SUBMISSIONS, submissions)
        logger.debug("Saved submission {}", submission.id)
        return submission

    async def get_submission(self, submission_id: int) -> PendingSubmission | None:
        return await self._get(SUBMISSIONS, submission_id, PendingSubmission)

    async def list_for_participation(self, participation_id: int) -> list[PendingSubmission]:
        async with self._lock():
            submissions = await self._load(SUBMISSIONS)
        return [
            PendingSubmission.model_validate(raw)
            for raw in submissions.values()
            if raw["participation_id"] == participation_id
        ]

    # Results

    async def get_result(self, result_id: int) -> Result | None:
        return await self._get(RESULTS, result_id, Result)

    async def commit_graded_build(
        self,
        result: Result,
        submission: PendingSubmission,
        build_logs: list[BuildLogEntry],
    ) -> tuple[Result, PendingSubmission]:
        async with self._lock():
            submissions = await self._load(SUBMISSIONS)
            results = await self._load(RESULTS)
            logs = await self._load(BUILD_LOGS)

            if submission.id is None:
                submission = submission.model_copy(update={"id": _next_id(submissions)})
            else:
                stored = submissions.get(str(submission.id))
                if stored is not None and stored.get("result_id") is not None:
                    raise DuplicateResultError(submission.id)

            result = result.model_copy(
                update={"id": _next_id(results), "submission_id": submission.id}
            )
            submission = submission.model_copy(update={"result_id": result.id})

            results[str(result.id)] = result.model_dump(mode="json")
            submissions[str(submission.id)] = submission.model_dump(mode="json")
            logs[str(submission.id)] = [
                entry.model_copy(update={"submission_id": submission.id}).model_dump(mode="json")
                for entry in build_logs
            ]

            # Result first: a submission never points at a missing result
            await self._dump(RESULTS, results)
            await self._dump(SUBMISSIONS, submissions)
            await self._dump(BUILD_LOGS, logs)

        logger.info("Committed result {} for submission {}", result.id, submission.id)
        return result, submission

    async def list_results(self, participation_id: int) -> list[Result]:
        async with self._lock():
            results = await self._load(RESULTS)
        return sorted(
            (
                Result.model_validate(raw)
                for raw in results.values()
                if raw["participation_id"] == participation_id
            ),
            key=lambda r: r.completion_date,
        )

    # Build logs

    async def load_build_logs(self, submission_id: int) -> list[BuildLogEntry]:
        async with self._lock():
            logs = await self._load(BUILD_LOGS)
        return [BuildLogEntry.model_validate(raw) for raw in logs.get(str(submission_id), [])]

    async def replace_build_logs(self, submission_id: int, entries: list[BuildLogEntry]) -> None:
        async with self._lock():
            logs = await self._load(BUILD_LOGS)
            logs[str(submission_id)] = [entry.model_dump(mode="json") for entry in entries]
            await self._dump(BUILD_LOGS, logs)
        logger.debug("Replaced build logs of submission {} ({} lines)", submission_id, len(entries))
