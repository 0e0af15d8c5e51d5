from datetime import UTC, datetime
from typing import Any
from urllib.parse import urljoin

from loguru import logger

from cigrader.domain.entities import BuildLogEntry
from cigrader.domain.ports.ci_result_port import CIResultPort
from cigrader.domain.value_objects import ArtifactReference, BuildStatus, FetchedPage
from cigrader.infrastructure.ci.bamboo_http import BambooHttp

BUILD_LOG_ARTIFACT = "Build log"
STATIC_ANALYSIS_ARTIFACTS = ("spotbugs", "checkstyle", "pmd")
MAX_LOG_ENTRIES = 2000

_RESULT_EXPAND = "testResults.failedTests.testResult.errors,artifacts,changes,vcsRevisions"


def _latest_result_path(plan_key: str) -> str:
    return f"/result/{plan_key.upper()}-JOB1/latest.json"


def _log_entry(raw: dict[str, Any]) -> BuildLogEntry:
    # unstyledLog holds unescaped text; log is the HTML-escaped fallback
    text = raw.get("unstyledLog")
    if text is None:
        text = raw.get("log", "")
    timestamp = datetime.fromtimestamp(int(raw["date"]) / 1000, tz=UTC)
    return BuildLogEntry(timestamp=timestamp, text=text)


class BambooResultClient(CIResultPort):
    """Reads build results, logs and artifacts from a Bamboo server."""

    def __init__(self, http: BambooHttp) -> None:
        self.http = http

    async def fetch_latest_result(self, plan_key: str) -> dict[str, Any]:
        return await self.http.get_json(  # type: ignore[no-any-return]
            _latest_result_path(plan_key), params={"expand": _RESULT_EXPAND}
        )

    async def fetch_latest_build_logs(self, plan_key: str) -> list[BuildLogEntry]:
        body = await self.http.get_json(
            _latest_result_path(plan_key),
            params={"expand": "logEntries", "max-results": MAX_LOG_ENTRIES},
        )
        raw_entries = (body.get("logEntries") or {}).get("logEntry") or []
        entries = [_log_entry(raw) for raw in raw_entries]
        logger.debug("Fetched {} log lines for plan {}", len(entries), plan_key)
        return entries

    async def fetch_latest_artifacts(self, plan_key: str) -> list[ArtifactReference]:
        body = await self.fetch_latest_result(plan_key)
        raw_artifacts = (body.get("artifacts") or {}).get("artifact") or []
        excluded = {BUILD_LOG_ARTIFACT, *STATIC_ANALYSIS_ARTIFACTS}

        references = []
        for artifact in raw_artifacts:
            if artifact.get("name") in excluded:
                continue
            href = (artifact.get("link") or {}).get("href")
            if not href:
                logger.warning("Artifact {} of plan {} has no link", artifact.get("name"), plan_key)
                continue
            references.append(ArtifactReference(location_uri=urljoin(self.http.base_url + "/", href)))
        return references

    async def fetch_build_status(self, plan_key: str) -> BuildStatus:
        body = await self.http.get_json(f"/plan/{plan_key.upper()}.json")
        is_active = bool(body.get("isActive"))
        is_building = bool(body.get("isBuilding"))

        if is_active and is_building:
            return BuildStatus.BUILDING
        if is_active:
            return BuildStatus.QUEUED
        return BuildStatus.INACTIVE

    async def fetch_page(self, uri: str) -> FetchedPage:
        response = await self.http.request("GET", uri)
        content_type = response.headers.get("content-type", "application/octet-stream")
        return FetchedPage(uri=uri, content_type=content_type, body=response.content)
