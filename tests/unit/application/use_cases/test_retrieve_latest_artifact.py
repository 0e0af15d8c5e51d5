"""Tests for RetrieveLatestArtifact use case."""

from unittest.mock import AsyncMock

import pytest

from cigrader.application.use_cases.retrieve_latest_artifact import RetrieveLatestArtifact
from cigrader.domain.errors import ArtifactResolutionError, CIRequestError, TransientIOError
from cigrader.domain.value_objects import (
    ArtifactFailureReason,
    ArtifactReference,
    FetchedPage,
    TerminalArtifact,
)

JAR_URI = "https://ci.example.org/download/EX1-STUDENT1-JOB1/build-5/jar/sorting.jar"


@pytest.fixture
def mock_ci() -> AsyncMock:
    return AsyncMock()


class TestRetrieveLatestArtifact:
    @pytest.mark.asyncio
    async def test_no_artifacts(self, mock_ci: AsyncMock) -> None:
        mock_ci.fetch_latest_artifacts.return_value = []

        with pytest.raises(ArtifactResolutionError) as exc_info:
            await RetrieveLatestArtifact(mock_ci).execute("EX1-STUDENT1")

        assert exc_info.value.reason == ArtifactFailureReason.NO_ARTIFACT

    @pytest.mark.asyncio
    async def test_resolves_first_artifact(self, mock_ci: AsyncMock) -> None:
        mock_ci.fetch_latest_artifacts.return_value = [
            ArtifactReference(location_uri=JAR_URI),
            ArtifactReference(location_uri=JAR_URI + ".sig"),
        ]
        mock_ci.fetch_page.return_value = FetchedPage(
            uri=JAR_URI, content_type="application/java-archive", body=b"PK"
        )

        outcome = await RetrieveLatestArtifact(mock_ci).execute("EX1-STUDENT1")

        assert isinstance(outcome, TerminalArtifact)
        assert outcome.content == b"PK"
        mock_ci.fetch_page.assert_awaited_once_with(JAR_URI)

    @pytest.mark.asyncio
    async def test_retries_transient_artifact_list_failure(self, mock_ci: AsyncMock) -> None:
        mock_ci.fetch_latest_artifacts.side_effect = [
            TransientIOError("GET latest.json returned 503"),
            [ArtifactReference(location_uri=JAR_URI)],
        ]
        mock_ci.fetch_page.return_value = FetchedPage(
            uri=JAR_URI, content_type="application/java-archive", body=b"PK"
        )

        outcome = await RetrieveLatestArtifact(mock_ci, wait_multiplier=0).execute("EX1-STUDENT1")

        assert isinstance(outcome, TerminalArtifact)
        assert mock_ci.fetch_latest_artifacts.await_count == 2

    @pytest.mark.asyncio
    async def test_artifact_list_unreachable_after_retries(self, mock_ci: AsyncMock) -> None:
        mock_ci.fetch_latest_artifacts.side_effect = TransientIOError("GET latest.json returned 503")

        use_case = RetrieveLatestArtifact(mock_ci, attempts=2, wait_multiplier=0)
        with pytest.raises(ArtifactResolutionError) as exc_info:
            await use_case.execute("EX1-STUDENT1")

        assert exc_info.value.reason == ArtifactFailureReason.UNREACHABLE
        assert mock_ci.fetch_latest_artifacts.await_count == 2
        mock_ci.fetch_page.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejected_artifact_list_is_not_retried(self, mock_ci: AsyncMock) -> None:
        mock_ci.fetch_latest_artifacts.side_effect = CIRequestError("forbidden", status_code=403)

        with pytest.raises(ArtifactResolutionError) as exc_info:
            await RetrieveLatestArtifact(mock_ci, wait_multiplier=0).execute("EX1-STUDENT1")

        assert exc_info.value.reason == ArtifactFailureReason.UNREACHABLE
        assert mock_ci.fetch_latest_artifacts.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_transient_page_failure(self, mock_ci: AsyncMock) -> None:
        mock_ci.fetch_latest_artifacts.return_value = [ArtifactReference(location_uri=JAR_URI)]
        mock_ci.fetch_page.side_effect = [
            TransientIOError(f"GET {JAR_URI} returned 503"),
            FetchedPage(uri=JAR_URI, content_type="application/java-archive", body=b"PK"),
        ]

        outcome = await RetrieveLatestArtifact(mock_ci, wait_multiplier=0).execute("EX1-STUDENT1")

        assert isinstance(outcome, TerminalArtifact)
        assert mock_ci.fetch_page.await_count == 2
