from abc import ABC, abstractmethod

from cigrader.domain.entities.build_log_entry import BuildLogEntry
from cigrader.domain.value_objects import ArtifactReference, BuildStatus, FetchedPage


class ArtifactFetcherPort(ABC):
    """Port for fetching a single page while following artifact links."""

    @abstractmethod
    async def fetch_page(self, uri: str) -> FetchedPage:
        """Fetch the resource at uri.

        Raises TransientIOError or CIRequestError when the resource cannot
        be fetched.
        """


class CIResultPort(ArtifactFetcherPort):
    """Read-only access to build results on the CI server."""

    @abstractmethod
    async def fetch_latest_build_logs(self, plan_key: str) -> list[BuildLogEntry]:
        """Return the raw (unfiltered) log of the plan's latest build."""

    @abstractmethod
    async def fetch_latest_artifacts(self, plan_key: str) -> list[ArtifactReference]:
        """Return the shared artifacts of the plan's latest build.

        Build logs and static analysis reports are not included.
        """

    @abstractmethod
    async def fetch_build_status(self, plan_key: str) -> BuildStatus:
        """Return whether the plan is idle, queued or building."""
