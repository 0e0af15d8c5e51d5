from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel


class CIPermission(str, Enum):
    CREATE = "create"
    READ = "read"
    EDIT = "edit"
    ADMIN = "admin"


class CIHealth(BaseModel, frozen=True):
    is_up: bool
    url: str
    error: str | None = None


class CIAdminPort(ABC):
    """Plan lifecycle operations. Used by setup and teardown, never by ingestion."""

    @abstractmethod
    async def enable_plan(self, plan_key: str) -> None:
        """Enable a disabled build plan."""

    @abstractmethod
    async def is_plan_enabled(self, plan_key: str) -> bool:
        """Check whether the plan is enabled."""

    @abstractmethod
    async def trigger_build(self, plan_key: str) -> None:
        """Queue a build of the plan."""

    @abstractmethod
    async def delete_plan(self, plan_key: str) -> None:
        """Delete a build plan."""

    @abstractmethod
    async def delete_project(self, project_key: str) -> None:
        """Delete a CI project with all its plans."""

    @abstractmethod
    async def give_project_permissions(
        self,
        project_key: str,
        groups: list[str],
        permissions: list[CIPermission],
    ) -> None:
        """Grant permissions on a project to user groups."""

    @abstractmethod
    async def remove_default_project_permissions(self, project_key: str) -> None:
        """Revoke the permissions the CI server grants anonymous and logged-in users."""

    @abstractmethod
    async def plan_exists(self, plan_key: str) -> bool:
        """Check whether the plan exists and is accessible."""

    @abstractmethod
    async def check_project_exists(self, project_key: str, project_name: str) -> str | None:
        """Return an error message if the key or name is taken, None otherwise."""

    @abstractmethod
    async def health(self) -> CIHealth:
        """Report whether the CI server is reachable and running."""
