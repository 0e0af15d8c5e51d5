import httpx
from loguru import logger

from cigrader.domain.errors import CIRequestError, TransientIOError
from cigrader.domain.ports.ci_admin_port import CIAdminPort, CIHealth, CIPermission
from cigrader.infrastructure.ci.bamboo_http import BambooHttp

DEFAULT_ROLES = ("ANONYMOUS", "LOGGED_IN")

_UNCHANGED = (httpx.codes.NO_CONTENT, httpx.codes.NOT_MODIFIED)


def bamboo_permission(permission: CIPermission) -> str:
    match permission:
        case CIPermission.EDIT:
            return "WRITE"
        case CIPermission.CREATE:
            return "CREATE"
        case CIPermission.READ:
            return "READ"
        case CIPermission.ADMIN:
            return "ADMINISTRATION"


class BambooAdminClient(CIAdminPort):
    """Build plan and project administration on a Bamboo server."""

    def __init__(self, http: BambooHttp) -> None:
        self.http = http

    async def enable_plan(self, plan_key: str) -> None:
        logger.debug("Enable build plan {}", plan_key)
        await self.http.request("POST", self.http.api_url(f"/plan/{plan_key}/enable"))
        logger.info("Enabled build plan {}", plan_key)

    async def is_plan_enabled(self, plan_key: str) -> bool:
        plan = await self.http.get_json(f"/plan/{plan_key}")
        return bool(plan.get("enabled", False))

    async def trigger_build(self, plan_key: str) -> None:
        await self.http.request("POST", self.http.api_url(f"/queue/{plan_key}"))
        logger.info("Triggered build of plan {}", plan_key)

    async def delete_plan(self, plan_key: str) -> None:
        await self.http.request("DELETE", self.http.api_url(f"/plan/{plan_key}"))
        logger.info("Deleted build plan {}", plan_key)

    async def delete_project(self, project_key: str) -> None:
        await self.http.request("DELETE", self.http.api_url(f"/project/{project_key}"))
        logger.info("Deleted CI project {}", project_key)

    async def give_project_permissions(
        self,
        project_key: str,
        groups: list[str],
        permissions: list[CIPermission],
    ) -> None:
        payload = [bamboo_permission(p) for p in permissions]
        for group in groups:
            url = self.http.api_url(f"/permissions/project/{project_key}/groups/{group}")
            response = await self.http.request("PUT", url, json=payload, accept=_UNCHANGED)
            if response.status_code not in _UNCHANGED:
                raise CIRequestError(
                    f"Unable to give permissions to project {project_key} for group {group}: "
                    f"status {response.status_code}",
                    status_code=response.status_code,
                )
        logger.info("Granted {} on project {} to {}", ", ".join(payload), project_key, groups)

    async def remove_default_project_permissions(self, project_key: str) -> None:
        # Bamboo always grants read access to these roles
        payload = [bamboo_permission(CIPermission.READ)]
        for role in DEFAULT_ROLES:
            url = self.http.api_url(f"/permissions/project/{project_key}/roles/{role}")
            response = await self.http.request("DELETE", url, json=payload, accept=_UNCHANGED)
            if response.status_code not in _UNCHANGED:
                raise CIRequestError(
                    f"Unable to remove default project permissions from {project_key}: "
                    f"status {response.status_code}",
                    status_code=response.status_code,
                )

    async def plan_exists(self, plan_key: str) -> bool:
        try:
            await self.http.get_json(f"/plan/{plan_key.upper()}")
        except CIRequestError:
            return False
        return True

    async def check_project_exists(self, project_key: str, project_name: str) -> str | None:
        try:
            await self.http.get_json(f"/project/{project_key}")
        except CIRequestError as e:
            if e.status_code != httpx.codes.NOT_FOUND:
                return (
                    "The project already exists on the Continuous Integration Server. "
                    "Please choose a different title and short name!"
                )
        else:
            logger.warning("CI project {} already exists", project_key)
            return (
                f"The project {project_key} already exists in the CI Server. "
                "Please choose a different short name!"
            )

        found = await self.http.get_json("/search/projects", params={"searchTerm": project_name})
        for hit in found.get("searchResults") or []:
            name = (hit.get("searchEntity") or {}).get("projectName", "")
            if name.lower() == project_name.lower():
                logger.warning("CI project with name {} already exists", project_name)
                return (
                    f"The project {project_name} already exists in the CI Server. "
                    "Please choose a different title!"
                )
        return None

    async def health(self) -> CIHealth:
        try:
            server = await self.http.get_json("/server")
        except (TransientIOError, CIRequestError) as e:
            return CIHealth(is_up=False, url=self.http.base_url, error=str(e))
        return CIHealth(is_up=server.get("state") == "RUNNING", url=self.http.base_url)
