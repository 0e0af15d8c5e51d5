from cigrader.infrastructure.ci.bamboo_admin_client import BambooAdminClient
from cigrader.infrastructure.ci.bamboo_http import BambooHttp
from cigrader.infrastructure.ci.bamboo_result_client import BambooResultClient

__all__ = ["BambooAdminClient", "BambooHttp", "BambooResultClient"]
