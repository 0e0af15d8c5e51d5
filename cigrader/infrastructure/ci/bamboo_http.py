"""Shared HTTP plumbing for the Bamboo REST clients."""

from typing import Any

import httpx
from loguru import logger

from cigrader.domain.errors import CIRequestError, TransientIOError

API_PATH = "/rest/api/latest"
DEFAULT_TIMEOUT_S = 30.0


class BambooHttp:
    """Authenticated access to the Bamboo REST API.

    Transport failures and 5xx responses become TransientIOError, other
    error responses CIRequestError.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(username, password)
        self._timeout = timeout_s
        self._transport = transport

    def api_url(self, path: str) -> str:
        return f"{self.base_url}{API_PATH}{path}"

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=self._auth,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        accept: tuple[int, ...] = (),
    ) -> httpx.Response:
        """Send a request, returning the response if it succeeded.

        Status codes in ``accept`` are returned instead of raising.
        """
        try:
            async with self.client() as http:
                response = await http.request(method, url, params=params, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.warning("{} {} failed: {}", method, url, e)
            raise TransientIOError(f"{method} {url} failed: {e}") from e

        if response.status_code in accept or response.is_success:
            return response
        if response.is_server_error:
            raise TransientIOError(f"{method} {url} returned {response.status_code}")
        raise CIRequestError(
            f"{method} {url} returned {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self.request(
            "GET", self.api_url(path), params=params, headers={"Accept": "application/json"}
        )
        return response.json()
