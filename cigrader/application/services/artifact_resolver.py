import asyncio
import re
import time
from collections.abc import Callable
from urllib.parse import urljoin

from loguru import logger
from tenacity import RetryError

from cigrader.application.services.transient_retry import DEFAULT_FETCH_ATTEMPTS, retry_transient
from cigrader.domain.errors import ArtifactResolutionError, CIRequestError
from cigrader.domain.ports.ci_result_port import ArtifactFetcherPort
from cigrader.domain.value_objects import (
    ArtifactCancelled,
    ArtifactFailureReason,
    ArtifactReference,
    FetchedPage,
    TerminalArtifact,
)

DEFAULT_MAX_HOPS = 10
DEFAULT_HOP_TIMEOUT_S = 10.0

_HREF_PATTERN = re.compile(r'href="(.*?)"', re.IGNORECASE)


def first_link(html: str) -> str | None:
    match = _HREF_PATTERN.search(html)
    return match.group(1) if match else None


class ArtifactResolver:
    """Follows "Index of" listing pages until the actual artifact is reached.

    Each listing page followed counts as one hop. Resolution fails after
    ``max_hops`` hops or when a page is visited twice. Transient fetch
    failures are retried within the hop's timeout.
    """

    def __init__(
        self,
        fetcher: ArtifactFetcherPort,
        max_hops: int = DEFAULT_MAX_HOPS,
        hop_timeout_s: float = DEFAULT_HOP_TIMEOUT_S,
        clock: Callable[[], float] = time.monotonic,
        fetch_attempts: int = DEFAULT_FETCH_ATTEMPTS,
        wait_multiplier: float = 1.0,
    ) -> None:
        self.fetcher = fetcher
        self.max_hops = max_hops
        self.hop_timeout_s = hop_timeout_s
        self._clock = clock
        self._fetch_page = retry_transient(
            fetcher.fetch_page,
            "artifact page",
            attempts=fetch_attempts,
            wait_multiplier=wait_multiplier,
        )

    async def resolve(
        self,
        reference: ArtifactReference,
        deadline: float | None = None,
    ) -> TerminalArtifact | ArtifactCancelled:
        """Resolve reference to its terminal artifact.

        Args:
            reference: Where to start; usually the artifact link of a build.
            deadline: Optional absolute time on this resolver's clock after
                which resolution is abandoned with ArtifactCancelled.

        Raises:
            ArtifactResolutionError: hop limit, cycle, missing link or fetch failure.
        """
        uri = reference.location_uri
        visited: set[str] = set()
        hops = 0

        while True:
            if uri in visited:
                raise ArtifactResolutionError(
                    ArtifactFailureReason.CYCLE, f"{uri} was already visited"
                )
            visited.add(uri)

            timeout = self._hop_budget(deadline)
            if timeout is None:
                logger.info("Artifact resolution cancelled before fetching {}", uri)
                return ArtifactCancelled(last_uri=uri, hops=hops)

            page = await self._fetch(uri, timeout)
            if page is None:
                logger.info("Artifact resolution cancelled while fetching {}", uri)
                return ArtifactCancelled(last_uri=uri, hops=hops)

            if not page.is_directory_listing:
                logger.debug("Resolved artifact {} after {} hops", uri, hops)
                return TerminalArtifact(
                    location_uri=uri,
                    content_type=page.content_type,
                    content=page.body,
                    hops=hops,
                )

            hops += 1
            if hops > self.max_hops:
                raise ArtifactResolutionError(
                    ArtifactFailureReason.HOP_LIMIT,
                    f"more than {self.max_hops} listing pages starting at {reference.location_uri}",
                )

            link = first_link(page.body.decode("utf-8", errors="replace"))
            if link is None:
                raise ArtifactResolutionError(
                    ArtifactFailureReason.NO_LINK, f"no artifact link on page {uri}"
                )
            uri = urljoin(uri, link)

    def _hop_budget(self, deadline: float | None) -> float | None:
        """Timeout for the next fetch, or None if the deadline has passed."""
        if deadline is None:
            return self.hop_timeout_s
        remaining = deadline - self._clock()
        if remaining <= 0:
            return None
        return min(self.hop_timeout_s, remaining)

    async def _fetch(self, uri: str, timeout: float) -> FetchedPage | None:
        try:
            return await asyncio.wait_for(self._fetch_page(uri), timeout=timeout)
        except TimeoutError:
            # A budget below the hop timeout was cut short by the deadline
            if timeout < self.hop_timeout_s:
                return None
            raise ArtifactResolutionError(
                ArtifactFailureReason.UNREACHABLE, f"timed out after {timeout}s fetching {uri}"
            ) from None
        except RetryError as e:
            last = e.last_attempt.exception()
            logger.error(
                "Giving up on artifact page {} after {} attempts: {}",
                uri,
                e.last_attempt.attempt_number,
                last,
            )
            raise ArtifactResolutionError(ArtifactFailureReason.UNREACHABLE, str(last)) from last
        except CIRequestError as e:
            logger.error("Error while retrieving build artifact page {}: {}", uri, e)
            raise ArtifactResolutionError(ArtifactFailureReason.UNREACHABLE, str(e)) from e
