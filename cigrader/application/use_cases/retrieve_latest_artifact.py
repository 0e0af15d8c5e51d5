from loguru import logger
from tenacity import RetryError

from cigrader.application.services.artifact_resolver import ArtifactResolver
from cigrader.application.services.transient_retry import DEFAULT_FETCH_ATTEMPTS, retry_transient
from cigrader.domain.errors import ArtifactResolutionError, CIRequestError
from cigrader.domain.ports.ci_result_port import CIResultPort
from cigrader.domain.value_objects import (
    ArtifactCancelled,
    ArtifactFailureReason,
    ArtifactReference,
    TerminalArtifact,
)


class RetrieveLatestArtifact:
    def __init__(
        self,
        ci_results: CIResultPort,
        resolver: ArtifactResolver | None = None,
        attempts: int = DEFAULT_FETCH_ATTEMPTS,
        wait_multiplier: float = 1.0,
    ) -> None:
        self.ci_results = ci_results
        self.resolver = resolver or ArtifactResolver(
            ci_results, fetch_attempts=attempts, wait_multiplier=wait_multiplier
        )
        self._fetch_artifacts = retry_transient(
            ci_results.fetch_latest_artifacts,
            "artifact list",
            attempts=attempts,
            wait_multiplier=wait_multiplier,
        )

    async def execute(
        self,
        plan_key: str,
        deadline: float | None = None,
    ) -> TerminalArtifact | ArtifactCancelled:
        """Download the first artifact published by the plan's latest build.

        Raises ArtifactResolutionError: NO_ARTIFACT if the build published
        none, UNREACHABLE if the artifact list could not be fetched.
        """
        artifacts = await self._artifact_list(plan_key)
        if not artifacts:
            raise ArtifactResolutionError(
                ArtifactFailureReason.NO_ARTIFACT,
                f"latest build of plan {plan_key} has no artifacts",
            )

        outcome = await self.resolver.resolve(artifacts[0], deadline)
        if isinstance(outcome, TerminalArtifact):
            logger.info(
                "Retrieved artifact of plan {} from {} ({} bytes)",
                plan_key,
                outcome.location_uri,
                len(outcome.content),
            )
        return outcome

    async def _artifact_list(self, plan_key: str) -> list[ArtifactReference]:
        try:
            return await self._fetch_artifacts(plan_key)
        except RetryError as e:
            last = e.last_attempt.exception()
            logger.error(
                "Giving up on artifacts of plan {} after {} attempts: {}",
                plan_key,
                e.last_attempt.attempt_number,
                last,
            )
            raise ArtifactResolutionError(ArtifactFailureReason.UNREACHABLE, str(last)) from last
        except CIRequestError as e:
            logger.error("Error while listing artifacts of plan {}: {}", plan_key, e)
            raise ArtifactResolutionError(ArtifactFailureReason.UNREACHABLE, str(e)) from e
