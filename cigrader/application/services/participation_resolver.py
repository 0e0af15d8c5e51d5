from loguru import logger

from cigrader.domain.entities.participation import Participation
from cigrader.domain.errors import ParticipationNotFoundError
from cigrader.domain.ports.participation_repo_port import ParticipationRepoPort
from cigrader.domain.value_objects import ParticipationRole
from cigrader.domain.value_objects.repository_names import (
    SOLUTION_PLAN_SUFFIX,
    TEMPLATE_PLAN_SUFFIX,
)


def role_from_plan_key(plan_key: str) -> ParticipationRole:
    """Derive the participation role from the plan key suffix.

    ``PROJECT-BASE`` is the template plan, ``PROJECT-SOLUTION`` the solution
    plan, every other suffix (usually a student login) a student plan.
    """
    suffix = plan_key.rsplit("-", 1)[-1].upper()
    if suffix == TEMPLATE_PLAN_SUFFIX:
        return ParticipationRole.TEMPLATE
    if suffix == SOLUTION_PLAN_SUFFIX:
        return ParticipationRole.SOLUTION
    return ParticipationRole.STUDENT


def _recency_key(participation: Participation) -> tuple[bool, float, int]:
    initialized = participation.initialized_at
    return (
        initialized is not None,
        initialized.timestamp() if initialized is not None else 0.0,
        participation.id,
    )


class ParticipationResolver:
    def __init__(self, participation_repo: ParticipationRepoPort) -> None:
        self.participation_repo = participation_repo

    async def resolve(self, plan_key: str) -> Participation:
        """Find the participation a build plan belongs to.

        Raises ParticipationNotFoundError if no participation of the role
        encoded in the plan key is bound to it.
        """
        role = role_from_plan_key(plan_key)
        candidates = [
            p for p in await self.participation_repo.find_by_plan_key(plan_key) if p.role == role
        ]

        match role:
            case ParticipationRole.TEMPLATE | ParticipationRole.SOLUTION:
                return self._single(plan_key, role, candidates)
            case ParticipationRole.STUDENT:
                return self._latest_student(plan_key, candidates)

    def _single(
        self,
        plan_key: str,
        role: ParticipationRole,
        candidates: list[Participation],
    ) -> Participation:
        if not candidates:
            raise ParticipationNotFoundError(plan_key)
        if len(candidates) > 1:
            # Exercise-level plans are unique; pick deterministically anyway
            logger.error(
                "{} {} participations share plan {}, using id {}",
                len(candidates),
                role.value,
                plan_key,
                max(p.id for p in candidates),
            )
            return max(candidates, key=lambda p: p.id)
        return candidates[0]

    def _latest_student(self, plan_key: str, candidates: list[Participation]) -> Participation:
        if not candidates:
            raise ParticipationNotFoundError(plan_key)
        chosen = max(candidates, key=_recency_key)
        if len(candidates) > 1:
            # Happens when a plan is regenerated while the old binding still exists
            logger.warning(
                "{} student participations share plan {} ({}), using latest initialized id {}",
                len(candidates),
                plan_key,
                ", ".join(str(p.id) for p in candidates),
                chosen.id,
            )
        return chosen
