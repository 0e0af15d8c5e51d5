from cigrader.application.services.artifact_resolver import ArtifactResolver
from cigrader.application.services.participation_resolver import (
    ParticipationResolver,
    role_from_plan_key,
)
from cigrader.application.services.submission_correlator import (
    SubmissionCorrelator,
    relevant_commit_hash,
)

__all__ = [
    "ArtifactResolver",
    "ParticipationResolver",
    "SubmissionCorrelator",
    "relevant_commit_hash",
    "role_from_plan_key",
]
