from cigrader.domain.ports.broadcaster_port import NotificationBroadcasterPort
from cigrader.domain.ports.ci_admin_port import CIAdminPort, CIHealth, CIPermission
from cigrader.domain.ports.ci_result_port import ArtifactFetcherPort, CIResultPort
from cigrader.domain.ports.grading_store_port import GradingStorePort
from cigrader.domain.ports.participation_repo_port import ParticipationRepoPort
from cigrader.domain.ports.submission_repo_port import SubmissionRepoPort

__all__ = [
    # CI server
    "ArtifactFetcherPort",
    "CIAdminPort",
    "CIHealth",
    "CIPermission",
    "CIResultPort",
    # Persistence
    "GradingStorePort",
    "ParticipationRepoPort",
    "SubmissionRepoPort",
    # Notifications
    "NotificationBroadcasterPort",
]
