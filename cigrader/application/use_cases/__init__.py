from cigrader.application.use_cases.fetch_build_logs import FetchBuildLogs
from cigrader.application.use_cases.process_build_notification import ProcessBuildNotification
from cigrader.application.use_cases.retrieve_latest_artifact import RetrieveLatestArtifact

__all__ = [
    "FetchBuildLogs",
    "ProcessBuildNotification",
    "RetrieveLatestArtifact",
]
