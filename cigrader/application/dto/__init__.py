from cigrader.application.dto.ingest_outcome import GradedBuild, Ignored, IngestOutcome

__all__ = [
    "GradedBuild",
    "Ignored",
    "IngestOutcome",
]
