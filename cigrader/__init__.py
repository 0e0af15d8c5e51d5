"""Build result ingestion and grading for CI-backed programming exercises."""

__version__ = "0.1.0"
