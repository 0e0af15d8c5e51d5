from cigrader.infrastructure.persistence.json_grading_store import JsonGradingStore

__all__ = ["JsonGradingStore"]
