"""Domain services."""

from cigrader.domain.services.build_log_filter import NOISE_RULES, BuildLogFilter, NoiseRule
from cigrader.domain.services.rating_policy import is_rated
from cigrader.domain.services.result_builder import ResultBuilder

__all__ = [
    "BuildLogFilter",
    "NOISE_RULES",
    "NoiseRule",
    "ResultBuilder",
    "is_rated",
]
