from collections.abc import Sequence
from dataclasses import dataclass

from cigrader.domain.entities.build_log_entry import BuildLogEntry

CI_WORKING_DIRECTORY = "/opt/bamboo-agent-home/xml-data/build-dir/"

COMPILATION_ERROR_MARKER = "COMPILATION ERROR"
BUILD_FAILURE_MARKER = "BUILD FAILURE"


@dataclass(frozen=True)
class NoiseRule:
    prefix: str
    # Lines that also mention "error" are kept
    keep_if_error: bool = False


NOISE_RULES = [
    NoiseRule("[INFO]", keep_if_error=True),
    NoiseRule("[WARNING]"),
    # Maven footer hints
    NoiseRule("[ERROR] [Help 1]"),
    NoiseRule("[ERROR] For more information about the errors and possible solutions"),
    NoiseRule("[ERROR] Re-run Maven using"),
    NoiseRule("[ERROR] To see the full stack trace of the errors"),
    NoiseRule("[ERROR] -> [Help 1]"),
    # Environment notices
    NoiseRule("Unable to publish artifact"),
    NoiseRule("NOTE: Picked up JDK_JAVA_OPTIONS"),
]


class BuildLogFilter:
    """Removes noise from build logs so students see the relevant output.

    Applying the filter to its own output returns that output unchanged, so
    redelivered notifications always store the same log.
    """

    def __init__(
        self,
        noise_rules: list[NoiseRule] | None = None,
        working_directory: str = CI_WORKING_DIRECTORY,
    ) -> None:
        self._noise_rules = noise_rules if noise_rules is not None else NOISE_RULES
        self._working_directory = working_directory

    def filter(self, entries: Sequence[BuildLogEntry]) -> list[BuildLogEntry]:
        """Return a new list with the filtered entries."""
        return [
            entries[index].model_copy(update={"text": text})
            for index, text in self._kept_lines([e.text for e in entries])
        ]

    def filter_lines(self, lines: Sequence[str]) -> list[str]:
        """Filter plain text lines (no timestamps)."""
        return [text for _, text in self._kept_lines(lines)]

    def _kept_lines(self, lines: Sequence[str]) -> list[tuple[int, str]]:
        kept: list[tuple[int, str]] = []
        compilation_error_seen = False

        for index, line in enumerate(lines):
            text = self.strip_working_directory(line)

            if COMPILATION_ERROR_MARKER in text:
                compilation_error_seen = True

            if compilation_error_seen and BUILD_FAILURE_MARKER in text:
                # The failure section repeats the compilation errors, stop here
                if not self.is_noise(text):
                    kept.append((index, text))
                break

            if not self.is_noise(text):
                kept.append((index, text))

        return kept

    def is_noise(self, text: str) -> bool:
        for rule in self._noise_rules:
            if text.startswith(rule.prefix):
                if rule.keep_if_error and "error" in text:
                    return False
                return True
        return False

    def strip_working_directory(self, text: str) -> str:
        # Loop: removing one occurrence can join the pieces of another
        while self._working_directory in text:
            text = text.replace(self._working_directory, "")
        return text
