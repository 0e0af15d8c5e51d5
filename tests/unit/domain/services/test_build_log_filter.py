"""Tests for BuildLogFilter."""

from datetime import UTC, datetime, timedelta

import pytest

from cigrader.domain.entities import BuildLogEntry
from cigrader.domain.services.build_log_filter import CI_WORKING_DIRECTORY, BuildLogFilter


@pytest.fixture
def log_filter() -> BuildLogFilter:
    return BuildLogFilter()


def _entries(lines: list[str]) -> list[BuildLogEntry]:
    start = datetime(2026, 10, 10, 12, 0, tzinfo=UTC)
    return [
        BuildLogEntry(timestamp=start + timedelta(seconds=i), text=line)
        for i, line in enumerate(lines)
    ]


MAVEN_LOG = [
    "[INFO] Scanning for projects...",
    "[INFO] Building exercise 1.0",
    "[WARNING] Using platform encoding UTF-8",
    "[ERROR] COMPILATION ERROR :",
    f"[ERROR] {CI_WORKING_DIRECTORY}EX1-STUDENT1-JOB1/assignment/src/Sort.java:[12,5] ';' expected",
    "[INFO] 1 error",
    "[ERROR] BUILD FAILURE",
    "[ERROR] Failed to execute goal compile",
    "[ERROR] -> [Help 1]",
]


WD = CI_WORKING_DIRECTORY

IDEMPOTENCE_CASES = {
    "compilation marker on a noise line": [
        "[INFO] Compiling 3 source files",
        "[INFO] COMPILATION ERROR :",
        f"{WD}EX1-STUDENT1-JOB1/src/Sort.java:[3,1] error: missing return",
        "[INFO] BUILD FAILURE",
        "[INFO] Total time: 2 s",
        "after the failure",
    ],
    "working directory hiding noise prefixes": [
        f"{WD}[INFO] moved",
        f"[WARNING] {WD}deprecated",
        f"{WD}{WD}Result.java ok",
        "Tests run: 2, Failures: 0",
    ],
    "info lines mentioning errors": [
        "[INFO] 1 error",
        "[ERROR] COMPILATION ERROR :",
        f"[ERROR] {WD}Sort.java:[1] ';' expected",
        "[INFO] BUILD FAILURE",
        "[ERROR] Failed to execute goal",
    ],
    "build failure without compilation error": [
        "[INFO] BUILD FAILURE",
        "[ERROR] BUILD FAILURE",
        "Tests run: 1, Failures: 1",
    ],
    "compilation error after a build failure": [
        "[ERROR] BUILD FAILURE",
        "[ERROR] COMPILATION ERROR",
        "[ERROR] BUILD FAILURE",
        "[ERROR] -> [Help 1]",
        "tail",
    ],
}


class TestNoiseRemoval:
    def test_drops_info_and_warning_lines(self, log_filter: BuildLogFilter) -> None:
        lines = ["[INFO] Downloading", "[WARNING] deprecated", "Tests run: 3, Failures: 1"]
        assert log_filter.filter_lines(lines) == ["Tests run: 3, Failures: 1"]

    def test_keeps_info_lines_mentioning_error(self, log_filter: BuildLogFilter) -> None:
        lines = ["[INFO] 1 error", "[INFO] BUILD SUCCESS"]
        assert log_filter.filter_lines(lines) == ["[INFO] 1 error"]

    def test_warning_lines_mentioning_error_are_still_noise(
        self, log_filter: BuildLogFilter
    ) -> None:
        assert log_filter.filter_lines(["[WARNING] error-prone setting"]) == []

    @pytest.mark.parametrize(
        "line",
        [
            "[ERROR] -> [Help 1]",
            "[ERROR] Re-run Maven using the -X switch to enable full debug logging.",
            "[ERROR] To see the full stack trace of the errors, re-run Maven with the -e switch.",
            "[ERROR] For more information about the errors and possible solutions, please read",
            "Unable to publish artifact [Build log]",
            "NOTE: Picked up JDK_JAVA_OPTIONS: -Dfile.encoding=UTF-8",
        ],
    )
    def test_drops_ci_boilerplate(self, log_filter: BuildLogFilter, line: str) -> None:
        assert log_filter.is_noise(line)

    def test_keeps_real_errors(self, log_filter: BuildLogFilter) -> None:
        assert not log_filter.is_noise("[ERROR] Tests run: 4, Failures: 2")

    def test_strips_working_directory(self, log_filter: BuildLogFilter) -> None:
        line = f"{CI_WORKING_DIRECTORY}EX1-JOB1/assignment/src/Sort.java:12: error"
        assert log_filter.filter_lines([line]) == ["EX1-JOB1/assignment/src/Sort.java:12: error"]


class TestCompilationErrorCutoff:
    def test_stops_after_build_failure(self, log_filter: BuildLogFilter) -> None:
        assert log_filter.filter_lines(MAVEN_LOG) == [
            "[ERROR] COMPILATION ERROR :",
            "[ERROR] EX1-STUDENT1-JOB1/assignment/src/Sort.java:[12,5] ';' expected",
            "[INFO] 1 error",
            "[ERROR] BUILD FAILURE",
        ]

    def test_compilation_error_at_4_and_failure_at_9(self, log_filter: BuildLogFilter) -> None:
        lines = [f"line {i}" for i in range(15)]
        lines[4] = "[ERROR] COMPILATION ERROR :"
        lines[9] = "[ERROR] BUILD FAILURE"

        assert log_filter.filter_lines(lines) == lines[:10]

    def test_build_failure_without_compilation_error_is_kept(
        self, log_filter: BuildLogFilter
    ) -> None:
        lines = ["Tests run: 1, Failures: 1", "[ERROR] BUILD FAILURE", "after failure"]
        assert log_filter.filter_lines(lines) == lines


class TestFilterEntries:
    def test_keeps_timestamps_of_kept_lines(self, log_filter: BuildLogFilter) -> None:
        entries = _entries(["[INFO] noise", "compiling", "[WARNING] noise", "done"])

        filtered = log_filter.filter(entries)

        assert [e.text for e in filtered] == ["compiling", "done"]
        assert [e.timestamp for e in filtered] == [entries[1].timestamp, entries[3].timestamp]

    def test_returns_new_list(self, log_filter: BuildLogFilter) -> None:
        entries = _entries(["kept"])
        filtered = log_filter.filter(entries)
        assert filtered is not entries
        assert filtered == entries

    def test_is_idempotent(self, log_filter: BuildLogFilter) -> None:
        entries = _entries(MAVEN_LOG + ["trailing output"])
        once = log_filter.filter(entries)
        assert log_filter.filter(once) == once

    def test_is_idempotent_on_nested_working_directory(self, log_filter: BuildLogFilter) -> None:
        half = len(CI_WORKING_DIRECTORY) // 2
        nested = (
            CI_WORKING_DIRECTORY[:half] + CI_WORKING_DIRECTORY + CI_WORKING_DIRECTORY[half:] + "x"
        )
        once = log_filter.filter_lines([nested])
        assert once == ["x"]
        assert log_filter.filter_lines(once) == once

    def test_empty_log(self, log_filter: BuildLogFilter) -> None:
        assert log_filter.filter([]) == []


class TestIdempotence:
    @pytest.mark.parametrize(
        "lines", list(IDEMPOTENCE_CASES.values()), ids=list(IDEMPOTENCE_CASES)
    )
    def test_filtering_twice_changes_nothing(
        self, log_filter: BuildLogFilter, lines: list[str]
    ) -> None:
        once = log_filter.filter_lines(lines)
        assert log_filter.filter_lines(once) == once

        entries_once = log_filter.filter(_entries(lines))
        assert log_filter.filter(entries_once) == entries_once
        assert [e.text for e in entries_once] == once

    def test_noise_compilation_marker_still_truncates(self, log_filter: BuildLogFilter) -> None:
        once = log_filter.filter_lines(IDEMPOTENCE_CASES["compilation marker on a noise line"])
        assert once == ["EX1-STUDENT1-JOB1/src/Sort.java:[3,1] error: missing return"]

    def test_stops_at_failure_after_compilation_error(self, log_filter: BuildLogFilter) -> None:
        once = log_filter.filter_lines(IDEMPOTENCE_CASES["compilation error after a build failure"])
        assert once == [
            "[ERROR] BUILD FAILURE",
            "[ERROR] COMPILATION ERROR",
            "[ERROR] BUILD FAILURE",
        ]
