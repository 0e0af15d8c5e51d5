"""Tests for the build notification wire model."""

from datetime import UTC, timedelta

import pytest
from pydantic import ValidationError

from cigrader.domain.value_objects import BuildNotification, FetchedPage


class TestParsing:
    def test_parses_camel_case_payload(self, make_notification, assignment_hash: str) -> None:
        notification = BuildNotification.model_validate(make_notification(total=3, passed=2))

        assert notification.plan_key == "EX1-STUDENT1"
        assert notification.build.test_summary.total_count == 3
        assert notification.build.test_summary.successful_count == 2
        assert notification.assignment_commit_hash == assignment_hash

    def test_missing_plan_key_is_rejected(self, make_notification) -> None:
        payload = make_notification()
        payload["plan"] = {"key": ""}

        with pytest.raises(ValidationError):
            BuildNotification.model_validate(payload)

    def test_missing_test_summary_is_rejected(self, make_notification) -> None:
        payload = make_notification()
        del payload["build"]["testSummary"]

        with pytest.raises(ValidationError):
            BuildNotification.model_validate(payload)

    def test_is_immutable(self, make_notification) -> None:
        notification = BuildNotification.model_validate(make_notification())
        with pytest.raises(ValidationError):
            notification.plan = notification.plan  # type: ignore[misc]


class TestCommitHashes:
    def test_repository_names_are_case_insensitive(self, make_notification) -> None:
        payload = make_notification(assignment_hash=None)
        payload["build"]["vcs"].append({"id": "cafe", "repositoryName": "Assignment"})

        notification = BuildNotification.model_validate(payload)

        assert notification.assignment_commit_hash == "cafe"

    def test_missing_repository_gives_none(self, make_notification) -> None:
        notification = BuildNotification.model_validate(make_notification(tests_hash=None))
        assert notification.tests_commit_hash is None


class TestFirstBuild:
    def test_detects_first_build_marker(self, make_notification) -> None:
        notification = BuildNotification.model_validate(
            make_notification(reason="First build for this plan")
        )
        assert notification.is_first_build()

    @pytest.mark.parametrize("reason", [None, "Changes by student1"])
    def test_other_reasons(self, make_notification, reason: str | None) -> None:
        notification = BuildNotification.model_validate(make_notification(reason=reason))
        assert not notification.is_first_build()


class TestFetchedPage:
    @pytest.mark.parametrize(
        ("content_type", "listing"),
        [
            ("text/html", True),
            ("text/html;charset=UTF-8", True),
            ("TEXT/HTML", True),
            ("application/zip", False),
        ],
    )
    def test_directory_listing_detection(self, content_type: str, listing: bool) -> None:
        page = FetchedPage(uri="https://ci/x", content_type=content_type, body=b"")
        assert page.is_directory_listing is listing


class TestTimestamps:
    def test_completion_date_with_offset(self, make_notification) -> None:
        notification = BuildNotification.model_validate(
            make_notification(completed="2026-10-10T14:00:00+02:00")
        )

        completed = notification.build.build_completed_date
        assert completed.utcoffset() == timedelta(hours=2)
        assert completed.astimezone(UTC).hour == 12

    def test_completion_date_without_offset_is_rejected(self, make_notification) -> None:
        with pytest.raises(ValidationError):
            BuildNotification.model_validate(make_notification(completed="2026-10-10T12:00:00"))

    def test_log_date_without_offset_is_rejected(self, make_notification) -> None:
        payload = make_notification(logs=[{"date": "2026-10-10T12:00:01", "log": "compiling"}])

        with pytest.raises(ValidationError):
            BuildNotification.model_validate(payload)
