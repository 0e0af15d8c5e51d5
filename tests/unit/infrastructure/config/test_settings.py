"""Tests for GradingSettings loading."""

import json
from pathlib import Path

import pytest

from cigrader.domain.errors import ConfigurationError
from cigrader.infrastructure.config.settings import GradingSettings, load_settings


class TestLoadSettings:
    def test_loads_json_file(self, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text(
            json.dumps(
                {
                    "ci_url": "https://bamboo.example.org",
                    "ci_user": "grader",
                    "ci_password": "pw",
                    "webhook_secret": "token",
                    "state_dir": str(tmp_path / "state"),
                    "max_artifact_hops": 5,
                    "artifact_fetch_attempts": 4,
                }
            )
        )

        settings = load_settings(config)

        assert settings.require_ci() == ("https://bamboo.example.org", "grader", "pw")
        assert settings.require_webhook_secret() == "token"
        assert settings.state_dir == tmp_path / "state"
        assert settings.max_artifact_hops == 5
        assert settings.artifact_fetch_attempts == 4
        assert "'pw'" not in repr(settings)

    def test_explicit_missing_file_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        "invalid",
        [{"max_artifact_hops": 0}, {"artifact_fetch_attempts": 0}, {"log_fetch_attempts": 0}],
    )
    def test_invalid_values_are_an_error(self, tmp_path: Path, invalid: dict) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps(invalid))

        with pytest.raises(ConfigurationError):
            load_settings(config)

    def test_malformed_json_is_an_error(self, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text("{")

        with pytest.raises(ConfigurationError):
            load_settings(config)


class TestRequire:
    def test_missing_ci_settings(self) -> None:
        with pytest.raises(ConfigurationError, match="ci_user, ci_password"):
            GradingSettings(ci_url="https://bamboo.example.org").require_ci()

    def test_missing_webhook_secret(self) -> None:
        with pytest.raises(ConfigurationError):
            GradingSettings().require_webhook_secret()

    def test_defaults(self) -> None:
        settings = GradingSettings()
        assert settings.max_artifact_hops == 10
        assert settings.artifact_fetch_attempts == 3
        assert settings.log_fetch_attempts == 3
