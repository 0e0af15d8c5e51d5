"""Builds the collaborators a command needs from settings."""

from pathlib import Path

from cigrader.infrastructure.ci.bamboo_admin_client import BambooAdminClient
from cigrader.infrastructure.ci.bamboo_http import BambooHttp
from cigrader.infrastructure.ci.bamboo_result_client import BambooResultClient
from cigrader.infrastructure.config.settings import GradingSettings, load_settings
from cigrader.infrastructure.persistence.json_grading_store import JsonGradingStore


def settings_for(config: Path | None, state_dir: Path | None = None) -> GradingSettings:
    settings = load_settings(config)
    if state_dir is not None:
        settings = settings.model_copy(update={"state_dir": state_dir})
    return settings


def grading_store(settings: GradingSettings) -> JsonGradingStore:
    return JsonGradingStore(settings.state_dir)


def bamboo_http(settings: GradingSettings) -> BambooHttp:
    url, user, password = settings.require_ci()
    return BambooHttp(url, user, password)


def result_client(settings: GradingSettings) -> BambooResultClient:
    return BambooResultClient(bamboo_http(settings))


def admin_client(settings: GradingSettings) -> BambooAdminClient:
    return BambooAdminClient(bamboo_http(settings))
