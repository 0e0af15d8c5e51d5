"""Service configuration loaded from a JSON file.

Default location is ``~/.cigrader/config.json``. Every field may be omitted;
collaborators that need a missing value fail at wiring time with
ConfigurationError.
"""

import json
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, SecretStr, ValidationError

from cigrader.domain.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path.home() / ".cigrader" / "config.json"
DEFAULT_STATE_DIR = Path.home() / ".cigrader" / "state"


class GradingSettings(BaseModel):
    ci_url: str | None = None
    ci_user: str | None = None
    ci_password: SecretStr | None = None
    webhook_secret: SecretStr | None = None
    state_dir: Path = DEFAULT_STATE_DIR
    max_artifact_hops: int = Field(default=10, ge=1)
    artifact_hop_timeout_s: float = Field(default=10.0, gt=0)
    artifact_fetch_attempts: int = Field(default=3, ge=1)
    log_fetch_attempts: int = Field(default=3, ge=1)

    def require_ci(self) -> tuple[str, str, str]:
        """Return (url, user, password) or raise ConfigurationError."""
        url, user, password = self.ci_url, self.ci_user, self.ci_password
        if url and user and password:
            return url, user, password.get_secret_value()

        missing = [
            name
            for name, value in (("ci_url", url), ("ci_user", user), ("ci_password", password))
            if not value
        ]
        raise ConfigurationError(f"CI server not configured, missing: {', '.join(missing)}")

    def require_webhook_secret(self) -> str:
        if self.webhook_secret is None or not self.webhook_secret.get_secret_value():
            raise ConfigurationError("webhook_secret is not configured")
        return self.webhook_secret.get_secret_value()


def load_settings(path: Path | None = None) -> GradingSettings:
    """Load settings from path, falling back to defaults if it does not exist."""
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path is not None:
            raise ConfigurationError(f"Config file not found: {config_path}")
        logger.debug("No config at {}, using defaults", config_path)
        return GradingSettings()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
        return GradingSettings.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e
