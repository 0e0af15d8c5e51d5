from cigrader.infrastructure.config.settings import GradingSettings, load_settings

__all__ = ["GradingSettings", "load_settings"]
