"""Configuration Manager for the BA Survey app."""
import os
from typing import Optional

from appdirs import user_data_dir
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.schemas import RenderOptions, DEFAULT_ORGANIZATIONAL_UNIT


def default_export_dir():
    """Exports go next to the app's local data unless overridden."""
    return os.path.join(user_data_dir('SiteSurvey', 'SiteSurvey'), 'exports')


class ConfigManager(BaseSettings):
    """Manages application configuration settings using Pydantic BaseSettings."""

    # Document settings
    organizational_unit_name: str = DEFAULT_ORGANIZATIONAL_UNIT

    # Export settings
    export_dir: str = ''
    share_dialog_title: str = 'BA Survey PDF'
    share_mime_type: str = 'text/html'

    # Logging; unset falls through to LOG_LEVEL, then INFO
    log_level: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix='SURVEY_', case_sensitive=False)

    def __init__(self, **kwargs):
        """Initialize config and resolve the platform export directory."""
        super().__init__(**kwargs)
        if not self.export_dir:
            self.export_dir = default_export_dir()

    def render_options(self):
        """Build the presentation options for the document composer."""
        return RenderOptions(organizational_unit_name=self.organizational_unit_name)

    def get(self, key, default=None):
        """Get a configuration value (backward compatibility)."""
        return getattr(self, key, default)

    def set(self, key, value):
        """Set a configuration value (backward compatibility)."""
        setattr(self, key, value)

    def get_all(self):
        """Get all configuration values as dictionary."""
        return self.model_dump()
