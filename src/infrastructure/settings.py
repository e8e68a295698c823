"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults.
"""

import os
from typing import Optional

from src.infrastructure.config_manager import AppConfig, get_app_config

# Application metadata
APP_NAME = "Bundle-Sentinel"
APP_VERSION = "1.0.0"

# Default API bind address
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


class Settings:
    """Application settings loaded from configuration manager and environment.

    This class provides a unified interface for accessing application settings,
    combining values from the configuration manager with environment variables
    and sensible defaults.
    """

    def __init__(self):
        """Initialize settings from environment."""
        self._app_config: Optional[AppConfig] = None

        # Application settings from environment
        self.app_name = os.getenv("BS_APP_NAME", APP_NAME)
        self.version = APP_VERSION
        self.config_file = os.getenv("BS_CONFIG_FILE") or None

        # Logging
        self.log_level = os.getenv("BS_LOG_LEVEL", "INFO")
        self.json_logs = os.getenv("BS_JSON_LOGS", "false").lower() == "true"

        # API server
        self.host = os.getenv("BS_HOST", DEFAULT_HOST)
        self.port = int(os.getenv("BS_PORT", str(DEFAULT_PORT)))

    @property
    def app_config(self) -> AppConfig:
        """Get terminology and validation configuration.

        Returns:
            AppConfig loaded from BS_CONFIG_FILE if set, otherwise from the
            environment. Loaded lazily on first access.
        """
        if self._app_config is None:
            self._app_config = get_app_config(self.config_file)
        return self._app_config


# Global settings instance
settings = Settings()
