"""Configuration Manager for the Validation Service.

This module loads the process-wide configuration: where the terminology
service lives, how it is queried, and which validation rules apply. The
configuration is loaded once at startup into immutable Pydantic models and
passed into each component's constructor.

Architecture:
    - Follows Hexagonal Architecture: Infrastructure layer isolated from domain
    - Supports environment variables (with optional .env file) and JSON files
    - Type-safe configuration using Pydantic models
    - Fail-fast validation prevents runtime errors
"""

import json
import os
import logging
from pathlib import Path
from typing import Optional, Dict, Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError as PydanticValidationError

from src.domain.constants import REQUIRED_RESOURCE_TYPES, SNOMED_SYSTEM
from src.domain.enums import TerminologyMode
from src.domain.ports import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TERMINOLOGY_BASE_URL = "http://snowstorm:8080"
DEFAULT_BRANCH = "MAIN"
DEFAULT_TIMEOUT_SECONDS = 5.0


class TerminologyConfig(BaseModel):
    """Terminology service connection settings.

    Parameters:
        base_url: Root URL of the Snowstorm server (without the /fhir suffix)
        branch: SNOMED CT branch used by the native lookup mode
            (e.g. MAIN or MAIN/SNOMEDCT-US)
        mode: Which lookup the validator uses for every code
        timeout_seconds: Bound on each remote call; a timeout counts as invalid
        max_workers: Concurrent lookups per document (1 = sequential)
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=DEFAULT_TERMINOLOGY_BASE_URL, description="Snowstorm root URL")
    branch: str = Field(default=DEFAULT_BRANCH, description="SNOMED CT branch (native mode)")
    mode: TerminologyMode = Field(default=TerminologyMode.VALIDATE_CODE, description="Lookup mode")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="Request timeout")
    max_workers: int = Field(default=1, ge=1, le=64, description="Concurrent lookups per document")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Terminology base URL must start with http:// or https://: {v}")
        return v.rstrip("/")

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, v: str) -> str:
        v = v.strip().strip("/")
        if not v:
            raise ValueError("Branch must not be empty")
        return v


class ValidationRules(BaseModel):
    """Validation constants applied to every document.

    Parameters:
        target_system: Coding-system URI whose codes are checked remotely
        required_types: Resource types every Bundle must contain, in
            reporting order
    """

    model_config = ConfigDict(frozen=True)

    target_system: str = Field(default=SNOMED_SYSTEM, description="Coding-system URI")
    required_types: tuple[str, ...] = Field(default=REQUIRED_RESOURCE_TYPES, description="Required resource types")

    @field_validator("required_types")
    @classmethod
    def validate_required_types(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("At least one required resource type must be configured")
        if any(not t or not t.strip() for t in v):
            raise ValueError("Required resource types must be non-empty strings")
        return tuple(dict.fromkeys(t.strip() for t in v))


class AppConfig(BaseModel):
    """Complete, immutable service configuration."""

    model_config = ConfigDict(frozen=True)

    terminology: TerminologyConfig = Field(default_factory=TerminologyConfig)
    validation: ValidationRules = Field(default_factory=ValidationRules)


class ConfigManager:
    """Configuration manager for terminology and validation settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment().get_app_config()

        # Load from file
        config = ConfigManager.from_file("config.json").get_app_config()
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary with optional
                "terminology" and "validation" sections
        """
        self._config_data = config_data
        self._app_config: Optional[AppConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - BS_TERMINOLOGY_BASE_URL: Snowstorm root URL
            - BS_TERMINOLOGY_BRANCH: SNOMED CT branch (native mode)
            - BS_TERMINOLOGY_MODE: "validate-code" or "native"
            - BS_TERMINOLOGY_TIMEOUT: Request timeout in seconds
            - BS_TERMINOLOGY_MAX_WORKERS: Concurrent lookups per document

        A .env file in the project root is loaded first if present. Validation
        rules are constants and cannot be set from the environment.

        Returns:
            ConfigManager instance
        """
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        terminology: Dict[str, Any] = {}
        env_map = {
            "base_url": "BS_TERMINOLOGY_BASE_URL",
            "branch": "BS_TERMINOLOGY_BRANCH",
            "mode": "BS_TERMINOLOGY_MODE",
            "timeout_seconds": "BS_TERMINOLOGY_TIMEOUT",
            "max_workers": "BS_TERMINOLOGY_MAX_WORKERS",
        }
        for field_name, env_name in env_map.items():
            value = os.getenv(env_name)
            if value:
                terminology[field_name] = value

        return cls({"terminology": terminology})

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is not valid JSON
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {str(e)}")

        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration file must contain a JSON object")
        return cls(config_data)

    def get_app_config(self) -> AppConfig:
        """Get the validated application configuration.

        Returns:
            AppConfig instance

        Raises:
            ConfigurationError: If any setting is invalid
        """
        if self._app_config is None:
            try:
                self._app_config = AppConfig(
                    terminology=TerminologyConfig(**(self._config_data.get("terminology") or {})),
                    validation=ValidationRules(**(self._config_data.get("validation") or {})),
                )
            except PydanticValidationError as e:
                raise ConfigurationError(f"Invalid configuration: {e}") from e
            logger.debug(
                f"Terminology: {self._app_config.terminology.base_url} "
                f"(mode={self._app_config.terminology.mode.value})"
            )
        return self._app_config


# ============================================================================
# Convenience Functions
# ============================================================================

def get_app_config(config_path: Optional[str] = None) -> AppConfig:
    """Load the application configuration.

    Parameters:
        config_path: Optional JSON configuration file; environment variables
            are used when omitted

    Returns:
        AppConfig instance
    """
    if config_path:
        return ConfigManager.from_file(config_path).get_app_config()
    return ConfigManager.from_environment().get_app_config()
