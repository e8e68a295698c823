"""Dependency injection for the validation API.

This module provides dependency injection functions for FastAPI, following
Hexagonal Architecture principles: routes receive the orchestrator and the
terminology adapter built by the application wiring in src.main.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.adapters.terminology import SnowstormTerminologyAdapter
from src.domain.services import ValidationOrchestrator
from src.infrastructure.config_manager import AppConfig
from src.infrastructure.settings import settings
from src.main import build_orchestrator, create_terminology_adapter

logger = logging.getLogger(__name__)


@lru_cache()
def get_app_config() -> AppConfig:
    """Get the application configuration (cached).

    Raises:
        ConfigurationError: If configuration is invalid
    """
    return settings.app_config


@lru_cache()
def get_terminology_adapter() -> SnowstormTerminologyAdapter:
    """Get the terminology adapter (cached).

    One adapter, and therefore one HTTP connection pool, is shared by all
    requests. It is closed on application shutdown.
    """
    return create_terminology_adapter(get_app_config())


@lru_cache()
def get_orchestrator() -> ValidationOrchestrator:
    """Get the validation orchestrator (cached)."""
    orchestrator = build_orchestrator(get_app_config(), get_terminology_adapter())
    logger.debug(f"Validation modules: {[m.name for m in orchestrator.modules]}")
    return orchestrator


def shutdown_dependencies() -> None:
    """Release cached resources (called on application shutdown)."""
    if get_terminology_adapter.cache_info().currsize:
        get_terminology_adapter().close()
    get_orchestrator.cache_clear()
    get_terminology_adapter.cache_clear()


# Type aliases for dependency injection
ConfigDep = Annotated[AppConfig, Depends(get_app_config)]
TerminologyDep = Annotated[SnowstormTerminologyAdapter, Depends(get_terminology_adapter)]
OrchestratorDep = Annotated[ValidationOrchestrator, Depends(get_orchestrator)]
