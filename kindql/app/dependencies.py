"""
Dependency Injection for kindql.

Provides the process-wide settings, config provider, record store and
schema resolver. Route handlers receive them through FastAPI's Depends,
so tests can swap any of them with ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from kindql.config import (
    AppSettings,
    ConfigProvider,
    FileConfigProvider,
    StaticConfigProvider,
    default_configuration,
)
from kindql.runtime import SchemaResolver
from kindql.store import FixtureGenerator, RecordStore, default_builders

logger = logging.getLogger(__name__)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    lock_timeout = os.getenv("KINDQL_LOCK_TIMEOUT_SECONDS", "5.0")
    return AppSettings(
        service_name=os.getenv("KINDQL_SERVICE_NAME", "kindql"),
        environment=os.getenv("KINDQL_ENVIRONMENT", "development"),
        debug=os.getenv("KINDQL_DEBUG", "false").lower() == "true",
        config_file=os.getenv("KINDQL_CONFIG_FILE") or None,
        fixture_amount=int(os.getenv("KINDQL_FIXTURE_AMOUNT", "30")),
        lock_timeout_seconds=float(lock_timeout) if lock_timeout else None,
        regenerate_per_request=(
            os.getenv("KINDQL_REGENERATE_PER_REQUEST", "true").lower() == "true"
        ),
    )


# Global instances (initialized on first access)
_provider: Optional[ConfigProvider] = None
_store: Optional[RecordStore] = None
_resolver: Optional[SchemaResolver] = None


def get_config_provider() -> ConfigProvider:
    """
    Get the configuration provider.

    Uses KINDQL_CONFIG_FILE when set, the built-in zoo catalog otherwise.
    """
    global _provider
    if _provider is None:
        settings = get_settings()
        if settings.config_file:
            logger.info(f"[dependencies] Using FileConfigProvider: {settings.config_file}")
            _provider = FileConfigProvider(settings.config_file)
        else:
            logger.info("[dependencies] Using built-in kind catalog")
            _provider = StaticConfigProvider(default_configuration())
    return _provider


def get_store() -> RecordStore:
    """Get the process-wide record store."""
    global _store
    if _store is None:
        _store = RecordStore(lock_timeout=get_settings().lock_timeout_seconds)
    return _store


def get_schema_resolver() -> SchemaResolver:
    """Get the schema resolver bound to the active config provider."""
    global _resolver
    if _resolver is None:
        settings = get_settings()
        _resolver = SchemaResolver(
            get_config_provider(),
            regenerate_per_request=settings.regenerate_per_request,
        )
    return _resolver


async def initialize_services() -> None:
    """
    Initialize all services on application startup.

    Seeds the record store with fixtures for the current configuration.
    Called from FastAPI lifespan.
    """
    settings = get_settings()
    configuration = get_config_provider().get_configuration()

    records = FixtureGenerator(default_builders()).generate(
        configuration, settings.fixture_amount
    )
    get_store().extend(records, validate_against=configuration)
    get_schema_resolver()

    logger.info(
        f"[dependencies] Services initialized | kinds={len(configuration)} | records={len(records)}"
    )


async def shutdown_services() -> None:
    """
    Drop all service instances.

    Called from FastAPI lifespan.
    """
    global _provider, _store, _resolver
    _provider = None
    _store = None
    _resolver = None
