"""
Configuration Providers.

Implementations of the ConfigProvider protocol for different sources.

A provider returns the *current effective* kind catalog. Successive calls may
legitimately differ (feature-flagged field sets, an edited file), but every
returned Configuration is a self-consistent, immutable snapshot.

    - Development/tests: StaticConfigProvider, MemoryConfigProvider
    - Deployment: FileConfigProvider (JSON or YAML file, re-read per call)

File Format (JSON or YAML):
    {
        "kinds": {
            "Cat": {"fields": {"fur": "String"}},
            "Elephant": {"fields": {"age": "Number"}}
        }
    }

    The short form ``{"Cat": {"fur": "String"}}`` is accepted as well.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from .schemas import Configuration, FieldType, KindSchema, default_configuration

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a provider cannot produce a valid Configuration."""

    pass


class ConfigProvider(Protocol):
    """Protocol for kind catalog sources."""

    def get_configuration(self) -> Configuration:
        """Return the current configuration snapshot."""
        ...


class StaticConfigProvider:
    """Always returns the same configuration."""

    def __init__(self, configuration: Configuration | None = None):
        self._configuration = (
            configuration if configuration is not None else default_configuration()
        )

    def get_configuration(self) -> Configuration:
        return self._configuration


class MemoryConfigProvider:
    """
    Mutable in-memory catalog.

    Every call to get_configuration() returns a new frozen snapshot, so a
    schema built from an earlier snapshot is unaffected by later edits.

    Usage:
        provider = MemoryConfigProvider()
        provider.set_kind("Cat", {"fur": "String"})
        config = provider.get_configuration()
    """

    def __init__(self, configuration: Configuration | None = None):
        self._lock = threading.Lock()
        self._kinds: dict[str, KindSchema] = (
            dict(configuration.kinds) if configuration is not None else {}
        )

    def set_kind(self, kind: str, fields: dict[str, str | FieldType]) -> None:
        """Add or replace one kind."""
        schema = KindSchema(kind=kind, fields=dict(fields))
        with self._lock:
            self._kinds[kind] = schema
        logger.debug(f"[config_provider] Set kind: {kind} fields={sorted(schema.fields)}")

    def remove_kind(self, kind: str) -> bool:
        """Remove a kind. Returns False if it was not configured."""
        with self._lock:
            removed = self._kinds.pop(kind, None) is not None
        if removed:
            logger.debug(f"[config_provider] Removed kind: {kind}")
        return removed

    def replace(self, configuration: Configuration) -> None:
        """Swap the whole catalog."""
        with self._lock:
            self._kinds = dict(configuration.kinds)

    def get_configuration(self) -> Configuration:
        with self._lock:
            kinds = dict(self._kinds)
        return Configuration(kinds=kinds)


class FileConfigProvider:
    """
    Loads the kind catalog from a JSON or YAML file.

    The file is read on every call so edits are picked up by the next
    schema build. YAML requires PyYAML.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_configuration(self) -> Configuration:
        data = self._load()

        if isinstance(data, dict) and "kinds" not in data:
            # Short form: {"Cat": {"fur": "String"}}
            data = {"kinds": {kind: {"fields": fields} for kind, fields in data.items()}}

        try:
            configuration = Configuration.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {self._path}: {e}") from e

        logger.debug(
            f"[config_provider] Loaded {len(configuration)} kinds from {self._path}"
        )
        return configuration

    def _load(self) -> Any:
        if not self._path.exists():
            raise ConfigurationError(f"Configuration file not found: {self._path}")

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Failed to read {self._path}: {e}") from e

        if self._path.suffix.lower() in (".yaml", ".yml"):
            try:
                import yaml
            except ImportError:
                raise ConfigurationError(
                    "YAML configuration requires PyYAML. Install with: pip install pyyaml"
                )
            try:
                return yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Malformed YAML in {self._path}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Malformed JSON in {self._path}: {e}") from e
