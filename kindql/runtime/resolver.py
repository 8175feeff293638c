"""
Schema Resolver.

Connects a ConfigProvider to query execution.

Design Principle:
    "Configuration flows down, execution flows up."

    1. Provider returns the current effective kind catalog
    2. Generator builds a schema snapshot from it
    3. Executor runs the query against the snapshot and the record store

By default a fresh schema is generated for every request so configuration
drift is picked up immediately. With ``regenerate_per_request=False`` the
first schema is reused until refresh() is called.

Usage:
    resolver = SchemaResolver(FileConfigProvider("kinds.yaml"))
    result = resolver.execute("{ animals { name } }", store)
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any

from kindql.observability import QueryMetrics, get_metrics
from kindql.schema.generator import SchemaGenerator

from .executor import QueryExecutor

if TYPE_CHECKING:
    from graphql import ExecutionResult

    from kindql.config.provider import ConfigProvider
    from kindql.schema.generator import GeneratedSchema
    from kindql.store.database import RecordStore

logger = logging.getLogger(__name__)


class SchemaResolver:
    """
    Resolves the schema to serve a request with.

    Example:
        resolver = SchemaResolver(provider, regenerate_per_request=False)
        schema = resolver.resolve_schema()  # built once, then reused
        resolver.refresh()                  # pick up a new configuration
    """

    def __init__(
        self,
        provider: ConfigProvider,
        *,
        generator: SchemaGenerator | None = None,
        regenerate_per_request: bool = True,
        metrics: QueryMetrics | None = None,
    ):
        """
        Initialize resolver.

        Args:
            provider: Source of the kind catalog
            generator: Schema generator (a new one by default)
            regenerate_per_request: Build a fresh schema for every request
            metrics: Metrics sink (global metrics by default)
        """
        self._provider = provider
        self._generator = generator or SchemaGenerator()
        self._regenerate = regenerate_per_request
        self._metrics = metrics if metrics is not None else get_metrics()
        self._cached: GeneratedSchema | None = None
        self._lock = threading.Lock()

    @property
    def regenerate_per_request(self) -> bool:
        return self._regenerate

    def resolve_schema(self) -> GeneratedSchema:
        """Schema for the current request."""
        if self._regenerate:
            return self._build()

        with self._lock:
            if self._cached is None:
                self._cached = self._build()
            return self._cached

    def refresh(self) -> GeneratedSchema:
        """Rebuild from the provider's current configuration."""
        schema = self._build()
        if not self._regenerate:
            with self._lock:
                self._cached = schema
        return schema

    def executor_for(self, store: RecordStore) -> QueryExecutor:
        return QueryExecutor(self.resolve_schema(), store, metrics=self._metrics)

    def execute(
        self,
        query: str,
        store: RecordStore,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> ExecutionResult:
        return self.executor_for(store).execute(query, variables, operation_name)

    async def execute_async(
        self,
        query: str,
        store: RecordStore,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> ExecutionResult:
        return await self.executor_for(store).execute_async(query, variables, operation_name)

    def _build(self) -> GeneratedSchema:
        started = time.perf_counter()
        configuration = self._provider.get_configuration()
        schema = self._generator.generate(configuration)
        self._metrics.record_schema_build()

        logger.debug(
            f"[schema_resolver] Schema built | kinds={len(configuration)} | "
            f"duration_ms={(time.perf_counter() - started) * 1000:.2f}"
        )
        return schema
