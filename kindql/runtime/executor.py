"""
Query Executor.

Runs GraphQL queries against a GeneratedSchema with a record store bound
as the per-request context value.

Resolution errors never escape execute(): the query engine turns them into
per-field errors on the ExecutionResult, and the executor logs and counts
each one.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from graphql import ExecutionResult, graphql, graphql_sync

from kindql.observability import QueryLogger, QueryMetrics, get_metrics

if TYPE_CHECKING:
    from kindql.schema.generator import GeneratedSchema
    from kindql.store.database import RecordStore

logger = logging.getLogger(__name__)

UNCLASSIFIED_ERROR_CODE = "GRAPHQL_ERROR"


class QueryExecutor:
    """
    Executes queries for one schema snapshot over one record store.

    Example:
        executor = QueryExecutor(schema, store)
        result = executor.execute("{ animals { name ... on Cat { fur } } }")
        result.data, result.errors
    """

    def __init__(
        self,
        schema: GeneratedSchema,
        store: RecordStore,
        *,
        metrics: QueryMetrics | None = None,
    ):
        self._schema = schema
        self._store = store
        self._metrics = metrics if metrics is not None else get_metrics()

    @property
    def schema(self) -> GeneratedSchema:
        return self._schema

    def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
        *,
        request_id: str | None = None,
    ) -> ExecutionResult:
        """Execute a query synchronously."""
        log = self._start(operation_name, request_id)
        started = time.perf_counter()

        result = graphql_sync(
            self._schema.graphql_schema,
            query,
            context_value=self._store,
            variable_values=variables,
            operation_name=operation_name,
        )

        self._finish(result, started, log)
        return result

    async def execute_async(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
        *,
        request_id: str | None = None,
    ) -> ExecutionResult:
        """Execute a query on the running event loop."""
        log = self._start(operation_name, request_id)
        started = time.perf_counter()

        result = await graphql(
            self._schema.graphql_schema,
            query,
            context_value=self._store,
            variable_values=variables,
            operation_name=operation_name,
        )

        self._finish(result, started, log)
        return result

    def _start(self, operation_name: str | None, request_id: str | None) -> QueryLogger:
        log = QueryLogger(request_id=request_id or uuid4().hex)
        log.query_started(operation_name=operation_name, kinds=len(self._schema.configuration))
        return log

    def _finish(self, result: ExecutionResult, started: float, log: QueryLogger) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        errors = result.errors or []

        for error in errors:
            code = (error.extensions or {}).get("code", UNCLASSIFIED_ERROR_CODE)
            log.field_error(path=error.path, code=code, message=error.message)
            self._metrics.record_field_error(code)

        self._metrics.record_execution(success=not errors, duration_ms=duration_ms)
        log.query_completed(success=not errors, duration_ms=duration_ms, error_count=len(errors))
