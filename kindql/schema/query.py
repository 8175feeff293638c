"""
Query Root.

The single entry point of the schema: ``animals`` lists every record in
the store as interface-typed items.

The store is taken from the per-request context value. Only the snapshot
step holds the store's read lock; record resolution happens afterwards,
so slow resolvers never block writers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graphql import GraphQLField, GraphQLList, GraphQLNonNull, GraphQLObjectType

from kindql.store.lock import RecordStoreError

from .errors import StoreUnavailableError

if TYPE_CHECKING:
    from graphql import GraphQLInterfaceType, GraphQLResolveInfo

    from kindql.store.database import RecordStore
    from kindql.store.records import Record

    from .context import SchemaContext

logger = logging.getLogger(__name__)


class QueryRoot:
    """Builds the root query type bound to a record store at resolution time."""

    def __init__(self, context: SchemaContext, interface: GraphQLInterfaceType):
        self._context = context
        self._interface = interface

    def build(self) -> GraphQLObjectType:
        # Items are nullable: a record that fails dispatch nulls itself, not the list
        return GraphQLObjectType(
            self._context.query_name,
            fields={
                self._context.list_field: GraphQLField(
                    GraphQLNonNull(GraphQLList(self._interface)),
                    resolve=self._resolve_records,
                    description="Every record in the store, in insertion order",
                )
            },
        )

    def _resolve_records(self, root: Any, info: GraphQLResolveInfo) -> tuple[Record, ...]:
        return self.list_records(info.context)

    def list_records(self, store: RecordStore | None) -> tuple[Record, ...]:
        """
        Snapshot the store.

        Raises:
            StoreUnavailableError: If no store is bound or its lock failed
        """
        if store is None:
            raise StoreUnavailableError("No record store bound to this query")

        try:
            records = store.snapshot()
        except RecordStoreError as e:
            logger.error(f"[query_root] Record store unavailable: {e}")
            raise StoreUnavailableError(f"Record store unavailable: {e}") from e

        logger.debug(f"[query_root] Listing {len(records)} records")
        return records
