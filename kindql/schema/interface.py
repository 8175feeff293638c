"""
Interface Dispatcher.

Declares the polymorphic interface shared by every kind and maps a tagged
record to its concrete type at query time.

Dispatch is driven by the record's own ``kind`` tag, never by the shape of
its fields: two kinds with identical field sets stay distinct, and every
record must be honestly tagged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graphql import GraphQLInterfaceType

from .errors import KindNotFoundError
from .types import shared_field

if TYPE_CHECKING:
    from graphql import GraphQLResolveInfo

    from kindql.store.records import Record

    from .context import SchemaContext, TypeContext
    from .registry import FieldRegistry

logger = logging.getLogger(__name__)


class InterfaceDispatcher:
    """
    Owns the shared interface type and tag-based dispatch.

    Usage:
        dispatcher = InterfaceDispatcher(schema_context)
        dispatcher.register_all(registry)
        dispatcher.interface  # GraphQLInterfaceType with resolve_type wired
    """

    def __init__(self, context: SchemaContext):
        self._context = context
        self._interface: GraphQLInterfaceType | None = None
        self._registry: FieldRegistry | None = None

    @property
    def interface(self) -> GraphQLInterfaceType:
        if self._interface is None:
            self._interface = GraphQLInterfaceType(
                self._context.interface_name,
                fields=lambda: {self._context.shared_field: shared_field()},
                resolve_type=self.resolve_type,
                description="Fields shared by every configured kind",
            )
        return self._interface

    def register_all(self, registry: FieldRegistry) -> list[str]:
        """
        Register a concrete type for every configured kind.

        Returns:
            Registered kind names, sorted
        """
        self._registry = registry
        kinds = self._context.configuration.kind_ids()
        for kind in kinds:
            registry.get_or_register(self.type_context_for(kind))

        logger.debug(f"[interface_dispatcher] Registered {len(kinds)} implementers: {kinds}")
        return kinds

    def type_context_for(self, kind: str) -> TypeContext:
        """
        Raises:
            KindNotFoundError: If ``kind`` is not configured
        """
        type_context = self._context.type_context(kind)
        if type_context is None:
            raise KindNotFoundError(kind)
        return type_context

    def resolve_type(
        self,
        record: Record,
        info: GraphQLResolveInfo,
        abstract_type: Any,
    ) -> str:
        """Name of the concrete type a record dispatches to."""
        type_context = self._context.type_context(record.kind)
        object_type = self._registry.get(record.kind) if self._registry else None

        if type_context is None or object_type is None:
            logger.warning(
                f"[interface_dispatcher] Dispatch failed | "
                f"record={record.name} | kind={record.kind}"
            )
            raise KindNotFoundError(record.kind, record.name)

        return object_type.name
