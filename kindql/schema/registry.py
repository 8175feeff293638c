"""
Field Registry.

Per-build memo of concrete object types keyed by kind.

The interface enumerates every implementer and each concrete type names
the interface it implements. Building through the registry guarantees one
type object per kind no matter how many times a kind is requested during
a build, so the schema never sees two definitions with the same name.

A registry lives for exactly one SchemaGenerator.generate() call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphql import GraphQLObjectType

    from .context import TypeContext

logger = logging.getLogger(__name__)

TypeBuilder = Callable[["TypeContext"], "GraphQLObjectType"]


class TypeRegistrationError(Exception):
    """Registry was asked to build a type it is already building."""

    pass


class FieldRegistry:
    """
    Memoizing registry of concrete types.

    Example:
        registry = FieldRegistry(resolver.build)
        cat = registry.get_or_register(schema_context.type_context("Cat"))
        assert registry.get_or_register(schema_context.type_context("Cat")) is cat
    """

    def __init__(self, builder: TypeBuilder):
        """
        Initialize registry.

        Args:
            builder: Builds a concrete type from its TypeContext
        """
        self._builder = builder
        self._types: dict[str, GraphQLObjectType] = {}
        self._building: set[str] = set()

    def get_or_register(self, type_context: TypeContext) -> GraphQLObjectType:
        """
        Return the concrete type for a kind, building it on first request.

        Raises:
            TypeRegistrationError: If the builder re-enters for the same kind
        """
        kind = type_context.kind

        existing = self._types.get(kind)
        if existing is not None:
            return existing

        if kind in self._building:
            raise TypeRegistrationError(f"Re-entrant registration of kind '{kind}'")

        self._building.add(kind)
        try:
            object_type = self._builder(type_context)
        finally:
            self._building.discard(kind)

        self._types[kind] = object_type
        logger.debug(f"[field_registry] Registered type: {kind}")
        return object_type

    def get(self, kind: str) -> GraphQLObjectType | None:
        return self._types.get(kind)

    def types(self) -> list[GraphQLObjectType]:
        """Registered types in registration order."""
        return list(self._types.values())

    def kinds(self) -> list[str]:
        return list(self._types)

    def __contains__(self, kind: object) -> bool:
        return kind in self._types

    def __len__(self) -> int:
        return len(self._types)
