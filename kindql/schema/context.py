"""
Schema and type contexts.

SchemaContext is the immutable configuration snapshot bound into one
generated schema. TypeContext pairs one KindSchema with a back-reference
to its SchemaContext and is created whenever one concrete type must be
described or resolved.
"""

from __future__ import annotations

from dataclasses import dataclass

from kindql.config.schemas import (
    INTERFACE_TYPE_NAME,
    LIST_FIELD_NAME,
    QUERY_TYPE_NAME,
    SHARED_FIELD_NAME,
    Configuration,
    KindSchema,
)


@dataclass(frozen=True, slots=True)
class SchemaContext:
    """Configuration snapshot shared by every resolver of one schema."""

    configuration: Configuration
    interface_name: str = INTERFACE_TYPE_NAME
    query_name: str = QUERY_TYPE_NAME
    list_field: str = LIST_FIELD_NAME
    shared_field: str = SHARED_FIELD_NAME

    def kind_schema(self, kind: str) -> KindSchema | None:
        return self.configuration.get(kind)

    def type_context(self, kind: str) -> TypeContext | None:
        """TypeContext for a configured kind, None if the kind is unknown."""
        schema = self.configuration.get(kind)
        if schema is None:
            return None
        return TypeContext(kind_schema=schema, schema=self)


@dataclass(frozen=True, slots=True)
class TypeContext:
    """One kind's schema within a SchemaContext."""

    kind_schema: KindSchema
    schema: SchemaContext

    @property
    def kind(self) -> str:
        return self.kind_schema.kind

    @property
    def type_name(self) -> str:
        """Wire-visible name of the concrete type."""
        return self.kind_schema.kind

    def declares(self, field_name: str) -> bool:
        return field_name == self.schema.shared_field or field_name in self.kind_schema.fields
