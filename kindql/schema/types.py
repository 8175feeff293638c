"""
Concrete Type Resolver.

Builds one GraphQL object type per kind and resolves field reads on
records of that kind.

A concrete type exposes the shared ``name`` field plus every field the
kind declares, typed per its FieldType:

    String -> String
    Number -> Int (32-bit)

Declared fields are nullable: a record that lacks a declared field
resolves it to null rather than failing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from graphql import (
    GraphQLField,
    GraphQLInt,
    GraphQLInterfaceType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLString,
)

from kindql.config.schemas import FieldType

from .errors import FieldTypeMismatchError, UnknownFieldError

if TYPE_CHECKING:
    from graphql import GraphQLResolveInfo

    from kindql.store.records import Record

    from .context import TypeContext

logger = logging.getLogger(__name__)

SCALAR_TYPES: dict[FieldType, GraphQLScalarType] = {
    FieldType.STRING: GraphQLString,
    FieldType.NUMBER: GraphQLInt,
}


def scalar_for(field_type: FieldType) -> GraphQLScalarType:
    return SCALAR_TYPES[field_type]


def shared_field() -> GraphQLField:
    """Field common to the interface and every concrete type."""
    return GraphQLField(GraphQLNonNull(GraphQLString), description="Record name")


class ConcreteTypeResolver:
    """
    Builds and resolves concrete per-kind types.

    Args:
        interface: Thunk returning the shared interface every built type implements
    """

    def __init__(self, interface: Callable[[], GraphQLInterfaceType]):
        self._interface = interface

    def build(self, type_context: TypeContext) -> GraphQLObjectType:
        """Build the object type for one kind."""
        return GraphQLObjectType(
            name=type_context.type_name,
            fields=lambda: self._build_fields(type_context),
            interfaces=lambda: [self._interface()],
            description=f"Records of kind '{type_context.kind}'",
        )

    def _build_fields(self, type_context: TypeContext) -> dict[str, GraphQLField]:
        resolve = self._field_resolver(type_context)

        shared = shared_field()
        fields = {
            type_context.schema.shared_field: GraphQLField(
                shared.type, resolve=resolve, description=shared.description
            )
        }
        declared = type_context.kind_schema.fields
        for field_name in sorted(declared):
            fields[field_name] = GraphQLField(scalar_for(declared[field_name]), resolve=resolve)
        return fields

    def _field_resolver(self, type_context: TypeContext) -> Callable[..., Any]:
        def resolve(record: Record, info: GraphQLResolveInfo) -> Any:
            return self.resolve_field(type_context, record, info.field_name)

        return resolve

    def resolve_field(self, type_context: TypeContext, record: Record, field_name: str) -> Any:
        """
        Resolve one field of a record.

        Returns:
            The record name for the shared field, the stored scalar for a
            declared field, or None if the record has no value for it

        Raises:
            UnknownFieldError: If the type never declared ``field_name``
            FieldTypeMismatchError: If the stored value disagrees with the declared type
        """
        if field_name == type_context.schema.shared_field:
            return record.name

        declared = type_context.kind_schema.field_type(field_name)
        if declared is None:
            logger.error(
                f"[type_resolver] Field not declared on type | "
                f"type={type_context.type_name} | field={field_name}"
            )
            raise UnknownFieldError(type_context.type_name, field_name)

        value = record.get(field_name)
        if value is None:
            return None

        if not value.matches(declared):
            raise FieldTypeMismatchError(
                type_context.kind, field_name, declared.value, value.type.value
            )
        return value.value
