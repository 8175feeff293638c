"""
Schema Generator.

Turns one Configuration snapshot into a complete, queryable GraphQL schema.

Each generate() call builds a fresh FieldRegistry, dispatcher and set of
concrete types; nothing mutable is shared between calls, so the generator
can run once per request to follow configuration drift.

Usage:
    schema = SchemaGenerator().with_config(config).generate()

    result = graphql_sync(schema.graphql_schema, "{ animals { name } }",
                          context_value=store)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from graphql import (
    GraphQLInterfaceType,
    GraphQLObjectType,
    GraphQLSchema,
    assert_valid_schema,
    get_named_type,
    print_schema,
)

from kindql.config.schemas import Configuration

from .context import SchemaContext
from .interface import InterfaceDispatcher
from .query import QueryRoot
from .registry import FieldRegistry
from .types import ConcreteTypeResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedSchema:
    """
    One immutable schema snapshot.

    Attributes:
        graphql_schema: Executable schema
        context: Configuration snapshot the schema was built from
        interface: Shared interface type
        query_type: Root query type
        concrete_types: Kind -> concrete object type
    """

    graphql_schema: GraphQLSchema
    context: SchemaContext
    interface: GraphQLInterfaceType
    query_type: GraphQLObjectType
    concrete_types: Mapping[str, GraphQLObjectType]

    @property
    def configuration(self) -> Configuration:
        return self.context.configuration

    def implementations(self) -> list[str]:
        """Names of the types implementing the interface, sorted."""
        objects = self.graphql_schema.get_implementations(self.interface).objects
        return sorted(t.name for t in objects)

    def shape(self) -> dict[str, dict[str, str]]:
        """Kind -> {field name: scalar type name}."""
        return {
            kind: {
                field_name: get_named_type(field.type).name
                for field_name, field in object_type.fields.items()
            }
            for kind, object_type in sorted(self.concrete_types.items())
        }

    def sdl(self) -> str:
        """Schema in GraphQL SDL."""
        return print_schema(self.graphql_schema)


class SchemaGenerator:
    """
    Builds GeneratedSchema instances from configurations.

    Example:
        generator = SchemaGenerator()
        first = generator.generate(provider.get_configuration())
        second = generator.generate(provider.get_configuration())  # independent build
    """

    def __init__(self) -> None:
        self._configuration: Configuration | None = None

    def with_config(self, configuration: Configuration) -> SchemaGenerator:
        """Set the default configuration used by generate()."""
        self._configuration = configuration
        return self

    def generate(self, configuration: Configuration | None = None) -> GeneratedSchema:
        """
        Build one schema snapshot.

        Args:
            configuration: Configuration to build from; defaults to the one set
                with with_config(), or an empty configuration

        Returns:
            GeneratedSchema with one concrete type per configured kind
        """
        if configuration is None:
            configuration = self._configuration
        if configuration is None:
            configuration = Configuration()

        context = SchemaContext(configuration=configuration)

        dispatcher = InterfaceDispatcher(context)
        type_resolver = ConcreteTypeResolver(lambda: dispatcher.interface)
        registry = FieldRegistry(type_resolver.build)
        dispatcher.register_all(registry)

        query_type = QueryRoot(context, dispatcher.interface).build()

        graphql_schema = GraphQLSchema(query=query_type, types=registry.types())
        assert_valid_schema(graphql_schema)

        logger.info(
            f"[schema_generator] Generated schema | "
            f"kinds={len(registry)} | types={registry.kinds()}"
        )

        return GeneratedSchema(
            graphql_schema=graphql_schema,
            context=context,
            interface=dispatcher.interface,
            query_type=query_type,
            concrete_types=MappingProxyType(
                {kind: registry.get(kind) for kind in registry.kinds()}
            ),
        )
