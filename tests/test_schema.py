"""
Tests for the schema engine.

Tests for:
- Concrete type generation per configured kind
- FieldRegistry memoization
- Query resolution and tag-based dispatch
- Per-item error isolation
- Store failures surfacing as typed errors
"""

import pytest
from graphql import (
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    graphql_sync,
)

from kindql.config import Configuration
from kindql.schema import (
    ConcreteTypeResolver,
    ErrorCode,
    FieldRegistry,
    KindNotFoundError,
    SchemaContext,
    SchemaGenerator,
    StoreUnavailableError,
    TypeRegistrationError,
    UnknownFieldError,
)
from kindql.store import Record, RecordStore


def run(schema, query, store):
    return graphql_sync(schema.graphql_schema, query, context_value=store)


# =============================================================================
# Type Generation
# =============================================================================


class TestSchemaGeneration:
    """Tests for SchemaGenerator output."""

    def test_one_type_per_kind(self, zoo_schema):
        assert sorted(zoo_schema.concrete_types) == ["Cat", "Dog", "Elephant"]
        assert zoo_schema.implementations() == ["Cat", "Dog", "Elephant"]

    def test_types_implement_interface(self, zoo_schema):
        for object_type in zoo_schema.concrete_types.values():
            assert isinstance(object_type, GraphQLObjectType)
            assert list(object_type.interfaces) == [zoo_schema.interface]

    def test_interface_declares_shared_field(self, zoo_schema):
        interface = zoo_schema.interface

        assert isinstance(interface, GraphQLInterfaceType)
        assert interface.name == "Animal"
        assert list(interface.fields) == ["name"]
        assert isinstance(interface.fields["name"].type, GraphQLNonNull)
        assert interface.fields["name"].type.of_type is GraphQLString

    def test_field_shape(self, zoo_schema):
        assert zoo_schema.shape() == {
            "Cat": {"name": "String", "fur": "String"},
            "Dog": {"name": "String", "breed": "String"},
            "Elephant": {"name": "String", "age": "Int"},
        }

    def test_declared_fields_are_nullable(self, zoo_schema):
        age = zoo_schema.concrete_types["Elephant"].fields["age"]
        assert not isinstance(age.type, GraphQLNonNull)

    def test_query_root(self, zoo_schema):
        field = zoo_schema.query_type.fields["animals"]

        assert zoo_schema.query_type.name == "Query"
        assert isinstance(field.type, GraphQLNonNull)
        assert isinstance(field.type.of_type, GraphQLList)
        assert field.type.of_type.of_type is zoo_schema.interface

    def test_sdl(self, zoo_schema):
        sdl = zoo_schema.sdl()

        assert "interface Animal" in sdl
        assert "type Cat implements Animal" in sdl
        assert "type Elephant implements Animal" in sdl
        assert "animals: [Animal]!" in sdl

    def test_empty_configuration(self):
        schema = SchemaGenerator().generate(Configuration())

        assert schema.concrete_types == {}
        assert schema.implementations() == []

        result = run(schema, "{ animals { name } }", RecordStore())
        assert result.errors is None
        assert result.data == {"animals": []}

    def test_with_config(self, zoo_config):
        schema = SchemaGenerator().with_config(zoo_config).generate()
        assert schema.configuration is zoo_config

    def test_rebuild_is_equivalent_but_independent(self, zoo_config):
        generator = SchemaGenerator()
        first = generator.generate(zoo_config)
        second = generator.generate(zoo_config)

        assert first.shape() == second.shape()
        assert first.sdl() == second.sdl()
        assert first.graphql_schema is not second.graphql_schema
        assert first.concrete_types["Cat"] is not second.concrete_types["Cat"]

    def test_built_schema_unaffected_by_source_edits(self):
        source = {"Cat": {"fields": {"fur": "String"}}}
        schema = SchemaGenerator().generate(Configuration.model_validate({"kinds": source}))
        store = RecordStore([Record.create("Whiskers", "Cat", fur="long")])

        source.pop("Cat")
        with pytest.raises(TypeError):
            schema.configuration.get("Cat").fields["fur"] = "Number"

        result = run(schema, "{ animals { name ... on Cat { fur } } }", store)
        assert result.errors is None
        assert result.data == {"animals": [{"name": "Whiskers", "fur": "long"}]}


# =============================================================================
# Field Registry
# =============================================================================


class TestFieldRegistry:
    """Tests for FieldRegistry memoization."""

    def test_get_or_register_memoizes(self, zoo_config):
        context = SchemaContext(configuration=zoo_config)
        calls = []

        def builder(type_context):
            calls.append(type_context.kind)
            return GraphQLObjectType(type_context.type_name, {})

        registry = FieldRegistry(builder)
        first = registry.get_or_register(context.type_context("Cat"))
        second = registry.get_or_register(context.type_context("Cat"))

        assert first is second
        assert calls == ["Cat"]
        assert "Cat" in registry
        assert len(registry) == 1

    def test_registration_order(self, zoo_config):
        context = SchemaContext(configuration=zoo_config)
        registry = FieldRegistry(lambda tc: GraphQLObjectType(tc.type_name, {}))

        for kind in ["Dog", "Cat"]:
            registry.get_or_register(context.type_context(kind))

        assert registry.kinds() == ["Dog", "Cat"]
        assert [t.name for t in registry.types()] == ["Dog", "Cat"]
        assert registry.get("Elephant") is None

    def test_reentrant_registration_rejected(self, zoo_config):
        context = SchemaContext(configuration=zoo_config)

        def builder(type_context):
            return registry.get_or_register(type_context)

        registry = FieldRegistry(builder)

        with pytest.raises(TypeRegistrationError):
            registry.get_or_register(context.type_context("Cat"))
        assert "Cat" not in registry


# =============================================================================
# Resolution
# =============================================================================


class TestResolution:
    """Tests for query resolution through the generated schema."""

    def test_zoo_query(self, zoo_schema, zoo_store, zoo_query):
        result = run(zoo_schema, zoo_query, zoo_store)

        assert result.errors is None
        assert result.data == {
            "animals": [
                {"__typename": "Cat", "name": "Whiskers", "fur": "long"},
                {"__typename": "Dog", "name": "Rex", "breed": "Retriever"},
                {"__typename": "Elephant", "name": "Dumbo", "age": 5},
            ]
        }

    def test_fragment_for_other_kind_is_skipped(self, zoo_schema, zoo_store):
        result = run(zoo_schema, "{ animals { name ... on Elephant { age } } }", zoo_store)

        assert result.errors is None
        assert result.data["animals"][0] == {"name": "Whiskers"}
        assert result.data["animals"][2] == {"name": "Dumbo", "age": 5}

    def test_missing_declared_field_is_null(self, zoo_schema):
        store = RecordStore([Record.create("Tiny", "Elephant")])

        result = run(zoo_schema, "{ animals { name ... on Elephant { age } } }", store)

        assert result.errors is None
        assert result.data == {"animals": [{"name": "Tiny", "age": None}]}

    def test_undeclared_field_rejected_by_validation(self, zoo_schema, zoo_store):
        result = run(zoo_schema, "{ animals { ... on Cat { breed } } }", zoo_store)

        assert result.data is None
        assert result.errors

    def test_dispatch_uses_kind_tag_not_shape(self):
        config = Configuration.from_mapping({"Cat": {"fur": "String"}, "Lynx": {"fur": "String"}})
        schema = SchemaGenerator().generate(config)
        store = RecordStore(
            [
                Record.create("Whiskers", "Cat", fur="long"),
                Record.create("Bob", "Lynx", fur="spotted"),
            ]
        )

        result = run(schema, "{ animals { __typename name } }", store)

        assert result.errors is None
        assert [a["__typename"] for a in result.data["animals"]] == ["Cat", "Lynx"]


class TestConcreteTypeResolver:
    """Tests for direct field resolution."""

    @pytest.fixture
    def resolver(self, zoo_schema):
        return ConcreteTypeResolver(lambda: zoo_schema.interface)

    def test_shared_field(self, resolver, zoo_schema):
        type_context = zoo_schema.context.type_context("Cat")
        record = Record.create("Whiskers", "Cat", fur="long")

        assert resolver.resolve_field(type_context, record, "name") == "Whiskers"
        assert resolver.resolve_field(type_context, record, "fur") == "long"

    def test_undeclared_field_raises(self, resolver, zoo_schema):
        type_context = zoo_schema.context.type_context("Cat")
        record = Record.create("Whiskers", "Cat", fur="long")

        with pytest.raises(UnknownFieldError) as exc_info:
            resolver.resolve_field(type_context, record, "breed")

        assert exc_info.value.code == ErrorCode.UNKNOWN_FIELD
        assert exc_info.value.extensions == {
            "code": "UNKNOWN_FIELD",
            "type": "Cat",
            "field": "breed",
        }

    def test_unknown_kind_has_no_type_context(self, zoo_schema):
        assert zoo_schema.context.type_context("Plesiosaur") is None


# =============================================================================
# Error Isolation
# =============================================================================


class TestErrorIsolation:
    """A failing record or field never takes down the rest of the query."""

    def test_unknown_kind_nulls_only_its_item(self, zoo_schema, zoo_records, zoo_query):
        store = RecordStore([*zoo_records, Record.create("Nessie", "Plesiosaur")])

        result = run(zoo_schema, zoo_query, store)

        animals = result.data["animals"]
        assert len(animals) == 4
        assert animals[3] is None
        assert [a["name"] for a in animals[:3]] == ["Whiskers", "Rex", "Dumbo"]

        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.path == ["animals", 3]
        assert error.extensions["code"] == "KIND_NOT_FOUND"
        assert error.extensions["kind"] == "Plesiosaur"
        assert isinstance(error.original_error, KindNotFoundError)

    def test_unknown_kind_between_valid_records(self, zoo_schema):
        store = RecordStore(
            [
                Record.create("Rex", "Dog", breed="Retriever"),
                Record.create("Ghost", "Unicorn"),
                Record.create("Dumbo", "Elephant", age=5),
            ]
        )

        result = run(zoo_schema, "{ animals { name } }", store)

        assert result.data == {"animals": [{"name": "Rex"}, None, {"name": "Dumbo"}]}
        assert [e.path for e in result.errors] == [["animals", 1]]

    def test_type_mismatch_nulls_only_its_field(self, zoo_schema):
        store = RecordStore(
            [
                Record.create("Dumbo", "Elephant", age="five"),
                Record.create("Jumbo", "Elephant", age=7),
            ]
        )

        result = run(zoo_schema, "{ animals { name ... on Elephant { age } } }", store)

        assert result.data == {
            "animals": [{"name": "Dumbo", "age": None}, {"name": "Jumbo", "age": 7}]
        }
        assert len(result.errors) == 1
        assert result.errors[0].path == ["animals", 0, "age"]
        assert result.errors[0].extensions["code"] == "FIELD_TYPE_MISMATCH"


class TestStoreFailures:
    """Store problems surface as STORE_UNAVAILABLE errors."""

    def test_poisoned_store(self, zoo_schema, zoo_store):
        with pytest.raises(RuntimeError):
            with zoo_store.lock.write():
                raise RuntimeError("writer crashed")

        result = run(zoo_schema, "{ animals { name } }", zoo_store)

        assert result.data is None
        assert result.errors[0].extensions["code"] == "STORE_UNAVAILABLE"
        assert isinstance(result.errors[0].original_error, StoreUnavailableError)

    def test_no_store_bound(self, zoo_schema):
        result = run(zoo_schema, "{ animals { name } }", None)

        assert result.data is None
        assert result.errors[0].extensions["code"] == "STORE_UNAVAILABLE"

    def test_lock_timeout(self, zoo_schema, zoo_records):
        store = RecordStore(zoo_records, lock_timeout=0.05)
        store.lock.acquire_write()
        try:
            result = run(zoo_schema, "{ animals { name } }", store)
        finally:
            store.lock.release_write()

        assert result.data is None
        assert result.errors[0].extensions["code"] == "STORE_UNAVAILABLE"
