"""
Tests for the runtime layer.

Tests for:
- QueryExecutor result handling and metrics
- SchemaResolver regeneration and caching
- Configuration drift between requests
- Snapshot consistency while the store is being written
"""

import threading

import pytest

from kindql.config import Configuration, MemoryConfigProvider, StaticConfigProvider
from kindql.observability import QueryMetrics, get_metrics
from kindql.runtime import QueryExecutor, SchemaResolver
from kindql.runtime.executor import UNCLASSIFIED_ERROR_CODE
from kindql.store import Record, RecordStore

# =============================================================================
# QueryExecutor
# =============================================================================


class TestQueryExecutor:
    """Tests for QueryExecutor."""

    def test_execute(self, zoo_schema, zoo_store, zoo_query):
        executor = QueryExecutor(zoo_schema, zoo_store)

        result = executor.execute(zoo_query)

        assert result.errors is None
        assert len(result.data["animals"]) == 3
        assert executor.schema is zoo_schema

    def test_success_metrics(self, zoo_schema, zoo_store, zoo_query):
        metrics = QueryMetrics()
        executor = QueryExecutor(zoo_schema, zoo_store, metrics=metrics)

        executor.execute(zoo_query)
        executor.execute(zoo_query)

        assert metrics.executions_total == 2
        assert metrics.executions_success == 2
        assert metrics.field_errors == {}

    def test_field_errors_counted_by_code(self, zoo_schema, zoo_records):
        metrics = QueryMetrics()
        store = RecordStore([*zoo_records, Record.create("Nessie", "Plesiosaur")])
        executor = QueryExecutor(zoo_schema, store, metrics=metrics)

        result = executor.execute("{ animals { name } }")

        assert len(result.errors) == 1
        assert metrics.executions_failed == 1
        assert metrics.field_errors == {"KIND_NOT_FOUND": 1}

    def test_syntax_error_returned_not_raised(self, zoo_schema, zoo_store):
        metrics = QueryMetrics()
        executor = QueryExecutor(zoo_schema, zoo_store, metrics=metrics)

        result = executor.execute("{ animals { name }")

        assert result.data is None
        assert result.errors
        assert metrics.field_errors == {UNCLASSIFIED_ERROR_CODE: 1}

    def test_variables_and_operation_name(self, zoo_schema, zoo_store):
        executor = QueryExecutor(zoo_schema, zoo_store)
        query = """
            query Names($withType: Boolean!) {
              animals { name __typename @include(if: $withType) }
            }
            query Count { animals { name } }
        """

        result = executor.execute(query, {"withType": True}, "Names")

        assert result.errors is None
        assert result.data["animals"][0] == {"name": "Whiskers", "__typename": "Cat"}

    def test_defaults_to_global_metrics(self, zoo_schema, zoo_store):
        QueryExecutor(zoo_schema, zoo_store).execute("{ animals { name } }")
        assert get_metrics().executions_total == 1

    @pytest.mark.asyncio
    async def test_execute_async(self, zoo_schema, zoo_store, zoo_query):
        executor = QueryExecutor(zoo_schema, zoo_store)

        result = await executor.execute_async(zoo_query)

        assert result.errors is None
        assert result.data["animals"][2] == {"__typename": "Elephant", "name": "Dumbo", "age": 5}


# =============================================================================
# SchemaResolver
# =============================================================================


class TestSchemaResolver:
    """Tests for SchemaResolver."""

    def test_regenerates_per_request(self, zoo_config):
        metrics = QueryMetrics()
        resolver = SchemaResolver(StaticConfigProvider(zoo_config), metrics=metrics)

        first = resolver.resolve_schema()
        second = resolver.resolve_schema()

        assert first is not second
        assert first.sdl() == second.sdl()
        assert metrics.schema_builds == 2

    def test_cached_until_refresh(self, zoo_config):
        provider = MemoryConfigProvider(zoo_config)
        resolver = SchemaResolver(provider, regenerate_per_request=False)

        first = resolver.resolve_schema()
        provider.set_kind("Giraffe", {"height": "Number"})

        assert resolver.resolve_schema() is first
        assert "Giraffe" not in first.concrete_types

        refreshed = resolver.refresh()
        assert resolver.resolve_schema() is refreshed
        assert "Giraffe" in refreshed.concrete_types

    def test_configuration_drift(self, zoo_config, zoo_store):
        provider = MemoryConfigProvider(zoo_config)
        resolver = SchemaResolver(provider)
        zoo_store.append(Record.create("Stretch", "Giraffe", height=550))
        query = "{ animals { __typename name } }"

        before = resolver.execute(query, zoo_store)
        assert before.data["animals"][3] is None
        assert before.errors[0].extensions["code"] == "KIND_NOT_FOUND"

        provider.set_kind("Giraffe", {"height": "Number"})

        after = resolver.execute("{ animals { name ... on Giraffe { height } } }", zoo_store)
        assert after.errors is None
        assert after.data["animals"][3] == {"name": "Stretch", "height": 550}

    def test_removed_kind_stops_resolving(self, zoo_config, zoo_store):
        provider = MemoryConfigProvider(zoo_config)
        resolver = SchemaResolver(provider)

        provider.remove_kind("Dog")
        result = resolver.execute("{ animals { name } }", zoo_store)

        assert result.data["animals"] == [{"name": "Whiskers"}, None, {"name": "Dumbo"}]

    def test_empty_configuration(self, zoo_store):
        resolver = SchemaResolver(StaticConfigProvider(Configuration()))

        result = resolver.execute("{ animals { name } }", zoo_store)

        assert result.data == {"animals": [None, None, None]}
        assert len(result.errors) == 3

    @pytest.mark.asyncio
    async def test_execute_async(self, zoo_config, zoo_store):
        resolver = SchemaResolver(StaticConfigProvider(zoo_config))

        result = await resolver.execute_async("{ animals { name } }", zoo_store)

        assert result.errors is None
        assert len(result.data["animals"]) == 3


# =============================================================================
# Concurrency
# =============================================================================


class AppendingStore(RecordStore):
    """Store that appends a record right after every snapshot is taken."""

    def snapshot(self):
        records = super().snapshot()
        self.append(Record.create(f"Late {len(records)}", "Cat", fur="short"))
        return records


class TestConcurrentQueries:
    """Queries see a consistent snapshot while writers append."""

    def test_appends_after_snapshot_not_visible(self, zoo_schema, zoo_records):
        store = AppendingStore(zoo_records)

        result = QueryExecutor(zoo_schema, store).execute("{ animals { name } }")

        assert [a["name"] for a in result.data["animals"]] == ["Whiskers", "Rex", "Dumbo"]
        assert len(store) == 4

    def test_queries_during_writes(self, zoo_config):
        resolver = SchemaResolver(StaticConfigProvider(zoo_config), regenerate_per_request=False)
        store = RecordStore(lock_timeout=5.0)
        failures = []
        done = threading.Event()

        def writer():
            for i in range(200):
                store.append(Record.create(f"Dumbo {i}", "Elephant", age=i))
            done.set()

        def reader():
            while not done.is_set():
                result = resolver.execute("{ animals { name ... on Elephant { age } } }", store)
                if result.errors:
                    failures.append(result.errors)
                    return
                for i, animal in enumerate(result.data["animals"]):
                    if animal != {"name": f"Dumbo {i}", "age": i}:
                        failures.append(animal)
                        return

        threads = [threading.Thread(target=writer)] + [
            threading.Thread(target=reader) for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(30)

        assert failures == []
        assert len(store) == 200
