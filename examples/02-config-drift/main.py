"""
Configuration Drift Example

A SchemaResolver regenerates the schema for every request, so a kind added
to the provider between two requests is queryable on the second one.

Run: python -m examples.02-config-drift.main
"""

import json

from kindql.config import MemoryConfigProvider, default_configuration
from kindql.runtime import SchemaResolver
from kindql.store import FixtureGenerator, Record, RecordStore, default_builders

QUERY = "{ animals { __typename name ... on Giraffe { neck } } }"


def main() -> None:
    provider = MemoryConfigProvider(default_configuration())
    store = RecordStore()
    store.extend(FixtureGenerator(default_builders()).generate(provider.get_configuration(), 3))
    store.append(Record.create("Gerald", "Giraffe", neck=7))

    resolver = SchemaResolver(provider)

    print("Before Giraffe is configured:")
    print(json.dumps(resolver.execute(QUERY.replace("... on Giraffe { neck }", ""), store).formatted, indent=2))

    provider.set_kind("Giraffe", {"neck": "Number"})

    print("After Giraffe is configured:")
    print(json.dumps(resolver.execute(QUERY, store).formatted, indent=2))


if __name__ == "__main__":
    main()
