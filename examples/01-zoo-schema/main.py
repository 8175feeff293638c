"""
Zoo Schema Example

This example demonstrates the basic flow:
1. Describe kinds in a configuration
2. Generate a schema from it
3. Query records through the shared interface

Run: python -m examples.01-zoo-schema.main
"""

import json

from kindql import Record, RecordStore, SchemaGenerator, default_configuration
from kindql.runtime import QueryExecutor

QUERY = """
{
  animals {
    __typename
    name
    ... on Cat { fur }
    ... on Dog { breed }
    ... on Elephant { age }
  }
}
"""


def main() -> None:
    store = RecordStore(
        [
            Record.create("Whiskers", "Cat", fur="long"),
            Record.create("Rex", "Dog", breed="Retriever"),
            Record.create("Dumbo", "Elephant", age=5),
            # Not in the configuration: fails dispatch, siblings still resolve
            Record.create("Nessie", "Plesiosaur"),
        ]
    )

    schema = SchemaGenerator().with_config(default_configuration()).generate()

    print("Schema:")
    print(schema.sdl())

    result = QueryExecutor(schema, store).execute(QUERY)

    print("Result:")
    print(json.dumps(result.formatted, indent=2))


if __name__ == "__main__":
    main()
