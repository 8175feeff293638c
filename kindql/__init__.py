"""
kindql - Runtime-generated GraphQL schemas for a configurable kind catalog.

kindql turns a declarative catalog of "kinds" (each with its own named,
typed fields) into a GraphQL schema at runtime:

- **One interface, many kinds**: every kind becomes a concrete object type
  implementing the shared ``Animal`` interface
- **Tag-based dispatch**: records are routed to their concrete type by
  their ``kind`` tag
- **Snapshot builds**: each configuration snapshot yields an independent,
  immutable schema, so configuration drift is picked up per request
- **Concurrent record store**: reader-writer locked, snapshot reads

Quick Start:
    >>> from kindql import Record, RecordStore, SchemaGenerator, default_configuration
    >>> from kindql.runtime import QueryExecutor
    >>>
    >>> store = RecordStore([Record.create("Rex", "Dog", breed="Retriever")])
    >>> schema = SchemaGenerator().generate(default_configuration())
    >>> result = QueryExecutor(schema, store).execute("{ animals { name } }")
"""

__version__ = "0.1.0"
__license__ = "MIT"

from kindql.config import Configuration, FieldType, KindSchema, default_configuration
from kindql.schema import GeneratedSchema, SchemaGenerator
from kindql.store import FieldValue, Record, RecordStore

__all__ = [
    "__version__",
    "__license__",
    "Configuration",
    "FieldType",
    "FieldValue",
    "GeneratedSchema",
    "KindSchema",
    "Record",
    "RecordStore",
    "SchemaGenerator",
    "default_configuration",
]
