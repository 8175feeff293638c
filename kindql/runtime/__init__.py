"""
kindql Runtime Layer.

Bridges configuration providers, schema generation and query execution.

Components:
    - SchemaResolver: builds the schema for a request from a ConfigProvider
    - QueryExecutor: runs a query against one schema and one record store
"""

from .executor import QueryExecutor
from .resolver import SchemaResolver

__all__ = [
    "QueryExecutor",
    "SchemaResolver",
]
