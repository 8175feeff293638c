"""
Pytest configuration and fixtures for kindql tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from kindql.schema import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from kindql.config import default_configuration  # noqa: E402
from kindql.observability import reset_metrics  # noqa: E402
from kindql.schema import SchemaGenerator  # noqa: E402
from kindql.store import Record, RecordStore  # noqa: E402

ZOO_QUERY = """
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


@pytest.fixture(autouse=True)
def _reset_global_metrics():
    """Keep the global metrics instance isolated between tests."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def zoo_config():
    """Cat (fur: String), Dog (breed: String), Elephant (age: Number)."""
    return default_configuration()


@pytest.fixture
def zoo_records():
    """One record per zoo kind."""
    return [
        Record.create("Whiskers", "Cat", fur="long"),
        Record.create("Rex", "Dog", breed="Retriever"),
        Record.create("Dumbo", "Elephant", age=5),
    ]


@pytest.fixture
def zoo_store(zoo_records):
    """Record store holding the zoo records."""
    return RecordStore(zoo_records, lock_timeout=2.0)


@pytest.fixture
def zoo_schema(zoo_config):
    """Schema generated from the zoo configuration."""
    return SchemaGenerator().generate(zoo_config)


@pytest.fixture
def zoo_query():
    """Query selecting every zoo field through inline fragments."""
    return ZOO_QUERY
