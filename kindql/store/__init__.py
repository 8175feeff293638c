"""
kindql Record Store

Immutable tagged records and the lock-guarded in-memory store that serves them.
"""

from .database import RecordStore, RecordValidationError
from .fixtures import (
    FixtureError,
    FixtureGenerator,
    RecordBuilder,
    default_builders,
    synthesize_record,
)
from .lock import (
    ReadWriteLock,
    RecordStoreError,
    StoreLockPoisonedError,
    StoreLockTimeoutError,
)
from .records import INT32_MAX, INT32_MIN, FieldValue, Record

__all__ = [
    "INT32_MAX",
    "INT32_MIN",
    "FieldValue",
    "FixtureError",
    "FixtureGenerator",
    "ReadWriteLock",
    "Record",
    "RecordBuilder",
    "RecordStore",
    "RecordStoreError",
    "RecordValidationError",
    "StoreLockPoisonedError",
    "StoreLockTimeoutError",
    "default_builders",
    "synthesize_record",
]
