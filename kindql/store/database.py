"""
In-memory record store.

Holds the records served by queries. Shared by every concurrent query;
guarded by a writer-preferring ReadWriteLock.

Reads take a snapshot: the read lock is held only while the record
sequence is copied, never while records are being resolved. Appends that
happen after a snapshot are not visible to it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .lock import ReadWriteLock, RecordStoreError
from .records import Record

if TYPE_CHECKING:
    from kindql.config.schemas import Configuration

logger = logging.getLogger(__name__)


class RecordValidationError(RecordStoreError):
    """A record is inconsistent with the configuration it was validated against."""

    def __init__(self, record: Record, problems: list[str]):
        self.record = record
        self.problems = problems
        super().__init__(f"Invalid record '{record.name}': {'; '.join(problems)}")


class RecordStore:
    """
    Growable, append-ordered sequence of records.

    Example:
        store = RecordStore(lock_timeout=5.0)
        store.append(Record.create("Rex", "Dog", breed="Retriever"))

        for record in store.snapshot():
            ...
    """

    def __init__(
        self,
        records: Iterable[Record] | None = None,
        *,
        lock_timeout: float | None = None,
    ):
        """
        Initialize store.

        Args:
            records: Initial records (not validated)
            lock_timeout: Seconds to wait for the lock before failing, None waits forever
        """
        self._records: list[Record] = list(records or [])
        self._lock = ReadWriteLock()
        self._lock_timeout = lock_timeout

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    def append(
        self,
        record: Record,
        *,
        validate_against: Configuration | None = None,
    ) -> None:
        """
        Append one record.

        Args:
            record: Record to append
            validate_against: Optional configuration to validate the record with first

        Raises:
            RecordValidationError: If validation was requested and failed
            StoreLockTimeoutError / StoreLockPoisonedError: On lock failure
        """
        self.extend([record], validate_against=validate_against)

    def extend(
        self,
        records: Iterable[Record],
        *,
        validate_against: Configuration | None = None,
    ) -> int:
        """
        Append many records, all or nothing.

        Returns:
            Number of records appended
        """
        batch = list(records)

        if validate_against is not None:
            for record in batch:
                problems = validate_against.validate_record(record)
                if problems:
                    raise RecordValidationError(record, problems)

        with self._lock.write(self._lock_timeout):
            self._records.extend(batch)

        logger.debug(f"[record_store] Appended {len(batch)} records | total={len(self._records)}")
        return len(batch)

    def snapshot(self) -> tuple[Record, ...]:
        """Records in insertion order as of now."""
        with self._lock.read(self._lock_timeout):
            return tuple(self._records)

    def __len__(self) -> int:
        with self._lock.read(self._lock_timeout):
            return len(self._records)
