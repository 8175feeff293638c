"""
Reader-writer lock for the record store.

Many readers may hold the lock at once; a writer holds it exclusively.
The lock is writer-preferring: once a writer is waiting, new readers queue
behind it, so a steady stream of readers cannot starve ingestion.

An exception escaping a write section poisons the lock, since the guarded
data may have been left half-updated. Every later acquisition raises
StoreLockPoisonedError until clear_poison() is called.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """Base error for record store operations."""

    pass


class StoreLockPoisonedError(RecordStoreError):
    """A previous writer failed while holding the lock."""

    pass


class StoreLockTimeoutError(RecordStoreError):
    """The lock could not be acquired within the timeout."""

    pass


class ReadWriteLock:
    """
    Writer-preferring reader-writer lock.

    Example:
        lock = ReadWriteLock()

        with lock.read(timeout=1.0):
            items = tuple(shared)

        with lock.write():
            shared.append(item)
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writers_waiting(self) -> int:
        return self._writers_waiting

    def acquire_read(self, timeout: float | None = None) -> bool:
        """Acquire shared access. Returns False on timeout."""
        with self._cond:
            acquired = self._cond.wait_for(
                lambda: not self._writer and self._writers_waiting == 0,
                timeout,
            )
            if not acquired:
                return False
            self._check_poison()
            self._readers += 1
            return True

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a matching acquire_read()")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self, timeout: float | None = None) -> bool:
        """Acquire exclusive access. Returns False on timeout."""
        with self._cond:
            self._writers_waiting += 1
            try:
                acquired = self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0,
                    timeout,
                )
            finally:
                self._writers_waiting -= 1

            if not acquired:
                # Readers queued behind this writer may proceed again
                self._cond.notify_all()
                return False

            try:
                self._check_poison()
            except StoreLockPoisonedError:
                self._cond.notify_all()
                raise
            self._writer = True
            return True

    def release_write(self, *, poison: bool = False) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without a matching acquire_write()")
            self._writer = False
            if poison:
                self._poisoned = True
            self._cond.notify_all()

    def clear_poison(self) -> None:
        """Mark the guarded data as consistent again."""
        with self._cond:
            if self._poisoned:
                logger.warning("[rwlock] Clearing poisoned lock")
            self._poisoned = False

    @contextmanager
    def read(self, timeout: float | None = None) -> Iterator[None]:
        if not self.acquire_read(timeout):
            raise StoreLockTimeoutError(f"Timed out after {timeout}s waiting for read access")
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Iterator[None]:
        if not self.acquire_write(timeout):
            raise StoreLockTimeoutError(f"Timed out after {timeout}s waiting for write access")
        try:
            yield
        except BaseException:
            logger.error("[rwlock] Writer failed while holding the lock; lock poisoned")
            self.release_write(poison=True)
            raise
        else:
            self.release_write()

    def _check_poison(self) -> None:
        if self._poisoned:
            raise StoreLockPoisonedError("Record store lock is poisoned by a failed writer")
