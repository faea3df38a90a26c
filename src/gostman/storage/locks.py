"""
Reader/writer locking for the backing document.

Readers may share the lock; a writer holds it alone. Waiting writers block
new readers so a steady stream of loads cannot starve a save.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator


class ReadWriteLock:
    """Non-reentrant reader/writer lock built on a condition variable."""

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._condition:
            if self._readers <= 0:
                raise RuntimeError("release_read called without a matching acquire")
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._condition:
            if not self._writer:
                raise RuntimeError("release_write called without a matching acquire")
            self._writer = False
            self._condition.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


_registry_lock = threading.Lock()
_locks: Dict[Path, ReadWriteLock] = {}


def lock_for(path: Path) -> ReadWriteLock:
    """
    Get the lock guarding a backing file.

    Every store opened on the same resolved path shares one lock.
    """
    key = Path(path).expanduser().resolve()
    with _registry_lock:
        lock = _locks.get(key)
        if lock is None:
            lock = ReadWriteLock()
            _locks[key] = lock
        return lock
