"""In-memory freshness cache for aggregated snapshots."""

import threading
import time
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Callable, Optional


class ReadWriteLock:
    """Many readers or one writer. Waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SnapshotCache:
    """TTL-checked key/value store. Stale entries are superseded, never swept."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = ReadWriteLock()
        self._clock = clock

    def get(self, key: str, max_age: timedelta) -> tuple[Optional[Any], bool]:
        with self._lock.read():
            entry = self._entries.get(key)
        if entry is None:
            return None, False

        value, stored_at = entry
        if self._clock() - stored_at < max_age.total_seconds():
            return value, True
        return None, False

    def set(self, key: str, value: Any) -> None:
        with self._lock.write():
            self._entries[key] = (value, self._clock())

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)


def cache_key(lat: float, lon: float, precision: int = 2) -> str:
    return f"{lat:.{precision}f},{lon:.{precision}f}"
