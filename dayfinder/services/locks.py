"""
In-process keyed locks serializing writers of the same (user, group) pair.

Threads of one process wait here instead of on the database. Writers in
separate processes are serialized by the database transaction itself.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class _LockEntry:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class KeyedLock:
    """
    One lock per key, created on first use and dropped once nobody holds or
    waits for it. Different keys never block each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, _LockEntry] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[key]
