"""Keyed in-process locks serializing mutations per application / per user."""
from __future__ import annotations

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = RLock()
        self.holders = 0


class KeyedLock:
    """Hand out one re-entrant lock per key.

    An entry lives only while some thread holds or waits on it, so the map
    stays as small as the set of keys in use.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[key]


application_locks = KeyedLock()
progress_locks = KeyedLock()
