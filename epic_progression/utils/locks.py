"""Per-character exclusive locks.

Exactly one advancement, decision, cast or rank change may be in flight per
character.  Locks are re-entrant so an operation holding the lock can call
another locked operation on the same character.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class CharacterLocks:
    """Lazily created ``RLock`` per character id."""

    __slots__ = ("_locks", "_guard")

    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def lock_for(self, character_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(character_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[character_id] = lock
            return lock

    @contextmanager
    def hold(self, character_id: str) -> Iterator[None]:
        lock = self.lock_for(character_id)
        with lock:
            yield

    def discard(self, character_id: str) -> None:
        with self._guard:
            self._locks.pop(character_id, None)
