from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator
from weakref import WeakValueDictionary


class UserLockRegistry:
    """Hands out one re-entrant lock per user id.

    Locks are held weakly: an entry disappears once no thread references it,
    so the registry does not grow with the number of users ever seen.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "WeakValueDictionary[Hashable, threading.RLock]" = WeakValueDictionary()

    def lock_for(self, user_id: Hashable):
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: Hashable) -> Iterator[None]:
        lock = self.lock_for(user_id)
        with lock:
            yield


cart_locks = UserLockRegistry()
