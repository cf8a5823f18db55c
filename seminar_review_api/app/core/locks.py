"""
Per-key locking for aggregate writes.

Session counters (``registered``/``status``) and the evaluation
uniqueness check are read-modify-write sequences.  ``KeyedLocks``
hands out one re-entrant lock per key so that writes to the same
session, or assignments of the same evaluator/registration pair, are
serialized while unrelated keys proceed independently.
"""

import threading
from contextlib import ExitStack, contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLocks:
    """A registry of re-entrant locks keyed by arbitrary hashable values."""

    def __init__(self) -> None:
        self._locks: Dict[Hashable, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        """Acquire the locks for ``keys``.

        Keys are de-duplicated and taken in sorted order, so two callers
        locking the same pair of sessions can never deadlock.  ``None``
        keys are ignored.
        """
        unique = sorted({key for key in keys if key is not None}, key=repr)
        with ExitStack() as stack:
            for key in unique:
                stack.enter_context(self._lock_for(key))
            yield
