"""A readers / writer lock for the registries shared between queries."""

import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Allows any number of concurrent readers or a single writer."""

    def __init__(self):  # noqa: D107
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self):
        """Hold the lock shared for the duration of the context."""
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        """Hold the lock exclusively for the duration of the context."""
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()
