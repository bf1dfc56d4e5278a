"""
Sanction screening.

AddressScreen holds the set of sanctioned addresses. Screening checks sit on
the hot generation path, so reads share a ReadWriteLock and only add/remove
take it exclusively.
"""

import logging
import threading
from contextlib import contextmanager
from typing import FrozenSet, Iterable, Iterator, Set

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Many concurrent readers, one writer at a time.

    Writers are preferred: once a writer is waiting, new readers queue behind
    it, so a steady stream of reads cannot starve add/remove. Critical
    sections are a single set operation, so readers are never held for long.
    Not reentrant.

    Usage:
        lock = ReadWriteLock()
        with lock.read_locked():
            ...
        with lock.write_locked():
            ...
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
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
    def write_locked(self) -> Iterator[None]:
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


class AddressScreen:
    """
    Thread-safe set of sanctioned addresses.

    Addresses are opaque strings: they are compared exactly and never
    validated. Every read observes the latest completed add/remove.
    """

    def __init__(self, initial: Iterable[str] = ()):
        """
        Initialize the screen.

        Args:
            initial: addresses to start with; duplicates collapse.
        """
        self._lock = ReadWriteLock()
        self._addresses: Set[str] = set(initial)
        logger.info("Sanctions screen initialized with %d addresses", len(self._addresses))

    def add(self, address: str) -> bool:
        """Insert address. Returns False if it was already present."""
        with self._lock.write_locked():
            if address in self._addresses:
                return False
            self._addresses.add(address)
        logger.info("Added sanctioned address: %s", address)
        return True

    def remove(self, address: str) -> bool:
        """Delete address if present. Returns False if it was absent."""
        with self._lock.write_locked():
            if address not in self._addresses:
                return False
            self._addresses.discard(address)
        logger.info("Removed sanctioned address: %s", address)
        return True

    def is_sanctioned(self, address: str) -> bool:
        with self._lock.read_locked():
            hit = address in self._addresses
        if hit:
            logger.warning("Address %s is sanctioned", address)
        else:
            logger.debug("Address %s is not sanctioned", address)
        return hit

    def snapshot(self) -> FrozenSet[str]:
        """Consistent copy of the current membership."""
        with self._lock.read_locked():
            return frozenset(self._addresses)

    def __contains__(self, address: str) -> bool:
        return self.is_sanctioned(address)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._addresses)
