"""
Coarse locking for sharing one search collection between threads.

A single read-write lock guards the whole collection:
  - readers share the lock, a writer excludes everyone
  - writers are preferred, new readers wait while a writer is queued
  - re-entrant per thread: a writer may take read or write again,
    a reader may take read again
  - read -> write upgrade is refused (RuntimeError), it would deadlock
"""

import threading
from contextlib import contextmanager
from typing import Any, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from .collection import MultiPropertySearchCollection

T = TypeVar('T')


class ReadWriteLock:

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers: dict[int, int] = {}   # thread ident -> read depth
        self._writer: Optional[int] = None
        self._write_depth = 0
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                return
            if me in self._readers:
                self._readers[me] += 1
                return
            while self._writer is not None or self._waiting_writers:
                self._cond.wait()
            self._readers[me] = 1

    def release_read(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._release_write_depth()
                return
            depth = self._readers.get(me)
            if depth is None:
                raise RuntimeError("release_read() without a matching acquire_read()")
            if depth > 1:
                self._readers[me] = depth - 1
                return
            del self._readers[me]
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                return
            if me in self._readers:
                raise RuntimeError("cannot upgrade a read lock to a write lock")
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = me
            self._write_depth = 1

    def release_write(self) -> None:
        with self._cond:
            if self._writer != threading.get_ident():
                raise RuntimeError("release_write() by a thread not holding the write lock")
            self._release_write_depth()

    def _release_write_depth(self) -> None:
        self._write_depth -= 1
        if self._write_depth == 0:
            self._writer = None
            self._cond.notify_all()

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


class SynchronizedSearchCollection(Generic[T]):
    '''
    A MultiPropertySearchCollection guarded by one ReadWriteLock.
    Each operation is atomic. Use read_locked() / write_locked() to make
    a sequence of operations atomic as a group.
    '''

    def __init__(self, properties: Any, elements: Optional[Iterable[T]] = None) -> None:
        self._collection: MultiPropertySearchCollection[T] = MultiPropertySearchCollection(
            properties, elements
        )
        self._lock = ReadWriteLock()

    def read_locked(self):
        return self._lock.read_locked()

    def write_locked(self):
        return self._lock.write_locked()

    @property
    def properties(self) -> tuple[Hashable, ...]:
        return self._collection.properties

    def add_element(self, element: T) -> None:
        with self._lock.write_locked():
            self._collection.add_element(element)

    def add_elements_many(self, elements: Iterable[T]) -> None:
        elements = list(elements)
        with self._lock.write_locked():
            self._collection.add_elements_many(elements)

    def clear(self) -> None:
        with self._lock.write_locked():
            self._collection.clear()

    def search_by_property(self, prop: Hashable, value: Hashable) -> list[T]:
        with self._lock.read_locked():
            return self._collection.search_by_property(prop, value)

    def contains(self, prop: Hashable, value: Hashable) -> bool:
        with self._lock.read_locked():
            return self._collection.contains(prop, value)

    def contains_element(self, element: T) -> bool:
        with self._lock.read_locked():
            return self._collection.contains_element(element)

    def group_by(self, prop: Hashable) -> dict[Hashable, list[T]]:
        with self._lock.read_locked():
            return self._collection.group_by(prop)

    def distinct_values(self, prop: Hashable) -> list[Hashable]:
        with self._lock.read_locked():
            return self._collection.distinct_values(prop)

    def collect(self) -> list[T]:
        with self._lock.read_locked():
            return self._collection.collect()

    def size(self) -> int:
        with self._lock.read_locked():
            return self._collection.size()

    def is_empty(self) -> bool:
        with self._lock.read_locked():
            return self._collection.is_empty()

    def iterator(self) -> Iterator[T]:
        '''
        iterates over a snapshot taken under the read lock
        '''
        return iter(self.collect())

    def __iter__(self) -> Iterator[T]:
        return self.iterator()

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, element: object) -> bool:
        return self.contains_element(element)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, SynchronizedSearchCollection):
            return NotImplemented
        # one lock at a time, two threads comparing a == b and b == a must not deadlock
        return self._snapshot() == other._snapshot()

    def _snapshot(self) -> tuple[list[T], list[tuple[Hashable, Any]]]:
        with self._lock.read_locked():
            return (
                self._collection.collect(),
                list(self._collection._extractors.items()),
            )

    __hash__ = None

    def __repr__(self) -> str:
        with self._lock.read_locked():
            return f"Synchronized{self._collection!r}"
