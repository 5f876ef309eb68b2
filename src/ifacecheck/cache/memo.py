# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Insert-only memo tables shared by the conformance engine.

Entries are never evicted or invalidated: declarations observed once are
assumed immutable for the lifetime of the process. Writes are serialised with
a lock so concurrent embedders cannot tear an entry.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass
from functools import partial, update_wrapper
from threading import Lock
from typing import Final, Generic, ParamSpec, TypeVar, cast

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

P = ParamSpec("P")
R = TypeVar("R")

_MISSING: Final = object()


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Use this container to describe cache state metadata.

    Attributes:
        name: Label of the memo table.
        current_size: Number of cached entries currently stored.
        hits: Number of lookups answered from the table.
        misses: Number of lookups that required computing a value.
    """

    name: str
    current_size: int
    hits: int
    misses: int


class InsertOnlyCache(Generic[K, V]):
    """Key/value table populated monotonically for the process lifetime."""

    def __init__(self, name: str) -> None:
        """Create an empty table labelled ``name``.

        Args:
            name: Label reported through :meth:`cache_info`.
        """

        self._name = name
        self._store: dict[K, V] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, key: K, factory: Callable[[], V]) -> V:
        """Return the value cached for ``key`` computing it on first use.

        The first value stored for ``key`` wins; a concurrent computation that
        finishes later is discarded in favour of the stored entry.

        Args:
            key: Identity key of the entry.
            factory: Zero-argument callable producing the value on a miss.

        Returns:
            V: Cached or freshly computed value.
        """

        with self._lock:
            cached = self._store.get(key, _MISSING)
            if cached is not _MISSING:
                self._hits += 1
                return cast(V, cached)
            self._misses += 1
        value = factory()
        with self._lock:
            return self._store.setdefault(key, value)

    def lookup(self, key: K) -> V | None:
        """Return the value stored for ``key`` counting a hit when present.

        Args:
            key: Identity key of the entry.

        Returns:
            V | None: Stored value, or ``None`` when the key is unknown.
        """

        with self._lock:
            cached = self._store.get(key, _MISSING)
            if cached is _MISSING:
                return None
            self._hits += 1
            return cast(V, cached)

    def insert(self, key: K, value: V) -> V:
        """Store ``value`` unless ``key`` already holds an entry.

        Args:
            key: Identity key of the entry.
            value: Value to store.

        Returns:
            V: The value held by the table after the call.
        """

        with self._lock:
            return self._store.setdefault(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[K]:
        return iter(tuple(self._store))

    def cache_info(self) -> CacheInfo:
        """Return the table's size and hit statistics.

        Returns:
            CacheInfo: Snapshot of the table metadata.
        """

        with self._lock:
            return CacheInfo(
                name=self._name,
                current_size=len(self._store),
                hits=self._hits,
                misses=self._misses,
            )


class _MemoizedCallable(Generic[P, R]):
    """Memoize a callable in an :class:`InsertOnlyCache`."""

    def __init__(self, func: Callable[P, R]) -> None:
        self._func = func
        self._table: InsertOnlyCache[Hashable, R] = InsertOnlyCache(getattr(func, "__qualname__", "memoized"))
        update_wrapper(self, func)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R:
        key: Hashable = args + (tuple(sorted(kwargs.items())),) if kwargs else args
        return self._table.get_or_compute(key, partial(self._func, *args, **kwargs))

    def cache_info(self) -> CacheInfo:
        """Return metadata for the underlying table."""

        return self._table.cache_info()


def memoize(func: Callable[P, R]) -> Callable[P, R]:
    """Memoize ``func`` for the lifetime of the process.

    Args:
        func: Callable whose hashable arguments identify its result.

    Returns:
        Callable[P, R]: Wrapper exposing ``cache_info``.
    """

    return cast(Callable[P, R], _MemoizedCallable(func))


__all__: Final = ["CacheInfo", "InsertOnlyCache", "memoize"]
