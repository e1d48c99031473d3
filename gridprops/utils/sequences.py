"""Lazy, restartable sequence helpers.

Unlike bare generators, the views returned here can be iterated any number
of times. Each iteration starts from a snapshot of the source taken at
that moment, so the source may grow while a view is being consumed.
"""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, Iterable, Iterator


class LazyMap:
    """Restartable view applying *fn* to each element of *source*."""

    def __init__(self, fn: Callable[[Any], Any], source: Iterable[Any]):
        self._fn = fn
        self._source = source

    def __iter__(self) -> Iterator[Any]:
        fn = self._fn
        for item in list(self._source):
            yield fn(item)

    def __len__(self) -> int:
        return len(self._source)  # type: ignore[arg-type]

    def to_list(self) -> list[Any]:
        return list(self)


class LazyFilter:
    """Restartable view of the elements of *source* satisfying *pred*.

    ``len()`` is linear: it has to evaluate the predicate on every element.
    """

    def __init__(self, pred: Callable[[Any], bool], source: Iterable[Any]):
        self._pred = pred
        self._source = source

    def __iter__(self) -> Iterator[Any]:
        pred = self._pred
        for item in list(self._source):
            if pred(item):
                yield item

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def to_list(self) -> list[Any]:
        return list(self)


def lazy_map(fn: Callable[[Any], Any], source: Iterable[Any]) -> LazyMap:
    return LazyMap(fn, source)


def lazy_filter(pred: Callable[[Any], bool], source: Iterable[Any]) -> LazyFilter:
    return LazyFilter(pred, source)


def iota(start: int, stop: int | None = None) -> range:
    """Consecutive integers ``[0, start)`` or ``[start, stop)``."""
    if stop is None:
        return range(start)
    return range(start, stop)


def concat(sequences: Iterable[Iterable[Any]]) -> list[Any]:
    """Flatten one level of nesting into a list."""
    return list(chain.from_iterable(sequences))
