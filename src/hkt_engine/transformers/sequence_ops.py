"""
Element-level sequence operations.

Plain generator functions over iterables; sequence transformers apply
them to each inner sequence.
"""
from __future__ import annotations

import itertools
from collections import deque
from random import Random
from typing import Any, Callable, Iterable, Iterator, Optional


def zip_with(items: Iterable[Any], other: Iterable[Any], zipper: Optional[Callable] = None) -> Iterator[Any]:
    if zipper is None:
        return zip(items, other)
    return (zipper(a, b) for a, b in zip(items, other))


def zip_with_index(items: Iterable[Any]) -> Iterator[tuple[Any, int]]:
    return ((item, index) for index, item in enumerate(items))


def scan_left(items: Iterable[Any], seed: Any, fn: Callable[[Any, Any], Any]) -> Iterator[Any]:
    """Running fold from the left, seed first: [seed, f(seed, x0), ...]."""
    acc = seed
    yield acc
    for item in items:
        acc = fn(acc, item)
        yield acc


def scan_right(items: Iterable[Any], seed: Any, fn: Callable[[Any, Any], Any]) -> Iterator[Any]:
    """Running fold from the right, seed first: [seed, f(xn, seed), ...]."""
    return scan_left(reversed(list(items)), seed, lambda acc, item: fn(item, acc))


def distinct(items: Iterable[Any]) -> Iterator[Any]:
    seen_hashable: set = set()
    seen_other: list = []
    for item in items:
        try:
            if item in seen_hashable:
                continue
            seen_hashable.add(item)
        except TypeError:
            if item in seen_other:
                continue
            seen_other.append(item)
        yield item


def take_while(items: Iterable[Any], predicate: Callable[[Any], bool]) -> Iterator[Any]:
    return itertools.takewhile(predicate, items)


def take_until(items: Iterable[Any], predicate: Callable[[Any], bool]) -> Iterator[Any]:
    """Elements before the first match; the match is excluded."""
    return itertools.takewhile(lambda x: not predicate(x), items)


def drop_while(items: Iterable[Any], predicate: Callable[[Any], bool]) -> Iterator[Any]:
    return itertools.dropwhile(predicate, items)


def drop_until(items: Iterable[Any], predicate: Callable[[Any], bool]) -> Iterator[Any]:
    """Elements from the first match on; the match is included."""
    return itertools.dropwhile(lambda x: not predicate(x), items)


def skip(items: Iterable[Any], count: int) -> Iterator[Any]:
    return itertools.islice(items, count, None)


def limit(items: Iterable[Any], count: int) -> Iterator[Any]:
    return itertools.islice(items, count)


def skip_last(items: Iterable[Any], count: int) -> Iterator[Any]:
    if count <= 0:
        yield from items
        return
    window: deque = deque()
    for item in items:
        window.append(item)
        if len(window) > count:
            yield window.popleft()


def limit_last(items: Iterable[Any], count: int) -> Iterator[Any]:
    if count <= 0:
        return iter(())
    return iter(deque(items, maxlen=count))


def slice_(items: Iterable[Any], start: int, stop: int) -> Iterator[Any]:
    return itertools.islice(items, max(start, 0), max(stop, 0))


def intersperse(items: Iterable[Any], separator: Any) -> Iterator[Any]:
    first = True
    for item in items:
        if not first:
            yield separator
        first = False
        yield item


def on_empty_get(items: Iterable[Any], supplier: Callable[[], Any]) -> Iterator[Any]:
    empty = True
    for item in items:
        empty = False
        yield item
    if empty:
        yield supplier()


def on_empty_throw(items: Iterable[Any], supplier: Callable[[], BaseException]) -> Iterator[Any]:
    empty = True
    for item in items:
        empty = False
        yield item
    if empty:
        raise supplier()


def cycle(items: list[Any], times: int) -> Iterator[Any]:
    for _ in range(times):
        yield from items


def cycle_while(items: list[Any], predicate: Callable[[Any], bool]) -> Iterator[Any]:
    """Repeat `items` until the first element failing the predicate (excluded)."""
    if not items:
        return
    for item in itertools.cycle(items):
        if not predicate(item):
            return
        yield item


def cycle_until(items: list[Any], predicate: Callable[[Any], bool]) -> Iterator[Any]:
    return cycle_while(items, lambda x: not predicate(x))


def combine(items: Iterable[Any], predicate: Callable[[Any, Any], bool], op: Callable[[Any, Any], Any]) -> Iterator[Any]:
    """Merge neighbours for which predicate(previous, next) holds."""
    marker = object()
    current = marker
    for item in items:
        if current is marker:
            current = item
        elif predicate(current, item):
            current = op(current, item)
        else:
            yield current
            current = item
    if current is not marker:
        yield current


def shuffle(items: Iterable[Any], rng: Optional[Random] = None) -> Iterator[Any]:
    pool = list(items)
    (rng or Random()).shuffle(pool)
    return iter(pool)


def sort(items: Iterable[Any], key: Optional[Callable] = None, reverse: bool = False) -> Iterator[Any]:
    return iter(sorted(items, key=key, reverse=reverse))


def reverse(items: Iterable[Any]) -> Iterator[Any]:
    return reversed(list(items))


def group_by(
    items: Iterable[Any],
    classifier: Callable[[Any], Any],
    downstream: Optional[Callable] = None,
) -> Iterator[tuple[Any, Any]]:
    """(key, group) pairs, keys in order of first appearance."""
    groups: dict[Any, list[Any]] = {}
    for item in items:
        groups.setdefault(classifier(item), []).append(item)
    for key, group in groups.items():
        yield key, (group if downstream is None else downstream(group))
