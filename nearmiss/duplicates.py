"""
nearmiss.duplicates — Repeated values in a collection.

Two strategies, picked per call:

    • Hashable by value (ints, strings, tuples, frozen dataclasses, ...):
      one pass into a dict of value → indexes.  O(n) for distinct values.
    • Anything else (lists, dicts, plain objects hashed by identity):
      pairwise comparison with a visited mark, so every element heads
      at most one group.  O(n²).

Either way, members of a group are strictly equal (see
nearmiss.core.strict_equal): True and 1 never share a group, at any
depth, and private state counts.  Groups are reported in order of first
occurrence and their indexes in original order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Hashable, Sequence

from .core import strict_equal

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """A value occurring at two or more positions."""
    value: Any
    indexes: tuple[int, ...]


def _hashes_by_value(item: Any) -> bool:
    """
    True if ``item`` can key a dict by its value.  Objects that fall
    back to object.__hash__ hash by identity, so two equal-looking
    instances would never collide.
    """
    if type(item).__hash__ is object.__hash__:
        return False
    try:
        hash(item)
    except TypeError:
        return False
    return True


def find_duplicates(collection: Sequence[Any]) -> list[DuplicateGroup]:
    """Every value that occurs more than once, with all its positions."""
    if all(_hashes_by_value(item) for item in collection):
        buckets: dict[Hashable, list[int]] = {}
        for i, item in enumerate(collection):
            buckets.setdefault(item, []).append(i)
        candidates = [idxs for idxs in buckets.values() if len(idxs) > 1]
    else:
        logger.debug("duplicate scan: unhashable elements, using pairwise comparison")
        candidates = [list(range(len(collection)))]

    groups: list[DuplicateGroup] = []
    for idxs in candidates:
        groups.extend(_partition(collection, idxs))
    groups.sort(key=lambda group: group.indexes[0])
    return groups


def _partition(collection: Sequence[Any], idxs: list[int]) -> list[DuplicateGroup]:
    """
    Split ``idxs`` into groups of strictly equal elements.  A hash bucket
    can still mix values that only == says are equal, e.g. (True,) and (1,).
    """
    visited = [False] * len(idxs)
    groups: list[DuplicateGroup] = []

    for a in range(len(idxs)):
        if visited[a]:
            continue
        item = collection[idxs[a]]
        found = [idxs[a]]

        for b in range(a + 1, len(idxs)):
            if visited[b]:
                continue
            if strict_equal(item, collection[idxs[b]]):
                found.append(idxs[b])
                visited[b] = True

        if len(found) > 1:
            visited[a] = True
            groups.append(DuplicateGroup(item, tuple(found)))

    return groups
