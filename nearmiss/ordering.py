"""
nearmiss.ordering — Where a missing value would sit in sorted order.

When ``7`` is missing from ``[10, 1, 8, 2, 6, 4, 5]`` the useful hint is
"7 would fit between 6 and 8".  find_insertion sorts a COPY of the
collection, binary-searches the target's position and reports its
neighbours, plus a short window of the sorted view for long
collections:

    find_insertion([1, 2, 4, 5, 6, 8, 10], 7)
        → InsertionInfo(found=False, insert_index=5, prev=6, next=8)

NaN has no position in sorted order, so a NaN target or element is
refused with UnorderableValueError.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .config import DEFAULT_CONFIG, DiagnosticsConfig
from .errors import UnorderableValueError
from .formats import format_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InsertionInfo:
    """
    Position of a target in the sorted copy of a collection.

    insert_index is -1 for an empty collection, otherwise 0..len.
    prev/next are the sorted neighbours (None at either end, and both
    None when the target was found).  sorted_window is only set for
    collections longer than the window threshold.
    """
    found: bool = False
    insert_index: int = -1
    prev: Optional[Any] = None
    next: Optional[Any] = None
    sorted_window: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SortViolation:
    """An adjacent pair out of ascending order: collection[index] > next."""
    index: int
    value: Any
    next: Any


@dataclass(frozen=True, slots=True)
class SortCheckResult:
    is_sorted: bool
    violations: tuple[SortViolation, ...]
    total: int


def _is_nan(value: Any) -> bool:
    # NaN is the only value unequal to itself (float and Decimal alike).
    return value != value


def find_insertion(collection: Sequence[Any], target: Any,
                   config: DiagnosticsConfig = DEFAULT_CONFIG) -> InsertionInfo:
    """
    Locate ``target`` in sorted order without touching ``collection``.

    Raises UnorderableValueError if the target or any element is NaN.
    """
    if len(collection) == 0:
        return InsertionInfo(insert_index=-1)

    if _is_nan(target):
        logger.debug("insertion analysis refused: NaN target")
        raise UnorderableValueError("NaN values are not supported", target)
    for value in collection:
        if _is_nan(value):
            logger.debug("insertion analysis refused: NaN element")
            raise UnorderableValueError("collection contains NaN values", value)

    ordered = sorted(collection)
    index = bisect.bisect_left(ordered, target)

    if index < len(ordered) and ordered[index] == target:
        return InsertionInfo(found=True, insert_index=index)

    prev = ordered[index - 1] if index > 0 else None
    next_ = ordered[index] if index < len(ordered) else None

    window = None
    if len(collection) > config.window_threshold:
        window = _sorted_window(ordered, index, config.window_size)

    return InsertionInfo(
        found=False,
        insert_index=index,
        prev=prev,
        next=next_,
        sorted_window=window,
    )


def _sorted_window(ordered: Sequence[Any], index: int, size: int) -> str:
    """
    Up to ``size`` sorted elements centred on the insertion point.  Near
    either end the window borrows elements from the other side so it
    still shows ``size`` of them.
    """
    half = size // 2
    start = max(0, index - half)
    end = min(len(ordered), index + half)

    if end - start < size:
        if start == 0:
            end = min(len(ordered), size)
        elif end == len(ordered):
            start = max(0, len(ordered) - size)

    return format_window(ordered, start, end)


def check_sorted(collection: Sequence[Any], max_violations: int = 6) -> SortCheckResult:
    """
    Check ascending order, listing the first ``max_violations`` adjacent
    pairs that break it.
    """
    total = len(collection)
    violations = []
    for i in range(total - 1):
        if collection[i] > collection[i + 1]:
            violations.append(SortViolation(i, collection[i], collection[i + 1]))
            if len(violations) >= max_violations:
                break

    return SortCheckResult(
        is_sorted=not violations,
        violations=tuple(violations),
        total=total,
    )
