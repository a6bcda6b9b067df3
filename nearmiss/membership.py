"""
nearmiss.membership — "Does this collection/map contain X?" with hints.

A miss is reported together with:
    • a bounded sample of what IS there (first 5 entries),
    • ranked suggestions for strings (via nearmiss.similarity) and
      numbers (numeric closeness),
    • for struct values, the closest entries and the exact fields in
      which they differ (via nearmiss.core.diff).
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence

from .config import DEFAULT_CONFIG, DiagnosticsConfig
from .core import FieldDiff, Kind, diff, kind_of, strict_equal
from .similarity import SimilarItem, find_similar_numbers, is_numeric, rank_similar


@dataclass(frozen=True, slots=True)
class CloseMatch:
    """A near-miss struct value and the fields in which it differs."""
    value: Any
    differences: tuple[FieldDiff, ...]


@dataclass(frozen=True, slots=True)
class ContainResult:
    """
    Outcome of a membership check.

    context holds at most ``max_show`` entries in collection order and
    total the number of entries searched.  similar is empty when the
    target was found.
    """
    found: bool = False
    exact: bool = False
    context: tuple = ()
    total: int = 0
    similar: tuple[SimilarItem, ...] = ()
    max_show: int = DEFAULT_CONFIG.max_context


@dataclass(frozen=True, slots=True)
class MapContainResult(ContainResult):
    close_matches: tuple[CloseMatch, ...] = ()


def contains(collection: Sequence[Any], target: Any,
             config: DiagnosticsConfig = DEFAULT_CONFIG) -> ContainResult:
    """Membership of ``target`` in a plain sequence, with suggestions."""
    items = list(collection)
    if any(strict_equal(item, target) for item in items):
        return ContainResult(found=True, exact=True, total=len(items),
                             max_show=config.max_context)

    return ContainResult(
        context=tuple(items[:config.max_context]),
        total=len(items),
        similar=tuple(_suggest(items, target, config)),
        max_show=config.max_context,
    )


def contains_key(mapping: Optional[Mapping], key: Any,
                 config: DiagnosticsConfig = DEFAULT_CONFIG) -> MapContainResult:
    """Whether ``mapping`` has ``key``; suggests similar keys on a miss."""
    if mapping is None:
        return MapContainResult(max_show=config.max_context)
    return _analyze(list(mapping.keys()), key, config, close_matches=False)


def contains_value(mapping: Optional[Mapping], value: Any,
                   config: DiagnosticsConfig = DEFAULT_CONFIG) -> MapContainResult:
    """
    Whether ``mapping`` holds ``value``.  On a miss, strings and numbers
    get similarity suggestions; struct values get close matches ranked
    by how few fields differ.
    """
    if mapping is None:
        return MapContainResult(max_show=config.max_context)
    return _analyze(list(mapping.values()), value, config, close_matches=True)


def _analyze(items: list, target: Any, config: DiagnosticsConfig,
             close_matches: bool) -> MapContainResult:
    total = len(items)
    if any(strict_equal(item, target) for item in items):
        return MapContainResult(found=True, exact=True, total=total,
                                max_show=config.max_context)

    context = tuple(items[:config.max_context])

    if close_matches and kind_of(target) is Kind.STRUCT:
        return MapContainResult(
            context=context,
            total=total,
            close_matches=tuple(_close_matches(items, target, config)),
            max_show=config.max_context,
        )

    return MapContainResult(
        context=context,
        total=total,
        similar=tuple(_suggest(items, target, config)),
        max_show=config.max_context,
    )


def _suggest(items: list, target: Any, config: DiagnosticsConfig) -> list[SimilarItem]:
    """String or numeric suggestions, indexed by position in ``items``."""
    if isinstance(target, str):
        positions = [i for i, item in enumerate(items) if isinstance(item, str)]
        strings = [items[i] for i in positions]
        ranked = rank_similar(target, strings, config.max_similar, config)
        return [replace(item, index=positions[item.index]) for item in ranked]

    if is_numeric(target):
        return find_similar_numbers(target, items, config.max_similar, config)

    return []


def _close_matches(items: list, target: Any, config: DiagnosticsConfig) -> list[CloseMatch]:
    """
    Entries of the target's own type, fewest differing fields first.
    Values of another type are not near misses and are skipped.
    """
    scored = []
    for item in items:
        if type(item) is not type(target):
            continue
        differences = diff(target, item)
        if differences:
            scored.append(CloseMatch(item, tuple(differences)))

    scored.sort(key=lambda match: len(match.differences))
    return scored[:config.max_close_matches]
