"""
nearmiss.core — Structural differ
=================================

§1  THE PROBLEM
───────────────

An assertion such as ``expected == actual`` answers yes or no.  When the
answer is no and the values are nested (dataclasses holding lists of
dicts holding more dataclasses), "not equal" is useless on its own: the
reader wants the exact PATH at which the two values part ways and the
two leaf values found there.

§2  VALUE KINDS
───────────────

Every Python value is classified into exactly one Kind:

    INVALID    None
    BOOL       True / False          (before NUMBER: bool subclasses int)
    NUMBER     int, float, complex, Decimal, Fraction, ...
    STRING     str
    BYTES      bytes, bytearray
    SEQUENCE   list, tuple, range, deque, ...
    SET        set, frozenset
    MAPPING    dict and other Mapping types
    STRUCT     dataclasses, namedtuples, plain objects with __dict__
    OTHER      everything else (enums, datetimes, ...), compared with ==

The differ dispatches on Kind, never on ad-hoc isinstance checks.

§3  THE DIFF
────────────

diff(expected, actual) walks both values in lock-step and emits one
FieldDiff per discrepancy:

    • None on one side only          → one diff, stop
    • Kind mismatch                  → one diff (the two Kinds), stop
    • STRUCT of different types      → one diff (the two types), stop
    • STRUCT of the same type        → recurse into each public field
    • SEQUENCE of different lengths  → one diff (both sequences), stop
    • SEQUENCE of equal length       → recurse into each position
    • MAPPING                        → missing keys, extra keys, recurse
                                       into keys present on both sides
    • everything else                → compared with ==

Paths read like attribute access: ``"Address.City"``, ``"Items[2]"``,
``"Tags[env]"``.  The root path is the empty string.

§4  CYCLES
──────────

Self-referential values (a node whose child points back at it) would
recurse forever.  The differ tracks the (expected, actual) pairs on the
current recursion stack by identity; re-entering a pair contributes no
further differences.

§5  STRICT EQUALITY
───────────────────

diff only shows public fields, which is what a reader wants to see.
Deciding whether two values ARE the same needs more: strict_equal also
compares private attributes and exception arguments, so two accounts
differing only in ``_id`` are never reported as duplicates.
"""

import dataclasses
import logging
import numbers
import types
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from .formats import MISSING, build_path, index_segment, key_segment

logger = logging.getLogger(__name__)

# getattr default for an attribute one instance lacks
_ABSENT = object()


# ═══════════════════════════════════════════════════════════════════
#  VALUE KINDS
# ═══════════════════════════════════════════════════════════════════

class Kind(Enum):
    """Closed set of value shapes the differ knows how to walk."""
    INVALID = "invalid"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    SET = "set"
    MAPPING = "mapping"
    STRUCT = "struct"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


# Objects that carry a __dict__ but are not data records.
_NOT_STRUCT = (
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    Enum,
)


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def kind_of(value: Any) -> Kind:
    """Classify a value.  Order matters: see the module docstring."""
    if value is None:
        return Kind.INVALID
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, numbers.Number):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.BYTES
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, Set):
        return Kind.SET
    if _is_namedtuple(value):
        return Kind.STRUCT
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    if isinstance(value, Sequence):
        return Kind.SEQUENCE
    if hasattr(value, "__dict__") and not isinstance(value, _NOT_STRUCT):
        return Kind.STRUCT
    return Kind.OTHER


def public_fields(value: Any) -> Iterator[str]:
    """
    Names of the public ("exported") fields of a STRUCT value, in
    declaration order.  Names starting with an underscore are private.
    """
    if _is_namedtuple(value):
        names = type(value)._fields
    elif dataclasses.is_dataclass(value):
        names = [f.name for f in dataclasses.fields(value)]
    else:
        names = list(vars(value))
    return (name for name in names if not name.startswith("_"))


# ═══════════════════════════════════════════════════════════════════
#  FIELD DIFF
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class FieldDiff:
    """One discrepancy found while walking two values."""
    path: str
    expected: Any
    actual: Any

    def __str__(self) -> str:
        path_str = self.path or "(root)"
        return f"{path_str}: {self.expected!r} ≠ {self.actual!r}"


# ═══════════════════════════════════════════════════════════════════
#  DIFF
# ═══════════════════════════════════════════════════════════════════

def _equals(a: Any, b: Any) -> bool:
    """``a == b`` for leaves, treating an uncomparable pair as unequal."""
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # e.g. array-like values whose == is elementwise
        return False


def diff(expected: Any, actual: Any, path: str = "") -> list[FieldDiff]:
    """
    Compare two values recursively and return every discrepancy,
    tagged with the path at which it occurs.

    Returns an empty list when the values are structurally equal.
    Mismatches of kind, type, None-ness or length are reported once at
    the node where they occur; the differ does not descend below them.
    """
    return _diff(expected, actual, path, set())


def find_differences(expected: Any, actual: Any) -> list[FieldDiff]:
    """Alias of :func:`diff` starting at the root path."""
    return _diff(expected, actual, "", set())


def deep_equal(a: Any, b: Any) -> bool:
    """True when :func:`diff` finds nothing to report."""
    if a is b:
        return True
    return not _diff(a, b, "", set())


def _diff(expected: Any, actual: Any, path: str,
          active: set[tuple[int, int]]) -> list[FieldDiff]:
    # Same object shortcut
    if expected is actual:
        return []

    if expected is None or actual is None:
        return [FieldDiff(path, expected, actual)]

    e_kind = kind_of(expected)
    a_kind = kind_of(actual)
    if e_kind is not a_kind:
        return [FieldDiff(path, e_kind, a_kind)]

    if e_kind in (Kind.STRUCT, Kind.SEQUENCE, Kind.MAPPING):
        pair = (id(expected), id(actual))
        if pair in active:
            logger.debug("cycle at %r: pair already being compared", path or "(root)")
            return []
        active.add(pair)
        try:
            if e_kind is Kind.STRUCT:
                return _struct_diff(expected, actual, path, active)
            if e_kind is Kind.SEQUENCE:
                return _seq_diff(expected, actual, path, active)
            return _map_diff(expected, actual, path, active)
        finally:
            active.discard(pair)

    # Leaf kinds: BOOL, NUMBER, STRING, BYTES, SET, OTHER
    if _equals(expected, actual):
        return []
    return [FieldDiff(path, expected, actual)]


def _struct_diff(expected: Any, actual: Any, path: str,
                 active: set[tuple[int, int]]) -> list[FieldDiff]:
    if type(expected) is not type(actual):
        return [FieldDiff(path, type(expected), type(actual))]

    diffs: list[FieldDiff] = []
    names = list(public_fields(expected))
    # Plain objects may carry attributes the other instance lacks.
    names += [n for n in public_fields(actual) if n not in names]

    for name in names:
        field_path = build_path(path, name)
        e_val = getattr(expected, name, _ABSENT)
        a_val = getattr(actual, name, _ABSENT)
        if e_val is _ABSENT or a_val is _ABSENT:
            diffs.append(FieldDiff(
                field_path,
                MISSING if e_val is _ABSENT else e_val,
                MISSING if a_val is _ABSENT else a_val,
            ))
            continue
        diffs.extend(_diff(e_val, a_val, field_path, active))
    return diffs


def _seq_diff(expected: Sequence, actual: Sequence, path: str,
              active: set[tuple[int, int]]) -> list[FieldDiff]:
    if len(expected) == 0 and len(actual) == 0:
        return []
    if len(expected) != len(actual):
        return [FieldDiff(path, expected, actual)]

    diffs: list[FieldDiff] = []
    for i, (e_item, a_item) in enumerate(zip(expected, actual)):
        if e_item is a_item:
            continue
        diffs.extend(_diff(e_item, a_item, build_path(path, index_segment(i)), active))
    return diffs


def _map_diff(expected: Mapping, actual: Mapping, path: str,
              active: set[tuple[int, int]]) -> list[FieldDiff]:
    diffs: list[FieldDiff] = []

    for key, e_val in expected.items():
        key_path = build_path(path, key_segment(key))
        if key not in actual:
            diffs.append(FieldDiff(key_path, e_val, MISSING))
            continue
        diffs.extend(_diff(e_val, actual[key], key_path, active))

    for key, a_val in actual.items():
        if key not in expected:
            diffs.append(FieldDiff(build_path(path, key_segment(key)), MISSING, a_val))

    return diffs


# ═══════════════════════════════════════════════════════════════════
#  STRICT EQUALITY
# ═══════════════════════════════════════════════════════════════════

def strict_equal(a: Any, b: Any) -> bool:
    """
    Equality used to decide membership and duplicates.

    Walks the same kinds as :func:`diff` but looks at ALL of a struct's
    state: private ``_`` attributes, every dataclass field, and
    ``args`` for exceptions.  A plain class that defines its own
    ``__eq__`` is compared with it.  Bools never equal numbers, at any
    depth.
    """
    return _strict_equal(a, b, set())


def _state(value: Any) -> dict[str, Any]:
    """Every attribute that makes up a struct's value, private ones included."""
    if _is_namedtuple(value):
        return dict(zip(type(value)._fields, value))
    if dataclasses.is_dataclass(value):
        return {f.name: getattr(value, f.name, _ABSENT) for f in dataclasses.fields(value)}
    state = dict(vars(value))
    if isinstance(value, BaseException):
        state["args"] = value.args
    return state


def _strict_equal(a: Any, b: Any, active: set[tuple[int, int]]) -> bool:
    if a is b:
        return True
    if a is None or b is None:
        return False

    kind = kind_of(a)
    if kind is not kind_of(b):
        return False
    if kind not in (Kind.STRUCT, Kind.SEQUENCE, Kind.MAPPING):
        return _equals(a, b)

    pair = (id(a), id(b))
    if pair in active:
        return True
    active.add(pair)
    try:
        if kind is Kind.SEQUENCE:
            return len(a) == len(b) and all(
                _strict_equal(x, y, active) for x, y in zip(a, b))

        if kind is Kind.MAPPING:
            return len(a) == len(b) and all(
                key in b and _strict_equal(val, b[key], active)
                for key, val in a.items())

        if type(a) is not type(b):
            return False
        is_record = _is_namedtuple(a) or dataclasses.is_dataclass(a)
        if not is_record and type(a).__eq__ is not object.__eq__:
            return _equals(a, b)
        a_state, b_state = _state(a), _state(b)
        return a_state.keys() == b_state.keys() and all(
            _strict_equal(val, b_state[name], active)
            for name, val in a_state.items())
    finally:
        active.discard(pair)
