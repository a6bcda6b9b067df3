"""
nearmiss — Diagnostics for "equal enough" assertions
====================================================

When a test assertion fails, say exactly why:

    diff(Person("Ann", Address("Oslo")), Person("Ann", Address("Bergen")))
        → [FieldDiff("address.city", "Oslo", "Bergen")]

    rank_similar("user3", ["user-one", "user-3", "user-003"])
        → user-3 (1 extra character), user-003 (3 characters differ)

    find_insertion([1, 2, 4, 5, 6, 8, 10], 7)
        → would fit between 6 and 8

    find_duplicates([1, 2, 2, 3, 3, 3])
        → 2 at [1, 2], 3 at [3, 4, 5]

    contains_key({"mail": 1, "e_mail": 2}, "email")
        → did you mean 'mail' or 'e_mail'?

Every function is pure: no shared state, no I/O, inputs never mutated.
Rendering the results into messages is left to the caller.
"""

import logging

from nearmiss.config import DEFAULT_CONFIG, DiagnosticsConfig
from nearmiss.core import (
    # Types
    FieldDiff,
    Kind,
    kind_of,
    # Differ
    diff,
    find_differences,
    deep_equal,
    strict_equal,
)
from nearmiss.duplicates import DuplicateGroup, find_duplicates
from nearmiss.errors import InvalidConfigError, NearmissError, UnorderableValueError
from nearmiss.membership import (
    CloseMatch, ContainResult, MapContainResult,
    contains, contains_key, contains_value,
)
from nearmiss.ordering import (
    InsertionInfo, SortCheckResult, SortViolation,
    check_sorted, find_insertion,
)
from nearmiss.similarity import (
    CaseMismatch, DiffType, SimilarItem,
    edit_distance, levenshtein_distance,
    similarity, rank_similar, find_similar_strings, rank_similar_substrings,
    find_case_mismatch, find_similar_numbers,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "DiagnosticsConfig", "DEFAULT_CONFIG",
    "FieldDiff", "Kind", "kind_of", "diff", "find_differences", "deep_equal",
    "strict_equal",
    "DuplicateGroup", "find_duplicates",
    "NearmissError", "UnorderableValueError", "InvalidConfigError",
    "CloseMatch", "ContainResult", "MapContainResult",
    "contains", "contains_key", "contains_value",
    "InsertionInfo", "SortCheckResult", "SortViolation",
    "check_sorted", "find_insertion",
    "CaseMismatch", "DiffType", "SimilarItem",
    "edit_distance", "levenshtein_distance",
    "similarity", "rank_similar", "find_similar_strings", "rank_similar_substrings",
    "find_case_mismatch", "find_similar_numbers",
]
