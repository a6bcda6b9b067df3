"""
nearmiss.similarity — "Did you mean ...?" suggestions
=====================================================

A failed membership assertion is far more useful when it can point at
the element the author probably meant: ``user-3`` instead of ``user3``,
``e_mail`` instead of ``email``.  This module scores candidates against
a target and ranks them.

§1  EDIT DISTANCE
─────────────────

Optimal-string-alignment Damerau-Levenshtein: the classic DP over
insertions, deletions and substitutions (each cost 1), plus one extra
rule — two adjacent characters swapped count as ONE edit:

    D[i][j] = min(
        D[i-1][j]   + 1,                  # delete a[i-1]
        D[i][j-1]   + 1,                  # insert b[j-1]
        D[i-1][j-1] + (a[i-1] != b[j-1]), # substitute
        D[i-2][j-2] + 1                   # transpose, when
    )                                     #   a[i-1] == b[j-2] and a[i-2] == b[j-1]

so ``edit_distance("ab", "ba") == 1`` where plain Levenshtein gives 2.

§2  THE SIMILARITY CASCADE
──────────────────────────

Scores come from a fixed cascade, first match wins:

    equal                          1.00   exact
    equal ignoring case            0.95   case
    candidate = target + extra     0.90   prefix
    candidate = extra + target     0.90   suffix
    target = candidate + missing   0.85   prefix
    target = missing + candidate   0.85   suffix
    candidate contains target      0.80   substring
    target contains candidate      0.75   substring
    otherwise                      1 - distance / max(len)   typo

Typo scores below the cutoff (0.6 by default) are discarded.

§3  NUMBERS
───────────

Numbers are close when they differ by at most 1 (0.9) or 10 (0.8), or
when one's digits appear inside the other's (0.7 / 0.65).
"""

import logging
import math
import numbers
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Optional

from .config import DEFAULT_CONFIG, DiagnosticsConfig

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  RESULT TYPES
# ═══════════════════════════════════════════════════════════════════

class DiffType(Enum):
    """How a candidate differs from the target."""
    NONE = "none"          # below the cutoff; not a suggestion
    EXACT = "exact"
    CASE = "case"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    SUBSTRING = "substring"
    TYPO = "typo"
    NUMERIC = "numeric"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SimilarItem:
    """
    A candidate scored against a target.

    ``index`` is the candidate's position in the collection it came
    from (or its offset in the text, for substring suggestions).
    """
    value: Any
    index: int = 0
    similarity: float = 0.0
    diff_type: DiffType = DiffType.NONE
    details: str = ""


@dataclass(frozen=True, slots=True)
class CaseMismatch:
    """A case-insensitive occurrence of a needle that differs only by case."""
    found: bool
    index: int = -1
    substring: str = ""


def _rank(items: Iterable[SimilarItem]) -> list[SimilarItem]:
    """Highest similarity first; ties keep collection order."""
    return sorted(items, key=lambda item: (-item.similarity, item.index))


# ═══════════════════════════════════════════════════════════════════
#  EDIT DISTANCE
# ═══════════════════════════════════════════════════════════════════

def levenshtein_distance(s: str, t: str) -> int:
    """
    Plain Levenshtein distance (no transpositions).  Serves as the
    reference oracle that edit_distance is checked against.
    """
    m, n = len(s), len(t)
    if m == 0:
        return n
    if n == 0:
        return m

    # Space-optimized DP (two rows)
    prev = list(range(n + 1))
    curr = [0] * (n + 1)

    for i in range(1, m + 1):
        curr[0] = i
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            curr[j] = min(
                prev[j] + 1,        # deletion
                curr[j - 1] + 1,    # insertion
                prev[j - 1] + cost,  # substitution
            )
        prev, curr = curr, prev

    return prev[n]


def edit_distance(s: str, t: str) -> int:
    """
    Damerau-Levenshtein (optimal string alignment) distance.

    An adjacent transposition costs 1, so "tets" → "test" is 1 edit.
    Needs the full matrix: the transposition rule looks two rows back.
    """
    m, n = len(s), len(t)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,         # deletion
                dp[i][j - 1] + 1,         # insertion
                dp[i - 1][j - 1] + cost,  # substitution
            )
            if i > 1 and j > 1 and s[i - 1] == t[j - 2] and s[i - 2] == t[j - 1]:
                dp[i][j] = min(dp[i][j], dp[i - 2][j - 2] + 1)  # transposition

    return dp[m][n]


def describe_typo(target: str, candidate: str, distance: int) -> str:
    """Human description of how ``candidate`` misspells ``target``."""
    if distance == 1:
        if len(target) == len(candidate):
            for i, (t_ch, c_ch) in enumerate(zip(target, candidate)):
                if t_ch == c_ch:
                    continue
                if (i + 1 < len(target)
                        and target[i] == candidate[i + 1]
                        and target[i + 1] == candidate[i]):
                    return f"'{candidate[i]}{candidate[i + 1]}' transposed at position {i + 1}"
                return f"'{c_ch}' ≠ '{t_ch}' at position {i + 1}"
        elif len(candidate) == len(target) + 1:
            return "1 extra character"
        elif len(target) == len(candidate) + 1:
            return "1 missing character"

    return f"{distance} characters differ"


# ═══════════════════════════════════════════════════════════════════
#  STRING SIMILARITY
# ═══════════════════════════════════════════════════════════════════

def similarity(target: str, candidate: str,
               config: DiagnosticsConfig = DEFAULT_CONFIG) -> SimilarItem:
    """
    Score ``candidate`` against ``target`` with the cascade from the
    module docstring.  A candidate below the cutoff comes back with
    similarity 0.0 and DiffType.NONE.
    """
    if target == candidate:
        return SimilarItem(candidate, similarity=1.0, diff_type=DiffType.EXACT)

    if target.casefold() == candidate.casefold():
        return SimilarItem(candidate, similarity=0.95, diff_type=DiffType.CASE,
                           details="case difference")

    if candidate.startswith(target):
        extra = candidate[len(target):]
        return SimilarItem(candidate, similarity=0.9, diff_type=DiffType.PREFIX,
                           details=f"extra '{extra}'")

    if candidate.endswith(target):
        extra = candidate[:len(candidate) - len(target)]
        return SimilarItem(candidate, similarity=0.9, diff_type=DiffType.SUFFIX,
                           details=f"prefix '{extra}'")

    if target.startswith(candidate):
        missing = target[len(candidate):]
        return SimilarItem(candidate, similarity=0.85, diff_type=DiffType.PREFIX,
                           details=f"missing '{missing}'")

    if target.endswith(candidate):
        missing = target[:len(target) - len(candidate)]
        return SimilarItem(candidate, similarity=0.85, diff_type=DiffType.SUFFIX,
                           details=f"missing prefix '{missing}'")

    if target in candidate:
        return SimilarItem(candidate, similarity=0.8, diff_type=DiffType.SUBSTRING,
                           details="target is substring of candidate")

    if candidate in target:
        return SimilarItem(candidate, similarity=0.75, diff_type=DiffType.SUBSTRING,
                           details="candidate is substring of target")

    # Both empty was handled by the equality check, so max_len > 0.
    distance = edit_distance(target, candidate)
    max_len = max(len(target), len(candidate))
    score = 1.0 - distance / max_len

    if score < config.similarity_cutoff:
        return SimilarItem(candidate)
    return SimilarItem(candidate, similarity=score, diff_type=DiffType.TYPO,
                       details=describe_typo(target, candidate, distance))


def rank_similar(target: str, candidates: Iterable[str],
                 max_results: Optional[int] = None,
                 config: DiagnosticsConfig = DEFAULT_CONFIG) -> list[SimilarItem]:
    """
    Suggestions for ``target`` drawn from ``candidates``, best first.

    Exact matches are never suggested (the caller reports those as
    found).  Candidates scoring below the cutoff are dropped, ties keep
    collection order, and at most ``max_results`` items are returned
    (``config.max_similar`` when omitted).
    """
    if max_results is None:
        max_results = config.max_similar

    results = []
    for i, candidate in enumerate(candidates):
        if candidate == target:
            continue
        item = similarity(target, candidate, config)
        if item.similarity >= config.similarity_cutoff:
            results.append(replace(item, index=i))

    return _rank(results)[:max_results]


def find_similar_strings(target: str, collection: Iterable[str],
                         max_results: int,
                         config: DiagnosticsConfig = DEFAULT_CONFIG) -> list[SimilarItem]:
    """Alias of :func:`rank_similar` with an explicit result limit."""
    return rank_similar(target, collection, max_results, config)


# ═══════════════════════════════════════════════════════════════════
#  SUBSTRING SUGGESTIONS
# ═══════════════════════════════════════════════════════════════════

def _has_space(s: str) -> bool:
    return any(ch.isspace() for ch in s)


def rank_similar_substrings(text: str, needle: str,
                            config: DiagnosticsConfig = DEFAULT_CONFIG) -> list[SimilarItem]:
    """
    Find the stretch of ``text`` that most plausibly is a misspelling of
    ``needle``, for "expected string to contain ..." failures.

    Slides windows of len(needle) and len(needle) ± 1, ± 2 across the
    text (never shorter than 85% of the needle), keeps windows within
    two edits, removes duplicates and windows that are merely pieces of
    a better window, and returns at most one suggestion.
    """
    if not needle or not text:
        return []
    if len(needle) > config.max_substring_len:
        logger.debug("substring search skipped: needle is %d characters", len(needle))
        return []

    needle_len = len(needle)
    min_len = config.substring_min_ratio * needle_len
    allow_spaces = _has_space(needle)

    results: list[SimilarItem] = []
    # Exact length first, then the ±1 / ±2 windows.
    for offset in (0, -2, -1, 1, 2):
        window = needle_len + offset
        if window < min_len or window > len(text):
            continue
        for i in range(len(text) - window + 1):
            candidate = text[i:i + window]
            if candidate == needle:
                continue
            if not allow_spaces and _has_space(candidate):
                continue
            if edit_distance(needle, candidate) > config.substring_max_distance:
                continue
            item = similarity(needle, candidate, config)
            if item.diff_type is DiffType.NONE:
                continue
            results.append(replace(item, index=i))

    results = remove_duplicate_items(results)
    results = remove_substring_matches(results, config)
    return _rank(results)[:1]


def remove_duplicate_items(items: list[SimilarItem]) -> list[SimilarItem]:
    """
    Collapse items whose values are equal once stripped of surrounding
    whitespace.  Within a group the winner has no surrounding
    whitespace, then the higher similarity, then the earlier index.
    """
    if len(items) <= 1:
        return items

    groups: dict[str, list[SimilarItem]] = {}
    for item in items:
        groups.setdefault(str(item.value).strip(), []).append(item)

    def preference(item: SimilarItem):
        text = str(item.value)
        padded = text.strip() != text
        return (padded, -item.similarity, item.index)

    return [min(group, key=preference) for group in groups.values()]


def remove_substring_matches(items: list[SimilarItem],
                             config: DiagnosticsConfig = DEFAULT_CONFIG) -> list[SimilarItem]:
    """
    Drop suggestions that are pieces of another suggestion.

    When one value contains another, the longer one wins unless the
    shorter one scores better by more than ``config.dedup_margin``:
    "ERROR" beats "ROR", but a much closer "test" beats "testing".
    """
    if len(items) <= 1:
        return items

    margin = config.dedup_margin
    removed: set[int] = set()

    for i, item in enumerate(items):
        item_str = str(item.value).strip()
        for j, other in enumerate(items):
            if i == j or j in removed:
                continue
            other_str = str(other.value).strip()
            if item_str == other_str:
                continue

            if item_str in other_str and len(item_str) < len(other_str):
                if (other.similarity >= item.similarity
                        or abs(other.similarity - item.similarity) < margin):
                    removed.add(i)
                    break

            if other_str in item_str and len(other_str) < len(item_str):
                if other.similarity - item.similarity > margin:
                    removed.add(i)
                    break

    return [item for i, item in enumerate(items) if i not in removed]


def find_case_mismatch(text: str, needle: str) -> CaseMismatch:
    """
    Look for ``needle`` in ``text`` ignoring case.  Reports a mismatch
    only when the occurrence found differs from the needle by case alone.
    """
    if not needle:
        return CaseMismatch(False)

    index = text.lower().find(needle.lower())
    if index == -1:
        return CaseMismatch(False)

    found = text[index:index + len(needle)]
    if found != needle and found.lower() == needle.lower():
        return CaseMismatch(True, index, found)
    return CaseMismatch(False)


# ═══════════════════════════════════════════════════════════════════
#  NUMERIC SIMILARITY
# ═══════════════════════════════════════════════════════════════════

def is_numeric(value: Any) -> bool:
    """Real numbers, excluding bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _delta(target: Any, candidate: Any) -> Any:
    """Exact ``|candidate - target|`` for ints and Fractions."""
    try:
        return abs(candidate - target)
    except OverflowError:
        # int beyond float range against a float
        return math.inf


def _digits(value: Any) -> str:
    """Digits of a number rounded to an integer, without going through float for ints."""
    if isinstance(value, float):
        return f"{value:.0f}"
    return str(round(value))


def _format_delta(delta: Any) -> str:
    if delta == int(delta):
        return str(int(delta))
    return f"{float(delta):g}"


def numeric_similarity(target: Any, candidate: Any) -> SimilarItem:
    """
    Score a number against a target number.  Candidates that are not
    close in value or in digits come back with DiffType.NONE.
    """
    delta = _delta(target, candidate)

    if delta <= 1:
        return SimilarItem(candidate, similarity=0.9, diff_type=DiffType.NUMERIC,
                           details=f"differs by {_format_delta(delta)}")
    if delta <= 10:
        return SimilarItem(candidate, similarity=0.8, diff_type=DiffType.NUMERIC,
                           details=f"differs by {_format_delta(delta)}")

    target_digits = _digits(target)
    candidate_digits = _digits(candidate)
    if target_digits in candidate_digits:
        return SimilarItem(candidate, similarity=0.7, diff_type=DiffType.NUMERIC,
                           details="contains target digits")
    if candidate_digits in target_digits:
        return SimilarItem(candidate, similarity=0.65, diff_type=DiffType.NUMERIC,
                           details="target contains these digits")
    return SimilarItem(candidate)


def find_similar_numbers(target: Any, items: Iterable[Any],
                         max_results: Optional[int] = None,
                         config: DiagnosticsConfig = DEFAULT_CONFIG) -> list[SimilarItem]:
    """
    Numeric suggestions for ``target``, best first.  Non-numeric items,
    exact matches and NaNs are skipped; ``index`` is the item's position
    in ``items``.
    """
    if max_results is None:
        max_results = config.max_similar
    if not is_numeric(target) or target != target:
        return []

    results = []
    for i, item in enumerate(items):
        if not is_numeric(item) or item != item or item == target:
            continue
        scored = numeric_similarity(target, item)
        if scored.diff_type is DiffType.NONE:
            continue
        if scored.similarity >= config.similarity_cutoff:
            results.append(replace(scored, index=i))

    return _rank(results)[:max_results]
