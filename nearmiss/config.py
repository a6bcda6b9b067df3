"""
nearmiss.config — named thresholds shared by the analyzers.

The engine keeps no mutable module state.  Each public operation takes
an optional ``config`` keyword; callers that want different cutoffs
build their own DiagnosticsConfig and pass it down.
"""

from dataclasses import dataclass

from .errors import InvalidConfigError


@dataclass(frozen=True, slots=True)
class DiagnosticsConfig:
    """
    Thresholds used by the similarity ranker, the insertion analyzer and
    the membership analyzer.

    similarity_cutoff       minimum score for a string/number suggestion
    max_substring_len       needles longer than this skip substring search
    substring_min_ratio     shortest window, as a fraction of the needle
    substring_max_distance  largest edit distance for a substring window
    dedup_margin            similarities closer than this count as equal
    max_similar             suggestions kept per membership query
    max_context             sample entries reported on a miss
    max_close_matches       struct near-misses reported per value query
    window_size             elements shown around an insertion point
    window_threshold        collections longer than this get a window
    """
    similarity_cutoff: float = 0.6
    max_substring_len: int = 20
    substring_min_ratio: float = 0.85
    substring_max_distance: int = 2
    dedup_margin: float = 0.05
    max_similar: int = 3
    max_context: int = 5
    max_close_matches: int = 2
    window_size: int = 4
    window_threshold: int = 10

    def __post_init__(self):
        for name in ("similarity_cutoff", "substring_min_ratio", "dedup_margin"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigError(f"{name} must be in [0, 1], got {value!r}")
        for name in ("max_substring_len", "substring_max_distance", "max_similar",
                     "max_context", "max_close_matches", "window_size",
                     "window_threshold"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidConfigError(f"{name} must be non-negative, got {value!r}")


DEFAULT_CONFIG = DiagnosticsConfig()
