"""
nearmiss.errors — refusals raised by the diagnostics engine.

Mismatches found while comparing values are never errors; they are
returned as data (FieldDiff, SimilarItem, ...).  The classes here cover
the few inputs the engine refuses to analyse at all.
"""

from typing import Any


class NearmissError(Exception):
    """Base class for errors raised by nearmiss."""


class UnorderableValueError(NearmissError, ValueError):
    """A value has no defined position in sorted order (NaN)."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class InvalidConfigError(NearmissError, ValueError):
    """A DiagnosticsConfig threshold is out of range."""
