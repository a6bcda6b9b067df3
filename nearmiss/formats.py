"""
nearmiss.formats — Path and window rendering shared by the analyzers.

Supported renderings:
    • Traversal paths  (field → "Address.City", index → "Items[2]")
    • Bounded sorted windows  ("[..., 6, 8, 9, 10, ...]")
"""

from typing import Any, Sequence


ELLIPSIS = "..."
MISSING = "<missing>"


# ═══════════════════════════════════════════════════════════════════
#  TRAVERSAL PATHS
# ═══════════════════════════════════════════════════════════════════

def index_segment(index: int) -> str:
    """Path segment for a sequence position: ``[3]``."""
    return f"[{index}]"


def key_segment(key: Any) -> str:
    """Path segment for a mapping key: ``[name]``.  Keys render with str()."""
    return f"[{key}]"


def build_path(parent: str, segment: str) -> str:
    """
    Extend a traversal path by one segment.

        build_path("", "Address")        → "Address"
        build_path("Address", "City")    → "Address.City"
        build_path("Items", "[0]")       → "Items[0]"
        build_path("", "[0]")            → "[0]"

    Bracketed segments attach directly; field names are dot-joined.
    """
    if not parent:
        return segment
    if segment.startswith("["):
        return parent + segment
    return parent + "." + segment


# ═══════════════════════════════════════════════════════════════════
#  BOUNDED WINDOWS
# ═══════════════════════════════════════════════════════════════════

def format_window(items: Sequence[Any], start: int, end: int) -> str:
    """
    Render ``items[start:end]`` as a bracketed list, marking whichever
    side was cut off with an ellipsis.

        format_window([1, 2, 3, 4, 5, 6], 2, 4) → "[..., 3, 4, ...]"
        format_window([1, 2, 3], 0, 3)          → "[1, 2, 3]"
    """
    parts = [str(v) for v in items[start:end]]
    if start > 0:
        parts.insert(0, ELLIPSIS)
    if end < len(items):
        parts.append(ELLIPSIS)
    return "[" + ", ".join(parts) + "]"
