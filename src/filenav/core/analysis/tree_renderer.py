from __future__ import annotations

"""
Tree Renderer.

Converts a projection into visual ASCII lines for headless output.
Collapsed directories are rendered without their children.
"""

from typing import Iterable, List, Optional, Sequence, Set

from filenav.core.analysis.projection import ProjectionItem
from filenav.domain.tree_models import Location

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_projection(
        items: Sequence[ProjectionItem],
        lines: List[str],
        prefix: str = "",
        opened: Optional[Set[Location]] = None,
) -> None:
    """
    Recursively transform projection rows into a list of strings.

    Uses standard ASCII connectors (├──, └──) and manages indentation
    levels for nested directories. Directory order is preserved.

    Args:
        items: Rows of the current level.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
        opened: Locations of expanded directories; None expands everything.
    """
    total = len(items)

    for i, item in enumerate(items):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        if not item.is_dir:
            lines.append(f"{prefix}{connector}{item.label}")
            continue

        lines.append(f"{prefix}{connector}{item.label}/")
        if opened is None or item.location in opened:
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_projection(item.children, lines, prefix=new_prefix, opened=opened)


def projection_to_dict(items: Iterable[ProjectionItem]) -> List[dict]:
    """Serializable nested form of a projection (for JSON output)."""
    out: List[dict] = []
    for item in items:
        entry: dict = {"label": item.label, "location": list(item.location), "is_dir": item.is_dir}
        if item.is_dir:
            entry["children"] = projection_to_dict(item.children)
        out.append(entry)
    return out
