from __future__ import annotations

"""
Projection Builder.

Pure transforms from a DirectoryNode into the nested, label-only display
tree consumed by rendering and navigation. Items carry the Location of the
node they mirror (index path, not a filesystem path) so navigation can map
a visible row back to the tree.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from filenav.domain.tree_models import DirectoryNode, FileNode, Location

# -----------------------------------------------------------------------------
# PROJECTION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectionItem:
    """
    One labeled row of the display tree.

    Attributes:
        label: Final path component of the mirrored node.
        location: Location of the mirrored node at build time.
        is_dir: True when the mirrored node is a directory.
        children: Child rows in directory order (always empty for files).
    """
    label: str
    location: Location
    is_dir: bool = False
    children: Tuple[ProjectionItem, ...] = ()

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_projection(directory: DirectoryNode) -> List[ProjectionItem]:
    """
    Mirror `directory` 1:1 in structure and order.

    Returns:
        List[ProjectionItem]: Rows for the direct children of `directory`.
    """
    return _build(directory, ())


def build_filtered_projection(
        directory: DirectoryNode,
        targets: Iterable[Location],
) -> List[ProjectionItem]:
    """
    Mirror only the ancestor chains of `targets`, in directory order.

    A target directory keeps its complete subtree; every other directory
    keeps only the children leading to a target.

    Args:
        directory: Root of the tree to project.
        targets: Locations of the nodes to keep visible.

    Returns:
        List[ProjectionItem]: The restricted rows.
    """
    target_set: Set[Location] = set()
    chains: Set[Location] = set()
    for loc in targets:
        target_set.add(tuple(loc))
        for k in range(1, len(loc) + 1):
            chains.add(tuple(loc[:k]))
    return _build_filtered(directory, (), target_set, chains)


def find_item(items: Sequence[ProjectionItem], location: Location) -> Optional[ProjectionItem]:
    """Return the row mirroring `location`, or None if it is not projected."""
    level: Sequence[ProjectionItem] = items
    found: Optional[ProjectionItem] = None
    for k in range(1, len(location) + 1):
        prefix = tuple(location[:k])
        found = next((item for item in level if item.location == prefix), None)
        if found is None:
            return None
        level = found.children
    return found

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _build(directory: DirectoryNode, base: Location) -> List[ProjectionItem]:
    items: List[ProjectionItem] = []
    for idx, node in enumerate(directory):
        location = base + (idx,)
        if isinstance(node, DirectoryNode):
            items.append(ProjectionItem(
                label=node.name,
                location=location,
                is_dir=True,
                children=tuple(_build(node, location)),
            ))
        elif isinstance(node, FileNode):
            items.append(ProjectionItem(label=node.name, location=location))
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")
    return items


def _build_filtered(
        directory: DirectoryNode,
        base: Location,
        targets: Set[Location],
        chains: Set[Location],
) -> List[ProjectionItem]:
    items: List[ProjectionItem] = []
    for idx, node in enumerate(directory):
        location = base + (idx,)
        if location not in chains:
            continue
        if isinstance(node, DirectoryNode):
            if location in targets:
                children = _build(node, location)
            else:
                children = _build_filtered(node, location, targets, chains)
            items.append(ProjectionItem(
                label=node.name,
                location=location,
                is_dir=True,
                children=tuple(children),
            ))
        elif isinstance(node, FileNode):
            items.append(ProjectionItem(label=node.name, location=location))
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")
    return items
