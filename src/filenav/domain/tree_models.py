from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the recursive node types of the navigable tree. A node is either
a FileNode (leaf) or a DirectoryNode (ordered container); every consumer
dispatches on exactly these two variants. Children are addressed by their
local index or, across levels, by a Location (tuple of indices from root).
"""

import os
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from filenav.domain.errors import InvalidLocation, InvalidName, NameConflict

Location = Tuple[int, ...]

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class FileNode:
    """
    Represents a leaf entry (file) in the directory tree.

    Attributes:
        path: Absolute filesystem path to the file.
    """
    path: str

    @property
    def name(self) -> str:
        return last_of_path(self.path)

    def set_path(self, path: str) -> None:
        self.path = path


@dataclass
class DirectoryNode:
    """
    Represents a directory and its ordered direct children.

    The order of `children` is the order established at build or insert
    time; it is the order exposed to indices and to the projection.

    Attributes:
        path: Absolute filesystem path to the directory.
        children: Direct child nodes, files and directories intermixed.
    """
    path: str
    children: List[Node] = field(default_factory=list)

    @property
    def name(self) -> str:
        return last_of_path(self.path)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    # -------------------------------------------------------------------------
    # INDEX ADDRESSING
    # -------------------------------------------------------------------------

    def child(self, index: int) -> Optional[Node]:
        """Return the direct child at `index`, or None when out of range."""
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def nested_child(self, location: Location) -> Optional[Node]:
        """
        Resolve a multi-level location relative to this directory.

        Args:
            location: Index path; the first index selects a direct child.

        Returns:
            Optional[Node]: The addressed node, or None if any step is out of
            range or descends through a file. An empty location is None.
        """
        if not location:
            return None

        node: Node = self
        for idx in location:
            if isinstance(node, DirectoryNode):
                found = node.child(idx)
                if found is None:
                    return None
                node = found
            elif isinstance(node, FileNode):
                # Path goes through a file, invalid
                return None
            else:
                raise TypeError(f"Unknown node type: {type(node).__name__}")
        return node

    def remove_child(self, index: int) -> Node:
        """
        Detach and return the child at `index`; later indices shift down by one.

        Raises:
            InvalidLocation: If `index` is out of range.
        """
        if not 0 <= index < len(self.children):
            raise InvalidLocation(
                f"could not remove child {index} of '{self.path}': "
                f"directory has {len(self.children)} entries"
            )
        return self.children.pop(index)

    # -------------------------------------------------------------------------
    # INSERTION
    # -------------------------------------------------------------------------

    def new_file(self, name: str) -> FileNode:
        """
        Append a new file entry named `name` under this directory.

        Raises:
            InvalidName: If `name` is not a single path component.
            NameConflict: If an entry with that name already exists.
        """
        self._check_insertable(name)
        node = FileNode(path=os.path.join(self.path, name))
        self.children.append(node)
        return node

    def new_dir(self, name: str) -> DirectoryNode:
        """Append a new, empty directory entry named `name`."""
        self._check_insertable(name)
        node = DirectoryNode(path=os.path.join(self.path, name))
        self.children.append(node)
        return node

    def insert(self, node: Node) -> Node:
        """
        Append an existing detached node, re-rooting it under this directory.

        Used when a subtree moves between directories: the node keeps its
        name and descendants, only the path prefix changes.
        """
        self._check_insertable(node.name)
        node.set_path(os.path.join(self.path, node.name))
        self.children.append(node)
        return node

    # -------------------------------------------------------------------------
    # PATH ADDRESSING
    # -------------------------------------------------------------------------

    def index_of(self, name: str) -> Optional[int]:
        """Return the index of the first direct child named `name`."""
        for i, item in enumerate(self.children):
            if item.name == name:
                return i
        return None

    def find(self, path: str) -> Optional[Location]:
        """
        Translate an absolute path under this directory into a Location.

        Descends one path component per level; returns None if `path` is
        not strictly inside this directory or any component is missing.
        """
        parts = relative_parts(path, self.path)
        if not parts:
            return None

        location: List[int] = []
        node: Node = self
        for part in parts:
            if not isinstance(node, DirectoryNode):
                return None
            idx = node.index_of(part)
            if idx is None:
                return None
            location.append(idx)
            node = node.children[idx]
        return tuple(location)

    def locate_dir(self, path: str) -> Optional[DirectoryNode]:
        """Return the directory node whose path equals `path` (self included)."""
        if os.path.normpath(path) == os.path.normpath(self.path):
            return self
        location = self.find(path)
        if location is None:
            return None
        node = self.nested_child(location)
        return node if isinstance(node, DirectoryNode) else None

    def locate_parent(self, path: str) -> Optional[DirectoryNode]:
        """Return the directory that owns `path` as a direct child."""
        parent = os.path.dirname(os.path.normpath(path))
        return self.locate_dir(parent)

    def set_path(self, path: str) -> None:
        """Re-root this directory, rewriting the prefix of every descendant."""
        self.path = path
        for item in self.children:
            item.set_path(os.path.join(path, item.name))

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _check_insertable(self, name: str) -> None:
        validate_name(name)
        if self.index_of(name) is not None:
            raise NameConflict(f"'{name}' already exists in '{self.path}'")


Node = Union[DirectoryNode, FileNode]

# -----------------------------------------------------------------------------
# PATH HELPERS
# -----------------------------------------------------------------------------

def last_of_path(path: str) -> str:
    """Return the final component of `path` ('' for a filesystem root)."""
    return os.path.basename(os.path.normpath(path))


def relative_parts(path: str, base: str) -> List[str]:
    """
    Split `path` into components relative to `base`.

    Returns:
        List[str]: Components below `base`; empty if `path` equals `base`
        or lies outside it.
    """
    norm_path = os.path.normpath(path)
    norm_base = os.path.normpath(base)
    if norm_path == norm_base:
        return []
    try:
        if os.path.commonpath([norm_path, norm_base]) != norm_base:
            return []
    except ValueError:
        # Mixed absolute/relative or different drives
        return []
    rel = os.path.relpath(norm_path, norm_base)
    return [p for p in rel.split(os.sep) if p and p != os.curdir]


def validate_name(name: str) -> None:
    """
    Ensure `name` is usable as a single directory entry.

    Raises:
        InvalidName: On empty, relative or multi-component names.
    """
    if not name or name in (os.curdir, os.pardir):
        raise InvalidName(f"invalid entry name: '{name}'")
    if os.sep in name or (os.altsep and os.altsep in name):
        raise InvalidName(f"entry name must not contain a path separator: '{name}'")
