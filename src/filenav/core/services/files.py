from __future__ import annotations

"""
Tree Model Service.

Pairs the root DirectoryNode with its current projection and guarantees the
projection is rebuilt after every structural change. Implements
location-addressed mutation (add/remove), reconciliation with disk changes
committed elsewhere (add, delete, rename, move by path) and the projection
filter.

The model never touches the disk: callers perform the filesystem operation
first and only report it here once it has succeeded.
"""

import logging
import os
from typing import List, Optional

from filenav.core.analysis.projection import (
    ProjectionItem,
    build_filtered_projection,
    build_projection,
)
from filenav.domain.errors import InvalidLocation, NameConflict, NotFound
from filenav.domain.tree_models import (
    DirectoryNode,
    FileNode,
    Location,
    Node,
    last_of_path,
    relative_parts,
    validate_name,
)

logger = logging.getLogger(__name__)


class Files:
    """
    The root directory and its projection, always kept in step.

    Attributes:
        root: Root directory of the tree (read-only property).
        items: Current projection rows (read-only property).
    """

    def __init__(self, root: DirectoryNode) -> None:
        self._dir = root
        self._filter: Optional[List[str]] = None
        self._items: List[ProjectionItem] = build_projection(root)

    # -------------------------------------------------------------------------
    # READ ACCESS
    # -------------------------------------------------------------------------

    @property
    def root(self) -> DirectoryNode:
        return self._dir

    @property
    def items(self) -> List[ProjectionItem]:
        return self._items

    @property
    def filter_paths(self) -> Optional[List[str]]:
        """Active filter targets, or None when the full tree is projected."""
        return list(self._filter) if self._filter is not None else None

    def get(self, location: Location) -> Optional[Node]:
        return self._dir.nested_child(location)

    def find(self, path: str) -> Optional[Location]:
        return self._dir.find(path)

    # -------------------------------------------------------------------------
    # LOCATION-ADDRESSED MUTATION
    # -------------------------------------------------------------------------

    def remove_at(self, location: Location) -> Node:
        """
        Remove the node at `location` and rebuild the projection.

        Raises:
            InvalidLocation: If any step is out of range or goes through a file.
        """
        if not location:
            raise InvalidLocation("could not remove file: empty location")

        if len(location) == 1:
            item = self._dir.remove_child(location[0])
        else:
            parent = self._dir.nested_child(location[:-1])
            if not isinstance(parent, DirectoryNode):
                raise InvalidLocation(f"could not remove file: invalid location {location}")
            item = parent.remove_child(location[-1])

        logger.debug(f"Removed '{item.path}' at {location}")
        self._update()
        return item

    def add_at(self, location: Location, name: str) -> FileNode:
        """
        Append a file named `name` to the directory at `location`.

        The empty location addresses the root directory.

        Returns:
            FileNode: The inserted node, re-located by name after the rebuild.

        Raises:
            InvalidLocation: If `location` does not resolve to a directory.
            InvalidName: If `name` is not a single path component.
            NameConflict: If the directory already holds `name`.
        """
        directory = self._resolve_dir(location, "could not add file")
        directory.new_file(name)
        logger.debug(f"Added file '{name}' under '{directory.path}'")
        self._update()

        for child in directory:
            if isinstance(child, FileNode) and child.name == name:
                return child
        raise AssertionError(f"file '{name}' should be in '{directory.path}'")

    def add_dir_at(self, location: Location, name: str) -> DirectoryNode:
        """Append an empty directory named `name` to the directory at `location`."""
        directory = self._resolve_dir(location, "could not add directory")
        node = directory.new_dir(name)
        logger.debug(f"Added directory '{name}' under '{directory.path}'")
        self._update()
        return node

    # -------------------------------------------------------------------------
    # PATH-ADDRESSED RECONCILIATION
    # -------------------------------------------------------------------------

    def reconcile_add(self, path: str, is_dir: bool = False) -> Node:
        """
        Mirror a file or directory that was just created on disk.

        Raises:
            NotFound: If the parent directory of `path` is not in the tree.
        """
        parent = self._dir.locate_parent(path)
        if parent is None:
            raise NotFound(f"parent directory of '{path}' is not in the tree")

        name = last_of_path(path)
        node: Node = parent.new_dir(name) if is_dir else parent.new_file(name)
        logger.debug(f"Reconciled add of '{node.path}'")
        self._update()
        return node

    def reconcile_delete(self, path: str) -> Node:
        """
        Mirror a file or directory that was just deleted from disk.

        Raises:
            NotFound: If `path` is not in the tree.
        """
        location = self.find(path)
        if location is None:
            raise NotFound(f"'{path}' is not in the tree")
        return self.remove_at(location)

    def reconcile_rename(self, old_path: str, new_path: str) -> Node:
        """
        Mirror a rename: the node keeps its position, its path (and the path
        prefix of every descendant) changes in place.

        A new path with a different parent is handled as a move.

        Raises:
            NotFound: If `old_path` is not in the tree.
            NameConflict: If a directory already holds the new name.
        """
        old_norm = os.path.normpath(old_path)
        new_norm = os.path.normpath(new_path)
        if os.path.dirname(old_norm) != os.path.dirname(new_norm):
            return self.reconcile_move(old_path, new_path)

        location = self.find(old_norm)
        if location is None:
            raise NotFound(f"'{old_path}' is not in the tree")
        node = self._node_at(location)
        if old_norm == new_norm:
            return node

        parent = self._parent_of(location)
        new_name = last_of_path(new_norm)
        validate_name(new_name)
        self._evict_destination(parent, new_name, keep=node)

        node.set_path(new_norm)
        self._rewrite_filter(old_norm, new_norm)
        logger.debug(f"Reconciled rename '{old_norm}' -> '{new_norm}'")
        self._update()
        return node

    def reconcile_move(self, from_path: str, to_path: str) -> Node:
        """
        Mirror a move, with `mv` semantics for the destination.

        If `to_path` is a directory in the tree the node moves into it and
        keeps its name; otherwise `to_path` is the node's new full path. A
        file already at the destination is replaced. The subtree of a moved
        directory travels with it.

        Raises:
            NotFound: If the source or the destination parent is not in the tree.
            InvalidLocation: If a directory would move into itself.
            NameConflict: If a directory already occupies the destination.
        """
        src = os.path.normpath(from_path)
        location = self.find(src)
        if location is None:
            raise NotFound(f"'{from_path}' is not in the tree")
        node = self._node_at(location)
        old_parent = self._parent_of(location)

        into = self._dir.locate_dir(to_path)
        if into is not None and into is not node:
            target_parent = into
            dst = os.path.join(into.path, node.name)
        else:
            dst = os.path.normpath(to_path)
            found_parent = self._dir.locate_parent(dst)
            if found_parent is None:
                raise NotFound(f"destination directory of '{to_path}' is not in the tree")
            target_parent = found_parent

        if isinstance(node, DirectoryNode) and (
                target_parent is node or relative_parts(target_parent.path, node.path)
        ):
            raise InvalidLocation(f"cannot move '{src}' into itself")

        if target_parent is old_parent:
            return self.reconcile_rename(src, dst)

        new_name = last_of_path(dst)
        validate_name(new_name)
        self._evict_destination(target_parent, new_name, keep=node)

        old_parent.remove_child(location[-1])
        node.set_path(dst)
        target_parent.insert(node)
        self._rewrite_filter(src, dst)
        logger.debug(f"Reconciled move '{src}' -> '{dst}'")
        self._update()
        return node

    # -------------------------------------------------------------------------
    # PROJECTION FILTER
    # -------------------------------------------------------------------------

    def filter_include(self, paths: List[str]) -> List[Location]:
        """
        Restrict the projection to the ancestor chains of `paths`.

        The directory tree itself is untouched. Paths that are not in the
        tree are ignored.

        Returns:
            List[Location]: Locations of the targets that were found.
        """
        self._filter = [os.path.normpath(p) for p in paths]
        found = self._filter_locations()
        missing = len(self._filter) - len(found)
        if missing:
            logger.warning(f"Filter ignored {missing} path(s) not present in the tree")
        self._update()
        return found

    def clear_filter(self) -> None:
        """Drop the filter and rebuild the full projection."""
        self._filter = None
        self._update()

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _update(self) -> None:
        if self._filter is None:
            self._items = build_projection(self._dir)
        else:
            self._items = build_filtered_projection(self._dir, self._filter_locations())

    def _filter_locations(self) -> List[Location]:
        found: List[Location] = []
        for p in self._filter or []:
            location = self.find(p)
            if location is not None:
                found.append(location)
        return found

    def _rewrite_filter(self, old: str, new: str) -> None:
        if self._filter is None:
            return
        rewritten: List[str] = []
        for p in self._filter:
            if p == old:
                p = new
            else:
                parts = relative_parts(p, old)
                if parts:
                    p = os.path.join(new, *parts)
            rewritten.append(p)
        self._filter = rewritten

    def _resolve_dir(self, location: Location, action: str) -> DirectoryNode:
        if not location:
            return self._dir
        node = self._dir.nested_child(location)
        if not isinstance(node, DirectoryNode):
            raise InvalidLocation(f"{action}: invalid location {location}")
        return node

    def _node_at(self, location: Location) -> Node:
        node = self._dir.nested_child(location)
        if node is None:
            raise InvalidLocation(f"invalid location {location}")
        return node

    def _parent_of(self, location: Location) -> DirectoryNode:
        return self._resolve_dir(location[:-1], "could not resolve parent")

    def _evict_destination(self, parent: DirectoryNode, name: str, keep: Node) -> None:
        """Drop a file that the incoming entry overwrites, as `mv` does."""
        idx = parent.index_of(name)
        if idx is None:
            return
        existing = parent.children[idx]
        if existing is keep:
            return
        if isinstance(existing, DirectoryNode):
            raise NameConflict(f"directory '{existing.path}' already exists")
        parent.remove_child(idx)
        logger.debug(f"Replaced '{existing.path}'")
