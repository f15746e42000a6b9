from __future__ import annotations

"""
Filetree Navigation Service.

Combines the tree model (Files) with the navigation state (TreeState) and
is the single entry point the rest of an application talks to: keyboard
navigation, reveal-by-path, filtering, and reconciliation of disk changes
that another component has already committed.

Locations held by the navigation state are only valid for the tree shape
they were computed against. Every mutation therefore remembers the selected
node and the opened directories as node objects and re-derives their
Locations from the nodes' paths once the tree has changed.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from filenav.core.analysis.projection import ProjectionItem, find_item
from filenav.core.analysis.tree_builder import build_directory_tree
from filenav.core.analysis.tree_renderer import render_projection
from filenav.core.services.files import Files
from filenav.core.services.tree_state import TreeState
from filenav.domain.config import NAV_ACTIONS, default_key_bindings, get_default_config
from filenav.domain.errors import NotFound, SelectionInvariantError
from filenav.domain.events import (
    Add,
    AddFile,
    Delete,
    FilterFor,
    GotoFile,
    Move,
    Rename,
    RemoveSelected,
    TreeCommand,
)
from filenav.domain.tree_models import DirectoryNode, FileNode, Location, Node
from filenav.infra.fs import resolve_against

logger = logging.getLogger(__name__)

_Snapshot = Tuple[Optional[Node], List[Node]]


class Filetree:
    """
    Navigable view over one scanned directory.

    Attributes:
        state: Selection and expand set.
        files: Root directory and its projection.
        root_path: Absolute path of the scanned directory.
    """

    def __init__(
            self,
            root_path: str,
            files: Files,
            key_bindings: Optional[Dict[str, List[str]]] = None,
    ) -> None:
        self.root_path = root_path
        self.files = files
        self.state = TreeState()
        self.state.select_first(files.items)
        self._focused = True
        self._key_map = _build_key_map(
            key_bindings if key_bindings is not None else default_key_bindings()
        )

    @classmethod
    def from_dir(cls, path: str, config: Optional[Dict[str, Any]] = None) -> Filetree:
        """
        Scan `path` and build a tree with the first row selected.

        Args:
            path: Directory to scan.
            config: Settings block (see domain.config); defaults when None.
        """
        cfg = config if config is not None else get_default_config()
        root = build_directory_tree(
            path,
            exclude_patterns=cfg.get("exclude_patterns"),
            show_hidden=bool(cfg.get("show_hidden", False)),
        )
        return cls(root.path, Files(root), key_bindings=cfg.get("key_bindings"))

    @property
    def items(self) -> List[ProjectionItem]:
        return self.files.items

    # -------------------------------------------------------------------------
    # FOCUS AND KEY INPUT
    # -------------------------------------------------------------------------

    @property
    def focused(self) -> bool:
        return self._focused

    def focus(self, focused: bool) -> None:
        self._focused = focused

    def handle_key(self, key: str) -> bool:
        """
        Run the navigation action bound to `key`.

        Returns:
            bool: True if the key was consumed. Unfocused trees consume nothing.
        """
        if not self._focused:
            return False
        action = self._key_map.get(key)
        if action is None:
            return False
        getattr(self, action)()
        return True

    # -------------------------------------------------------------------------
    # NAVIGATION
    # -------------------------------------------------------------------------

    def first(self) -> None:
        self.state.select_first(self.items)

    def last(self) -> None:
        self.state.select_last(self.items)

    def toggle(self) -> None:
        """Expand or collapse the selected directory; no-op for files."""
        if isinstance(self.get_selected(), DirectoryNode):
            self.state.toggle_selected()

    def expand_all(self) -> None:
        """Open every projected directory."""
        stack = list(self.items)
        while stack:
            item = stack.pop()
            if item.is_dir:
                self.state.open(item.location)
                stack.extend(item.children)

    def down(self) -> None:
        self.state.key_down(self.items)

    def up(self) -> None:
        self.state.key_up(self.items)

    def get_node(self, location: Location) -> Optional[Node]:
        return self.files.get(location)

    def get_selected(self) -> Optional[Node]:
        """
        Return the selected node.

        None only when there is nothing to select (empty tree or a filter
        that matched nothing).

        Raises:
            SelectionInvariantError: If the selection does not resolve, or is
                hidden while the tree has focus.
        """
        rows = self.state.visible(self.items)
        if not rows:
            return None
        node = self.get_node(self.state.selected)
        if node is None:
            raise SelectionInvariantError(f"selected {self.state.selected} should be in tree")
        if self._focused and self.state.selected not in rows:
            raise SelectionInvariantError(f"selected {self.state.selected} should be visible")
        return node

    def selected_path(self) -> Optional[str]:
        node = self.get_selected()
        return node.path if node is not None else None

    def open_path(self, path: str) -> None:
        """
        Reveal `path`: expand every ancestor directory and select it.

        A relative path is resolved against the tree root. An active filter
        that hides the target is cleared.

        Raises:
            NotFound: If `path` is not under the root.
        """
        target = resolve_against(path, self.root_path)
        location = self.files.find(target)
        if location is None:
            raise NotFound(f"'{target}' is not in the tree")

        if self.files.filter_paths is not None and find_item(self.items, location) is None:
            logger.debug("Clearing filter to reveal target")
            self.files.clear_filter()

        self._reveal(location)
        self.state.select(location)
        logger.info(f"Opened path {target}")

    # -------------------------------------------------------------------------
    # FILTERING
    # -------------------------------------------------------------------------

    def filter_include(self, paths: List[str]) -> None:
        """Show only the ancestor chains of `paths`, expanded; empty clears."""
        if not paths:
            self.clear_filter()
            return
        snapshot = self._snapshot()
        found = self.files.filter_include([resolve_against(p, self.root_path) for p in paths])
        self._restore(snapshot, self.state.selected)
        for location in found:
            self._reveal(location)
        self._ensure_selection_visible()

    def clear_filter(self) -> None:
        snapshot = self._snapshot()
        self.files.clear_filter()
        self._restore(snapshot, self.state.selected)

    # -------------------------------------------------------------------------
    # MUTATION
    # -------------------------------------------------------------------------

    def remove_file(self, location: Location) -> Node:
        """
        Remove the node at `location`.

        Expand state is re-derived per node, so the node that slides into
        the vacated location keeps its own open/closed state and never
        inherits the removed one's.
        """
        snapshot = self._snapshot()
        item = self.files.remove_at(location)
        self._restore(snapshot, location)
        return item

    def remove_selected(self) -> Node:
        return self.remove_file(self.state.selected)

    def add_file(self, location: Location, name: str) -> FileNode:
        snapshot = self._snapshot()
        node = self.files.add_at(location, name)
        self._restore(snapshot, self.state.selected)
        return node

    def add_dir(self, location: Location, name: str) -> DirectoryNode:
        snapshot = self._snapshot()
        node = self.files.add_dir_at(location, name)
        self._restore(snapshot, self.state.selected)
        return node

    def reconcile_add(self, path: str, is_dir: bool = False) -> Node:
        snapshot = self._snapshot()
        node = self.files.reconcile_add(path, is_dir=is_dir)
        self._restore(snapshot, self.state.selected)
        return node

    def reconcile_delete(self, path: str) -> Node:
        snapshot = self._snapshot()
        node = self.files.reconcile_delete(path)
        self._restore(snapshot, self.state.selected)
        return node

    def reconcile_rename(self, old_path: str, new_path: str) -> Node:
        snapshot = self._snapshot()
        node = self.files.reconcile_rename(old_path, new_path)
        self._restore(snapshot, self.state.selected)
        return node

    def reconcile_move(self, from_path: str, to_path: str) -> Node:
        snapshot = self._snapshot()
        node = self.files.reconcile_move(from_path, to_path)
        self._restore(snapshot, self.state.selected)
        return node

    # -------------------------------------------------------------------------
    # COMMAND DISPATCH
    # -------------------------------------------------------------------------

    def dispatch(self, command: TreeCommand) -> Any:
        """
        Apply one external command record.

        Disk-change commands must only be sent after the disk operation
        succeeded; nothing here touches the filesystem.
        """
        logger.debug(f"Dispatching {command!r}")
        if isinstance(command, Delete):
            return self.reconcile_delete(command.path)
        if isinstance(command, Add):
            return self.reconcile_add(command.path, is_dir=command.is_dir)
        if isinstance(command, Rename):
            return self.reconcile_rename(command.old, command.new)
        if isinstance(command, Move):
            return self.reconcile_move(command.src, command.dst)
        if isinstance(command, FilterFor):
            return self.filter_include(list(command.paths))
        if isinstance(command, GotoFile):
            return self.open_path(command.path)
        if isinstance(command, RemoveSelected):
            return self.remove_selected()
        if isinstance(command, AddFile):
            return self.add_file(command.location, command.name)
        raise TypeError(f"Unknown command: {type(command).__name__}")

    # -------------------------------------------------------------------------
    # RENDERING
    # -------------------------------------------------------------------------

    def render(self) -> List[str]:
        """ASCII lines of the projection as currently expanded."""
        lines: List[str] = []
        render_projection(self.items, lines, opened=self.state.opened)
        return lines

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _snapshot(self) -> _Snapshot:
        selected = self.get_node(self.state.selected)
        opened = [
            node for node in (self.get_node(loc) for loc in self.state.opened)
            if isinstance(node, DirectoryNode)
        ]
        return selected, opened

    def _restore(self, snapshot: _Snapshot, fallback: Location) -> None:
        selected, opened = snapshot

        relocated = set()
        for node in opened:
            location = self._relocate(node)
            if location is not None:
                relocated.add(location)
        self.state.opened = relocated

        location = self._relocate(selected) if selected is not None else None
        if location is None:
            location = self._nearest_valid(fallback)
        self.state.select(location)
        self._ensure_selection_visible()

    def _relocate(self, node: Node) -> Optional[Location]:
        location = self.files.find(node.path)
        if location is None or self.files.get(location) is not node:
            return None
        return location

    def _nearest_valid(self, location: Location) -> Location:
        """Same index if still occupied, else the previous sibling, else the parent."""
        while location:
            parent, idx = location[:-1], location[-1]
            directory = self.files.root if not parent else self.files.get(parent)
            if isinstance(directory, DirectoryNode):
                if len(directory):
                    return parent + (min(idx, len(directory) - 1),)
                return parent
            location = parent
        return ()

    def _reveal(self, location: Location) -> None:
        for k in range(1, len(location)):
            self.state.open(location[:k])

    def _ensure_selection_visible(self) -> None:
        rows = self.state.visible(self.items)
        if not rows:
            self.state.select(())
            return
        if self.state.selected in rows:
            return
        if find_item(self.items, self.state.selected) is not None:
            self._reveal(self.state.selected)
            return
        self.state.select(rows[0])


def _build_key_map(bindings: Dict[str, List[str]]) -> Dict[str, str]:
    """Invert action -> keys into key -> action, ignoring unknown actions."""
    key_map: Dict[str, str] = {}
    for action, keys in bindings.items():
        if action not in NAV_ACTIONS:
            logger.warning(f"Ignoring key binding for unknown action '{action}'")
            continue
        for key in keys:
            key_map[key] = action
    return key_map
