from __future__ import annotations

"""
Directory Tree Builder.

Scans a directory once, recursively, and produces the root DirectoryNode
of the navigable tree. Entries of each directory are ordered by name with
files and subdirectories intermixed; that order is the index order the
rest of the package relies on.
"""

import logging
import os
from typing import Dict, List, Optional

from filenav.core.components.filters import (
    compile_patterns,
    default_exclude_patterns,
    should_skip,
)
from filenav.domain.tree_models import DirectoryNode, FileNode

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_directory_tree(
        root_path: str,
        exclude_patterns: Optional[List[str]] = None,
        show_hidden: bool = False,
) -> DirectoryNode:
    """
    Build the in-memory tree for `root_path`.

    One DirectoryNode per on-disk directory, one FileNode per file.
    Symlinked directories become (empty) DirectoryNodes and are never
    descended into.

    Args:
        root_path: Directory to scan.
        exclude_patterns: Regexes matched against entry names; matching
            entries (and whole subtrees) are skipped.
        show_hidden: Keep dot-prefixed entries when True.

    Returns:
        DirectoryNode: The root of the scanned tree.

    Raises:
        NotADirectoryError: If `root_path` is not an existing directory.
    """
    root_abs = os.path.abspath(root_path)
    if not os.path.isdir(root_abs):
        raise NotADirectoryError(f"not a directory: {root_abs}")

    patterns = exclude_patterns if exclude_patterns is not None else default_exclude_patterns()
    exclude_rx = compile_patterns(patterns)

    logger.info(f"Scanning directory tree: {root_abs}")
    root = DirectoryNode(path=root_abs)
    by_path: Dict[str, DirectoryNode] = {root_abs: root}
    dir_count = 0
    file_count = 0

    for current, dirs, files in os.walk(root_abs, onerror=_log_walk_error):
        # In-place modification of dirs for pruning during walk
        dirs[:] = [d for d in dirs if not should_skip(d, exclude_rx, show_hidden)]
        files = [f for f in files if not should_skip(f, exclude_rx, show_hidden)]
        dirs.sort()

        parent = by_path[current]
        dir_names = set(dirs)
        for name in sorted(dir_names.union(files)):
            full_path = os.path.join(current, name)
            if name in dir_names:
                node = DirectoryNode(path=full_path)
                by_path[full_path] = node
                dir_count += 1
            else:
                node = FileNode(path=full_path)
                file_count += 1
            parent.children.append(node)

    logger.debug(f"Scan complete: {dir_count} directories, {file_count} files")
    return root

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _log_walk_error(err: OSError) -> None:
    """Unreadable directories stay in the tree as empty nodes."""
    logger.warning(f"Could not read '{err.filename}': {err.strerror}")
