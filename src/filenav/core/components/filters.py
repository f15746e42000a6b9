from __future__ import annotations

"""
Scan Filtering Engine.

Implements regex-based exclusion and hidden-entry detection used while
scanning the filesystem into the in-memory tree.
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_exclude_patterns() -> List[str]:
    """
    Get the system-level exclusion patterns.

    Identifies version-control metadata and dependency caches that are
    skipped by default.

    Returns:
        List[str]: List of regex patterns for common exclusions.
    """
    return [
        r"^(__pycache__|\.git|\.hg|\.svn|node_modules)$",
    ]

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: List[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed regex strings are discarded (and logged) so a bad user
    pattern never aborts a scan.

    Args:
        patterns: List of raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Discarding invalid exclude pattern '{p}': {e}")
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """
    Verify if an entry name matches at least one compiled regex pattern.

    Args:
        name: Filename or directory name to evaluate.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found, False otherwise.
    """
    return any(rx.search(name) for rx in compiled_patterns)


def is_hidden(name: str) -> bool:
    """Dotfile convention: names starting with '.' are hidden."""
    return name.startswith(".")


def should_skip(name: str, exclude_rx: List[re.Pattern], show_hidden: bool) -> bool:
    """Combined scan predicate for one directory entry name."""
    if not show_hidden and is_hidden(name):
        return True
    return matches_any(name, exclude_rx)
