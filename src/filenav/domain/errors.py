from __future__ import annotations

"""
Tree Error Hierarchy.

Recoverable failures raised by the in-memory tree model. Every operation
that raises one of the TreeError subclasses leaves the tree and its
projection exactly as they were before the call.
"""


class TreeError(Exception):
    """Base class for recoverable tree model failures."""


class InvalidLocation(TreeError):
    """An index is out of range or a location descends through a file."""


class NotFound(TreeError):
    """A path-addressed target does not exist in the tree."""


class NameConflict(TreeError):
    """The target directory already holds an entry with the same name."""


class InvalidName(TreeError):
    """A child name is empty, relative ('.', '..') or spans several components."""


class SelectionInvariantError(RuntimeError):
    """
    The navigation selection no longer resolves to a visible node.

    Not a TreeError: this is a logic defect in the caller, never a
    condition to recover from.
    """
