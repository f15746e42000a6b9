from __future__ import annotations

"""
External Command Records.

Immutable records describing requests that reach the tree from outside:
disk changes another component has already committed (Add, Delete, Rename,
Move) and UI-level requests (FilterFor, GotoFile, RemoveSelected, AddFile).
Consumed by Filetree.dispatch.
"""

from dataclasses import dataclass, field
from typing import List, Union

from filenav.domain.tree_models import Location


@dataclass(frozen=True)
class Delete:
    path: str


@dataclass(frozen=True)
class Add:
    path: str
    is_dir: bool = False


@dataclass(frozen=True)
class Rename:
    old: str
    new: str


@dataclass(frozen=True)
class Move:
    src: str
    dst: str


@dataclass(frozen=True)
class FilterFor:
    """Restrict the projection to these paths; an empty list clears the filter."""
    paths: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GotoFile:
    """Reveal and select `path`; relative paths resolve against the tree root."""
    path: str


@dataclass(frozen=True)
class RemoveSelected:
    pass


@dataclass(frozen=True)
class AddFile:
    location: Location
    name: str


TreeCommand = Union[Delete, Add, Rename, Move, FilterFor, GotoFile, RemoveSelected, AddFile]
