from __future__ import annotations

"""
Navigation State.

Selection and expand/collapse bookkeeping over a projection. Visible order
is the depth-first order of the projection rows, descending only into
opened directories. Movement clamps at both ends; there is no wraparound.
"""

from typing import List, Sequence, Set

from filenav.core.analysis.projection import ProjectionItem
from filenav.domain.tree_models import Location


class TreeState:
    """
    Selected location plus the set of opened directory locations.

    Attributes:
        selected: Location of the selected row; () when nothing is selected.
        opened: Locations of the directories currently expanded.
    """

    def __init__(self) -> None:
        self.selected: Location = ()
        self.opened: Set[Location] = set()

    # -------------------------------------------------------------------------
    # VISIBLE ORDER
    # -------------------------------------------------------------------------

    def visible(self, items: Sequence[ProjectionItem]) -> List[Location]:
        """Locations of the visible rows, in depth-first display order."""
        rows: List[Location] = []
        self._flatten(items, rows)
        return rows

    # -------------------------------------------------------------------------
    # SELECTION
    # -------------------------------------------------------------------------

    def select(self, location: Location) -> None:
        self.selected = tuple(location)

    def select_first(self, items: Sequence[ProjectionItem]) -> None:
        self.selected = items[0].location if items else ()

    def select_last(self, items: Sequence[ProjectionItem]) -> None:
        rows = self.visible(items)
        self.selected = rows[-1] if rows else ()

    def key_down(self, items: Sequence[ProjectionItem]) -> None:
        self._move(items, 1)

    def key_up(self, items: Sequence[ProjectionItem]) -> None:
        self._move(items, -1)

    # -------------------------------------------------------------------------
    # EXPAND SET
    # -------------------------------------------------------------------------

    def open(self, location: Location) -> None:
        self.opened.add(tuple(location))

    def close(self, location: Location) -> None:
        self.opened.discard(tuple(location))

    def toggle_selected(self) -> None:
        if self.selected in self.opened:
            self.close(self.selected)
        elif self.selected:
            self.open(self.selected)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _flatten(self, items: Sequence[ProjectionItem], rows: List[Location]) -> None:
        for item in items:
            rows.append(item.location)
            if item.is_dir and item.location in self.opened:
                self._flatten(item.children, rows)

    def _move(self, items: Sequence[ProjectionItem], step: int) -> None:
        rows = self.visible(items)
        if not rows:
            self.selected = ()
            return
        try:
            current = rows.index(self.selected)
        except ValueError:
            self.selected = rows[0]
            return
        target = max(0, min(len(rows) - 1, current + step))
        self.selected = rows[target]
