"""
Live set of placed stamps for one document.
"""
from typing import Iterable, List, Tuple

from .models import Stamp, StampKind

Snapshot = Tuple[Stamp, ...]


class StampStore:
    """
    Holds placed stamps in insertion order.

    Insertion order is the z-order: later stamps render on top of earlier
    ones, both in the live preview and in the exported document.
    """

    def __init__(self):
        self._stamps: List[Stamp] = []

    def place(self, kind: StampKind, position: Tuple[float, float],
              size: float, page: int) -> Stamp:
        """
        Append a new stamp.

        Args:
            kind: Stamp kind to place
            position: Display-space center (x, y)
            size: Display size of the stamp
            page: 1-based page number

        Returns:
            The placed stamp
        """
        x, y = position
        stamp = Stamp(page_number=page, x=float(x), y=float(y),
                      size=float(size), kind=kind)
        self._stamps.append(stamp)
        return stamp

    def remove_all_for_page(self, page: int) -> int:
        """
        Remove every stamp on a page.

        Returns:
            Number of stamps removed
        """
        kept = [s for s in self._stamps if s.page_number != page]
        removed = len(self._stamps) - len(kept)
        self._stamps = kept
        return removed

    def list(self, page: int) -> List[Stamp]:
        """Stamps on a page, in placement order."""
        return [s for s in self._stamps if s.page_number == page]

    def all(self) -> List[Stamp]:
        return list(self._stamps)

    def pages(self) -> List[int]:
        """Sorted page numbers that carry at least one stamp."""
        return sorted({s.page_number for s in self._stamps})

    def snapshot(self) -> Snapshot:
        """Value copy of the current stamps."""
        return tuple(s.copy() for s in self._stamps)

    def replace(self, snapshot: Iterable[Stamp]) -> None:
        """Substitute the whole set. Used by undo/redo restoration only."""
        self._stamps = [s.copy() for s in snapshot]

    def clear(self) -> None:
        self._stamps = []

    def count(self) -> int:
        return len(self._stamps)

    def is_empty(self) -> bool:
        return not self._stamps

    def __len__(self) -> int:
        return len(self._stamps)
