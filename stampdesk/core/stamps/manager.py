"""
Stamp manager that coordinates placement, clearing and undo/redo.
"""
import logging
from typing import Callable, List, Optional

from stampdesk.config import StamperSettings
from stampdesk.errors import NoStampSelectedError
from .models import Stamp, StampKind
from .store import StampStore
from .undo_redo import UndoRedoStack

logger = logging.getLogger(__name__)


class StampManager:
    """
    Editing facade over the stamp store for one document session.

    Every mutating action records the pre-change snapshot and then applies
    the change. Listeners registered with subscribe() are called after each
    state change.
    """

    def __init__(self, settings: Optional[StamperSettings] = None,
                 initial_kind: Optional[StampKind] = None):
        self.settings = settings or StamperSettings()
        self.store = StampStore()
        self.undo_redo_stack = UndoRedoStack(self.settings.history_limit)

        self.selected_kind: Optional[StampKind] = None
        self.current_size: float = self.settings.default_stamp_size

        self._listeners: List[Callable[[], None]] = []

        if initial_kind is not None:
            self.select_kind(initial_kind)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------------
    # Working selection
    # ------------------------------------------------------------------

    def select_kind(self, kind: StampKind) -> None:
        """Select a stamp kind and reset the working size to its default."""
        self.selected_kind = kind
        self.current_size = self._clamp(kind.default_size)
        self._notify()

    def set_size(self, size: float) -> float:
        self.current_size = self._clamp(size)
        self._notify()
        return self.current_size

    def increase_size(self) -> float:
        return self.set_size(self.current_size + self.settings.stamp_size_step)

    def decrease_size(self) -> float:
        return self.set_size(self.current_size - self.settings.stamp_size_step)

    def _clamp(self, size: float) -> float:
        return max(self.settings.min_stamp_size,
                   min(self.settings.max_stamp_size, float(size)))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def place_at(self, x: float, y: float, page: int) -> Stamp:
        """
        Place the selected kind at the current size.

        Args:
            x: Display-space x of the stamp center
            y: Display-space y of the stamp center
            page: 1-based page number

        Returns:
            The placed stamp
        """
        if self.selected_kind is None:
            raise NoStampSelectedError("Select a stamp before placing it")

        self.undo_redo_stack.record_before_change(self.store.all())
        stamp = self.store.place(self.selected_kind, (x, y), self.current_size, page)
        logger.debug("Placed %s on page %d at (%.1f, %.1f)",
                     stamp.kind.id, page, x, y)
        self._notify()
        return stamp

    def clear_page(self, page: int) -> int:
        """
        Remove every stamp on a page.

        Returns:
            Number of stamps removed
        """
        self.undo_redo_stack.record_before_change(self.store.all())
        removed = self.store.remove_all_for_page(page)
        self._notify()
        return removed

    def undo(self) -> bool:
        """
        Perform undo operation.

        Returns:
            True if undo was successful
        """
        previous_state = self.undo_redo_stack.undo(self.store.all())
        if previous_state is None:
            return False
        self.store.replace(previous_state)
        self._notify()
        return True

    def redo(self) -> bool:
        """
        Perform redo operation.

        Returns:
            True if redo was successful
        """
        next_state = self.undo_redo_stack.redo(self.store.all())
        if next_state is None:
            return False
        self.store.replace(next_state)
        self._notify()
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.undo_redo_stack.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.undo_redo_stack.can_redo()

    def reset(self) -> None:
        """Drop all stamps and history."""
        self.store.clear()
        self.undo_redo_stack.clear()
        self._notify()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def preview_at(self, x: float, y: float, page: int) -> Optional[Stamp]:
        """Transient stamp for the cursor preview. Never stored."""
        if self.selected_kind is None:
            return None
        return Stamp(page_number=page, x=float(x), y=float(y),
                     size=self.current_size, kind=self.selected_kind)

    def stamps_for_page(self, page: int) -> List[Stamp]:
        return self.store.list(page)

    def all_stamps(self) -> List[Stamp]:
        return self.store.all()

    def get_stamp_count(self) -> int:
        """Get total number of stamps."""
        return self.store.count()
