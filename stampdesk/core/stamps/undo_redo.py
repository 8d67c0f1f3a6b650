"""
Undo/Redo functionality for placed stamps.
"""
from typing import Iterable, List, Optional

from .models import Stamp
from .store import Snapshot


class UndoRedoStack:
    """Linear undo/redo history of stamp store snapshots."""

    def __init__(self, max_size: Optional[int] = None):
        """
        Initialize the undo/redo stack.

        Args:
            max_size: Maximum number of undo states to keep, None for no limit
        """
        self.undo_stack: List[Snapshot] = []
        self.redo_stack: List[Snapshot] = []
        self.max_size = max_size

    @staticmethod
    def _copy_state(stamps: Iterable[Stamp]) -> Snapshot:
        return tuple(s.copy() for s in stamps)

    def record_before_change(self, current_state: Iterable[Stamp]) -> None:
        """
        Save the pre-mutation state. Must be called before the change is applied.

        Args:
            current_state: Stamps as they are before the change
        """
        self.undo_stack.append(self._copy_state(current_state))

        # A new edit invalidates everything that could be redone
        self.redo_stack.clear()

        if self.max_size is not None and len(self.undo_stack) > self.max_size:
            self.undo_stack.pop(0)

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return len(self.undo_stack) > 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return len(self.redo_stack) > 0

    def undo(self, current_state: Iterable[Stamp]) -> Optional[Snapshot]:
        """
        Step back one state.

        Args:
            current_state: Stamps before the undo

        Returns:
            Previous state to install, or None if undo is not available
        """
        if not self.can_undo():
            return None

        self.redo_stack.append(self._copy_state(current_state))
        return self.undo_stack.pop()

    def redo(self, current_state: Iterable[Stamp]) -> Optional[Snapshot]:
        """
        Step forward one state.

        Args:
            current_state: Stamps before the redo

        Returns:
            Next state to install, or None if redo is not available
        """
        if not self.can_redo():
            return None

        self.undo_stack.append(self._copy_state(current_state))
        return self.redo_stack.pop()

    def clear(self) -> None:
        """Clear both stacks."""
        self.undo_stack.clear()
        self.redo_stack.clear()
