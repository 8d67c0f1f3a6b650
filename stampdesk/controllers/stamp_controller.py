"""
Controller bridging the stamp manager to Qt widgets.
"""
import logging
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from stampdesk.core.stamps import Stamp, StampKind, StampManager
from stampdesk.errors import NoStampSelectedError

logger = logging.getLogger(__name__)


class StampController(QObject):
    """Re-emits stamp manager changes as Qt signals and forwards user actions."""

    # Signals
    stamps_changed = pyqtSignal()  # Emitted after any state change
    history_changed = pyqtSignal(bool, bool)  # can_undo, can_redo
    size_changed = pyqtSignal(float)

    def __init__(self, manager: StampManager, parent=None):
        super().__init__(parent)
        self.manager = manager
        self._unsubscribe = manager.subscribe(self._on_manager_changed)
        self._last_size = manager.current_size

    def _on_manager_changed(self):
        self.stamps_changed.emit()
        self.history_changed.emit(self.manager.can_undo(), self.manager.can_redo())
        if self.manager.current_size != self._last_size:
            self._last_size = self.manager.current_size
            self.size_changed.emit(self._last_size)

    def detach(self):
        """Stop listening to the manager, used when the session is torn down."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def place_stamp(self, x: float, y: float, page: int) -> Optional[Stamp]:
        """
        Place the selected stamp at a display point.

        Returns:
            The placed stamp, or None when no stamp kind is selected
        """
        try:
            return self.manager.place_at(x, y, page)
        except NoStampSelectedError as e:
            logger.info("%s", e)
            return None

    def clear_page(self, page: int) -> int:
        return self.manager.clear_page(page)

    def select_kind(self, kind: StampKind) -> None:
        self.manager.select_kind(kind)

    def set_size(self, size: float) -> float:
        return self.manager.set_size(size)

    def increase_size(self) -> float:
        return self.manager.increase_size()

    def decrease_size(self) -> float:
        return self.manager.decrease_size()

    def undo(self) -> bool:
        """Undo the last stamp action."""
        return self.manager.undo()

    def redo(self) -> bool:
        """Redo the last undone stamp action."""
        return self.manager.redo()

    def can_undo(self) -> bool:
        return self.manager.can_undo()

    def can_redo(self) -> bool:
        return self.manager.can_redo()
