"""
Page widget that shows a rendered page with its stamps and cursor preview.
"""
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QImage, QMouseEvent, QPixmap
from PyQt5.QtWidgets import QLabel

from stampdesk.core.document import PageRenderer
from stampdesk.core.stamps import StampManager


class StampPageLabel(QLabel):
    """
    Displays the current page and turns clicks into stamp placements.

    The rasterized page is kept as a base image; stamps and the cursor
    preview are composed over it on every refresh, so the preview never
    reaches the stamp store.
    """

    # Signals
    stamp_requested = pyqtSignal(float, float)  # display x, y

    def __init__(self, parent=None):
        super().__init__(parent)
        self.renderer: Optional[PageRenderer] = None
        self.manager: Optional[StampManager] = None
        self.page_number = 0

        self._base_image: Optional[QImage] = None
        self._cursor: Optional[tuple] = None

        self.setMouseTracking(True)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setCursor(Qt.CrossCursor)

    def bind(self, renderer: Optional[PageRenderer], manager: Optional[StampManager]):
        """Attach to a session, or detach with None."""
        self.renderer = renderer
        self.manager = manager
        self._base_image = None
        self._cursor = None
        self.page_number = 0
        self.clear()

    def set_page_image(self, page_number: int, image: QImage):
        """Install a freshly rendered page."""
        self.page_number = page_number
        self._base_image = image
        self.setFixedSize(image.size())
        self.refresh()

    def refresh(self):
        """Redraw stamps of the current page over the base image."""
        if self._base_image is None or self.renderer is None or self.manager is None:
            return

        preview = None
        if self._cursor is not None:
            preview = self.manager.preview_at(self._cursor[0], self._cursor[1],
                                              self.page_number)

        composed = self.renderer.compose_overlay(
            self._base_image,
            self.manager.stamps_for_page(self.page_number),
            preview,
        )
        self.setPixmap(QPixmap.fromImage(composed))

    def mouseMoveEvent(self, event: QMouseEvent):
        self._cursor = (float(event.pos().x()), float(event.pos().y()))
        self.refresh()
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        self._cursor = None
        self.refresh()
        super().leaveEvent(event)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton and self._base_image is not None:
            self.stamp_requested.emit(float(event.pos().x()), float(event.pos().y()))
            return
        super().mousePressEvent(event)
