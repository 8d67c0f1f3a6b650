"""
Background page rendering with per-session request coalescing.
"""
import logging
from typing import Optional

from PyQt5.QtCore import QObject, QThread, pyqtSignal

from stampdesk.errors import PageRenderError
from .renderer import PageRenderer

logger = logging.getLogger(__name__)


class RenderWorker(QThread):
    """Worker thread that rasterizes one page without freezing the UI."""

    # Signals
    rendered = pyqtSignal(int, object)  # page_number, QImage
    error = pyqtSignal(int, str)  # page_number, message

    def __init__(self, renderer: PageRenderer, page_number: int, parent=None):
        super().__init__(parent)
        self._renderer = renderer
        self.page_number = page_number
        self._cancelled = False

    def cancel(self):
        """Drop the result of this render."""
        self._cancelled = True

    def run(self):
        """Execute the render in background thread."""
        try:
            image = self._renderer.render_page(self.page_number)
        except PageRenderError as e:
            if not self._cancelled:
                self.error.emit(self.page_number, str(e))
            return

        if not self._cancelled:
            self.rendered.emit(self.page_number, image)


class RenderQueue(QObject):
    """
    Serializes page render requests for one session.

    At most one worker runs at a time. A request made while a render is in
    flight replaces any request still waiting, and a finished render is only
    reported if its page is still the one most recently requested.
    """

    page_rendered = pyqtSignal(int, object)  # page_number, QImage
    render_failed = pyqtSignal(int, str)  # page_number, message

    def __init__(self, renderer: PageRenderer, parent=None):
        super().__init__(parent)
        self._renderer = renderer
        self._worker: Optional[RenderWorker] = None
        self._pending: Optional[int] = None
        self._latest: Optional[int] = None
        self._closed = False

    @property
    def is_busy(self) -> bool:
        return self._worker is not None

    def request(self, page_number: int) -> None:
        """Ask for a page to be rendered."""
        if self._closed:
            return
        self._latest = page_number
        if self._worker is not None:
            self._pending = page_number
            return
        self._start(page_number)

    def _start(self, page_number: int) -> None:
        worker = RenderWorker(self._renderer, page_number)
        worker.rendered.connect(self._on_rendered)
        worker.error.connect(self._on_error)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker
        worker.start()

    def _on_rendered(self, page_number: int, image) -> None:
        if self._closed or page_number != self._latest:
            logger.debug("Dropping superseded render of page %d", page_number)
            return
        self.page_rendered.emit(page_number, image)

    def _on_error(self, page_number: int, message: str) -> None:
        if self._closed or page_number != self._latest:
            return
        self.render_failed.emit(page_number, message)

    def _on_worker_finished(self) -> None:
        worker = self._worker
        self._worker = None
        if worker is not None:
            worker.deleteLater()

        if self._closed:
            return
        pending = self._pending
        self._pending = None
        if pending is not None:
            self._start(pending)

    def shutdown(self) -> None:
        """Cancel any in-flight render and stop accepting requests."""
        self._closed = True
        self._pending = None
        worker = self._worker
        if worker is not None:
            worker.cancel()
            worker.wait()
            self._worker = None
