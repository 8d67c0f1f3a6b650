# core/export/export_worker.py

import logging
from typing import List

from PyQt5.QtCore import QThread, pyqtSignal

from stampdesk.core.document.stamp_exporter import StampExporter, suggested_filename
from stampdesk.core.stamps.models import Stamp
from stampdesk.errors import ExportCancelledError, StampdeskError

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Worker thread for exporting stamps to PDF without freezing the UI."""

    # Signals
    export_finished = pyqtSignal(object, str)  # pdf bytes, suggested filename
    export_failed = pyqtSignal(str)  # message
    progress = pyqtSignal(str)  # status message
    page_progress = pyqtSignal(int, int)  # stamps done, total

    def __init__(self, source_bytes: bytes, filename: str, stamps: List[Stamp],
                 scale: float, exporter: StampExporter = None, parent=None):
        super().__init__(parent)
        self.source_bytes = source_bytes
        self.filename = filename
        # Value copy so later edits do not leak into a running export
        self.stamps = [s.copy() for s in stamps]
        self.scale = scale
        self.exporter = exporter or StampExporter()
        self._cancelled = False

    def cancel(self):
        """Abandon the export. Nothing is emitted afterwards."""
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled

    def run(self):
        """Execute the export in a background thread."""
        self.progress.emit("Exporting stamps...")
        try:
            data = self.exporter.export(
                self.source_bytes,
                self.stamps,
                self.scale,
                should_cancel=self.is_cancelled,
                progress=self._on_page_progress,
            )
        except ExportCancelledError:
            logger.info("Export of %s abandoned", self.filename)
            return
        except StampdeskError as e:
            if not self._cancelled:
                self.export_failed.emit(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected error during export")
            if not self._cancelled:
                self.export_failed.emit(f"Error during export: {e}")
            return

        if not self._cancelled:
            self.export_finished.emit(data, suggested_filename(self.filename))

    def _on_page_progress(self, current, total):
        """Handle stamp-level progress updates."""
        if not self._cancelled:
            self.page_progress.emit(current, total)
