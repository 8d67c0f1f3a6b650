import logging
import os
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QFileDialog, QFrame, QHBoxLayout, QLabel, QMainWindow, QMessageBox,
    QProgressDialog, QPushButton, QScrollArea, QShortcut, QVBoxLayout, QWidget
)

from stampdesk.config import StamperSettings
from stampdesk.controllers import StampController
from stampdesk.core.document import DocumentSession, RenderQueue
from stampdesk.core.export import ExportWorker
from stampdesk.core.stamps import ImageFormat, StampCatalog
from stampdesk.errors import DocumentLoadError, StampdeskError
from stampdesk.ui.toolbars.stamp_toolbar import StampToolbar
from stampdesk.ui.widgets.page_label import StampPageLabel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, settings: StamperSettings, catalog: StampCatalog, file_path=None):
        super().__init__()
        self.setWindowTitle("Stampdesk")

        self.settings = settings
        self.catalog = catalog

        self.session: Optional[DocumentSession] = None
        self.controller: Optional[StampController] = None
        self.render_queue: Optional[RenderQueue] = None
        self.export_worker: Optional[ExportWorker] = None
        self._export_progress: Optional[QProgressDialog] = None

        self.setup_ui()
        self.setup_shortcuts()
        self._update_navigation()

        if file_path:
            self.load_pdf(file_path)

    def setup_ui(self):
        # TOP TOOLBAR
        self.top_frame = QFrame()
        top_layout = QHBoxLayout(self.top_frame)
        top_layout.setContentsMargins(8, 4, 8, 4)

        self.open_button = QPushButton("Open PDF")
        self.open_button.clicked.connect(self.open_pdf)
        top_layout.addWidget(self.open_button)

        self.close_button = QPushButton("Close")
        self.close_button.clicked.connect(self.close_pdf)
        top_layout.addWidget(self.close_button)

        top_layout.addStretch()

        self.prev_button = QPushButton("<")
        self.prev_button.clicked.connect(self.previous_page)
        top_layout.addWidget(self.prev_button)

        self.page_label = QLabel("0 / 0")
        top_layout.addWidget(self.page_label)

        self.next_button = QPushButton(">")
        self.next_button.clicked.connect(self.next_page)
        top_layout.addWidget(self.next_button)

        top_layout.addStretch()

        self.file_name_label = QLabel("No PDF Loaded")
        top_layout.addWidget(self.file_name_label)

        # PAGE VIEW
        self.page_view = StampPageLabel()
        self.page_view.stamp_requested.connect(self._place_stamp)

        self.scroll_area = QScrollArea()
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.scroll_area.setWidget(self.page_view)
        self.scroll_area.setWidgetResizable(False)

        # STAMP TOOLBAR
        self.stamp_toolbar = StampToolbar(self.settings)
        self.stamp_toolbar.set_catalog(self.catalog, self.catalog.default_kind())
        self.stamp_toolbar.kind_selected.connect(self._select_kind)
        self.stamp_toolbar.size_requested.connect(self._set_size)
        self.stamp_toolbar.increase_requested.connect(self._increase_size)
        self.stamp_toolbar.decrease_requested.connect(self._decrease_size)
        self.stamp_toolbar.add_image_requested.connect(self.add_custom_image)
        self.stamp_toolbar.undo_requested.connect(self.undo_stamp)
        self.stamp_toolbar.redo_requested.connect(self.redo_stamp)
        self.stamp_toolbar.clear_page_requested.connect(self.clear_current_page)
        self.stamp_toolbar.export_requested.connect(self.export_pdf)

        body = QHBoxLayout()
        body.addWidget(self.scroll_area, 1)
        body.addWidget(self.stamp_toolbar)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.top_frame)
        layout.addLayout(body)
        self.setCentralWidget(central)

    def setup_shortcuts(self):
        QShortcut(QKeySequence("Ctrl+Z"), self, activated=self.undo_stamp)
        QShortcut(QKeySequence("Ctrl+Y"), self, activated=self.redo_stamp)
        QShortcut(QKeySequence("Ctrl+Shift+Z"), self, activated=self.redo_stamp)
        QShortcut(QKeySequence(Qt.Key_Right), self, activated=self.next_page)
        QShortcut(QKeySequence(Qt.Key_Left), self, activated=self.previous_page)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def open_pdf(self):
        file_path, _ = QFileDialog.getOpenFileName(self, "Open PDF", "", "PDF Files (*.pdf)")
        if file_path:
            self.load_pdf(file_path)

    def load_pdf(self, file_path):
        # Stamps never carry over between documents
        self._teardown_session()

        try:
            session = DocumentSession.load_file(file_path, self.settings, self.catalog)
        except DocumentLoadError as e:
            QMessageBox.critical(self, "Error", f"Error loading PDF: {e}")
            self._update_navigation()
            return

        self.session = session
        self.controller = StampController(session.manager, self)
        self.controller.stamps_changed.connect(self.page_view.refresh)
        self.controller.history_changed.connect(self.stamp_toolbar.set_history_state)
        self.controller.size_changed.connect(self.stamp_toolbar.set_size)

        self.render_queue = RenderQueue(session.renderer, self)
        self.render_queue.page_rendered.connect(self._on_page_rendered)
        self.render_queue.render_failed.connect(self._on_render_failed)

        selected = self.stamp_toolbar.current_kind()
        if selected is not None:
            self.controller.select_kind(selected)

        self.page_view.bind(session.renderer, session.manager)
        self.stamp_toolbar.set_size(session.manager.current_size)
        self.file_name_label.setText(session.filename)

        self._show_current_page()

    def close_pdf(self):
        """Closes the currently loaded PDF and resets the application state."""
        self._teardown_session()
        self.file_name_label.setText("No PDF Loaded")
        self._update_navigation()

    def _teardown_session(self):
        if self.export_worker is not None:
            # Abandoned exports emit nothing
            self.export_worker.cancel()
            self.export_worker.export_finished.disconnect()
            self.export_worker.export_failed.disconnect()
            self.export_worker.wait()
            self.export_worker.deleteLater()
            self.export_worker = None
            self._close_export_progress()

        if self.render_queue is not None:
            self.render_queue.shutdown()
            self.render_queue.deleteLater()
            self.render_queue = None

        if self.controller is not None:
            self.controller.detach()
            self.controller.deleteLater()
            self.controller = None

        if self.session is not None:
            self.session.close()
            self.session = None

        self.page_view.bind(None, None)
        self.stamp_toolbar.set_history_state(False, False)

    def closeEvent(self, event):
        self._teardown_session()
        event.accept()

    # ------------------------------------------------------------------
    # Navigation and rendering
    # ------------------------------------------------------------------

    def next_page(self):
        if self.session is not None:
            self.session.next_page()
            self._show_current_page()

    def previous_page(self):
        if self.session is not None:
            self.session.previous_page()
            self._show_current_page()

    def _show_current_page(self):
        self._update_navigation()
        if self.render_queue is not None:
            self.render_queue.request(self.session.current_page)

    def _on_page_rendered(self, page_number, image):
        if self.session is not None and page_number == self.session.current_page:
            self.page_view.set_page_image(page_number, image)

    def _on_render_failed(self, page_number, message):
        logger.error("Page %d failed to render: %s", page_number, message)
        QMessageBox.warning(self, "Render Error", f"Error rendering page {page_number}: {message}")

    def _update_navigation(self):
        loaded = self.session is not None
        total = self.session.page_count if loaded else 0
        current = self.session.current_page if loaded else 0
        self.page_label.setText(f"{current} / {total}")
        self.prev_button.setEnabled(loaded and current > 1)
        self.next_button.setEnabled(loaded and current < total)
        self.close_button.setEnabled(loaded)
        self.stamp_toolbar.set_document_loaded(loaded)

    # ------------------------------------------------------------------
    # Stamp actions
    # ------------------------------------------------------------------

    def _displayed_page(self):
        """Page shown on the canvas, or None while another page is pending."""
        if self.controller is None or self.page_view.page_number != self.session.current_page:
            return None
        return self.page_view.page_number

    def _place_stamp(self, x, y):
        page_number = self._displayed_page()
        if page_number is None:
            return
        if self.controller.place_stamp(x, y, page_number) is None:
            QMessageBox.information(self, "No Stamp", "Please choose a stamp first.")

    def _select_kind(self, kind):
        if self.controller is not None:
            self.controller.select_kind(kind)

    def _set_size(self, size):
        if self.controller is not None:
            self.controller.set_size(size)

    def _increase_size(self):
        if self.controller is not None:
            self.controller.increase_size()

    def _decrease_size(self):
        if self.controller is not None:
            self.controller.decrease_size()

    def undo_stamp(self):
        """Undo the last stamp action."""
        if self.controller is not None:
            self.controller.undo()

    def redo_stamp(self):
        """Redo the last undone stamp action."""
        if self.controller is not None:
            self.controller.redo()

    def clear_current_page(self):
        page_number = self._displayed_page()
        if page_number is not None:
            self.controller.clear_page(page_number)

    def add_custom_image(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Add Stamp Image", "", "Images (*.png *.jpg *.jpeg)")
        if not file_path:
            return

        try:
            with open(file_path, 'rb') as f:
                image_bytes = f.read()
            self.catalog = self.catalog.with_custom_image(
                os.path.basename(file_path),
                image_bytes,
                ImageFormat.from_declared(file_path),
                self.settings.default_stamp_size,
            )
        except (OSError, StampdeskError) as e:
            QMessageBox.critical(self, "Error", f"Cannot add image: {e}")
            return

        new_kind = self.catalog.kinds[-1]
        self.stamp_toolbar.set_catalog(self.catalog, new_kind)
        self._select_kind(new_kind)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_pdf(self):
        """Export stamps to a new PDF using a background thread."""
        if self.session is None:
            QMessageBox.warning(self, "No PDF", "No PDF document is currently loaded.")
            return
        if self.session.manager.get_stamp_count() == 0:
            QMessageBox.information(self, "No Stamps", "There are no stamps to save.")
            return
        if self.export_worker is not None:
            return

        progress = QProgressDialog("Preparing to export stamps...", None, 0, 100, self)
        progress.setWindowTitle("Saving PDF")
        progress.setWindowModality(Qt.WindowModal)
        progress.setMinimumDuration(0)
        progress.setCancelButton(None)
        progress.show()
        self._export_progress = progress

        self.export_worker = ExportWorker(
            self.session.source_bytes,
            self.session.filename,
            self.session.manager.all_stamps(),
            self.session.scale,
            self.session.exporter,
        )
        self.export_worker.progress.connect(progress.setLabelText)
        self.export_worker.page_progress.connect(self._on_export_progress)
        self.export_worker.export_finished.connect(self._on_export_finished)
        self.export_worker.export_failed.connect(self._on_export_failed)
        self.export_worker.start()

    def _on_export_progress(self, current, total):
        if self._export_progress is not None and total > 0:
            self._export_progress.setValue(int(current / total * 100))
            self._export_progress.setLabelText(f"Embedding stamps: {current}/{total}")

    def _finish_export_worker(self):
        self._close_export_progress()
        if self.export_worker is not None:
            self.export_worker.wait()
            self.export_worker.deleteLater()
            self.export_worker = None

    def _close_export_progress(self):
        if self._export_progress is not None:
            self._export_progress.close()
            self._export_progress = None

    def _is_current_export(self):
        # Queued results of a torn-down worker can still arrive
        return self.export_worker is not None and self.sender() is self.export_worker

    def _on_export_finished(self, data, filename):
        if not self._is_current_export():
            return
        self._finish_export_worker()

        output_path, _ = QFileDialog.getSaveFileName(
            self, "Save Stamped PDF", filename, "PDF Files (*.pdf)")
        if not output_path:
            return

        try:
            with open(output_path, 'wb') as f:
                f.write(data)
        except OSError as e:
            QMessageBox.critical(self, "Save Failed", f"Cannot write {output_path}: {e}")
            return

        logger.info("Saved stamped PDF to %s", output_path)
        QMessageBox.information(self, "Success", "Stamped PDF saved successfully!")

    def _on_export_failed(self, message):
        if not self._is_current_export():
            return
        self._finish_export_worker()
        QMessageBox.critical(self, "Save Failed", message)
