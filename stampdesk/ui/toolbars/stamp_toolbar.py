from PyQt5.QtCore import QSize, Qt, pyqtSignal
from PyQt5.QtGui import QIcon, QImage, QPixmap
from PyQt5.QtWidgets import (
    QDoubleSpinBox, QFrame, QHBoxLayout, QLabel, QListWidget,
    QListWidgetItem, QSizePolicy, QToolButton, QVBoxLayout
)

from stampdesk.config import StamperSettings
from stampdesk.core.stamps import StampCatalog, StampKind


class StampToolbar(QFrame):
    """Side panel for choosing a stamp, its size and editing actions."""

    kind_selected = pyqtSignal(object)  # StampKind
    size_requested = pyqtSignal(float)
    increase_requested = pyqtSignal()
    decrease_requested = pyqtSignal()
    add_image_requested = pyqtSignal()
    undo_requested = pyqtSignal()
    redo_requested = pyqtSignal()
    clear_page_requested = pyqtSignal()
    export_requested = pyqtSignal()

    def __init__(self, settings: StamperSettings, parent=None):
        super().__init__(parent)
        self.setObjectName("StampToolbar")
        self.settings = settings
        self._kinds = []

        self.setup_ui()

    def setup_ui(self):
        self.setFixedWidth(240)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Preferred)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 10, 12, 10)
        main_layout.setSpacing(8)

        header_label = QLabel("Stamps", self)
        header_label.setStyleSheet("font-weight: bold; color: #8899AA;")
        main_layout.addWidget(header_label)

        self.kind_list = QListWidget(self)
        self.kind_list.setIconSize(QSize(48, 48))
        self.kind_list.currentRowChanged.connect(self._on_row_changed)
        main_layout.addWidget(self.kind_list)

        self.add_image_button = self._make_button("Add image...", self.add_image_requested)
        main_layout.addWidget(self.add_image_button)

        # Size controls
        size_layout = QHBoxLayout()
        size_layout.setSpacing(4)
        size_layout.addWidget(QLabel("Size:", self))

        self.decrease_button = self._make_button("-", self.decrease_requested)
        self.decrease_button.setFixedSize(28, 28)
        size_layout.addWidget(self.decrease_button)

        self.size_spin = QDoubleSpinBox(self)
        self.size_spin.setDecimals(0)
        self.size_spin.setRange(self.settings.min_stamp_size, self.settings.max_stamp_size)
        self.size_spin.setSingleStep(self.settings.stamp_size_step)
        self.size_spin.setValue(self.settings.default_stamp_size)
        self.size_spin.editingFinished.connect(
            lambda: self.size_requested.emit(self.size_spin.value()))
        size_layout.addWidget(self.size_spin)

        self.increase_button = self._make_button("+", self.increase_requested)
        self.increase_button.setFixedSize(28, 28)
        size_layout.addWidget(self.increase_button)
        main_layout.addLayout(size_layout)

        # History and page actions
        history_layout = QHBoxLayout()
        self.undo_button = self._make_button("Undo", self.undo_requested)
        self.undo_button.setToolTip("Undo (Ctrl+Z)")
        self.redo_button = self._make_button("Redo", self.redo_requested)
        self.redo_button.setToolTip("Redo (Ctrl+Y)")
        history_layout.addWidget(self.undo_button)
        history_layout.addWidget(self.redo_button)
        main_layout.addLayout(history_layout)

        self.clear_button = self._make_button("Clear page", self.clear_page_requested)
        main_layout.addWidget(self.clear_button)

        self.export_button = self._make_button("Download stamped PDF", self.export_requested)
        self.export_button.setFixedHeight(36)
        main_layout.addWidget(self.export_button)

        main_layout.addStretch()
        self.set_history_state(False, False)

    def _make_button(self, text, signal):
        btn = QToolButton(self)
        btn.setText(text)
        btn.setToolButtonStyle(Qt.ToolButtonTextOnly)
        btn.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        btn.clicked.connect(lambda _checked=False: signal.emit())
        return btn

    def set_catalog(self, catalog: StampCatalog, selected: StampKind = None):
        """Fill the list from a catalog and highlight the selected kind."""
        self.kind_list.blockSignals(True)
        self.kind_list.clear()
        self._kinds = catalog.kinds
        selected_row = 0
        for row, kind in enumerate(self._kinds):
            item = QListWidgetItem(kind.label)
            image = QImage.fromData(kind.image_bytes)
            if not image.isNull():
                item.setIcon(QIcon(QPixmap.fromImage(image)))
            self.kind_list.addItem(item)
            if selected is not None and kind.id == selected.id:
                selected_row = row
        if self._kinds:
            self.kind_list.setCurrentRow(selected_row)
        self.kind_list.blockSignals(False)

    def _on_row_changed(self, row):
        if 0 <= row < len(self._kinds):
            self.kind_selected.emit(self._kinds[row])

    def set_size(self, size: float):
        self.size_spin.blockSignals(True)
        self.size_spin.setValue(size)
        self.size_spin.blockSignals(False)

    def set_history_state(self, can_undo: bool, can_redo: bool):
        self.undo_button.setEnabled(can_undo)
        self.redo_button.setEnabled(can_redo)

    def set_document_loaded(self, loaded: bool):
        for widget in (self.clear_button, self.export_button):
            widget.setEnabled(loaded)

    def current_kind(self):
        row = self.kind_list.currentRow()
        if 0 <= row < len(self._kinds):
            return self._kinds[row]
        return None
