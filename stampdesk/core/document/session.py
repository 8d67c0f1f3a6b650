"""
Document session: one loaded PDF together with its stamps and history.
"""
import logging
import os
from typing import Callable, List, Optional, Tuple

import fitz  # PyMuPDF

from stampdesk.config import StamperSettings
from stampdesk.core.stamps import StampCatalog, StampManager
from stampdesk.errors import DocumentLoadError
from .renderer import PageRenderer
from .stamp_exporter import StampExporter, suggested_filename

logger = logging.getLogger(__name__)


class DocumentSession:
    """
    Binds a source document's bytes, its pages and the live stamp state.

    Stamps never outlive the session; loading another document means
    creating a new session.
    """

    def __init__(self, doc: fitz.Document, source_bytes: bytes, filename: str,
                 settings: StamperSettings, catalog: Optional[StampCatalog] = None):
        self._doc: Optional[fitz.Document] = doc
        self.source_bytes = source_bytes
        self.filename = filename
        self.settings = settings
        self.scale = settings.display_scale

        # Cached so size queries never touch the document from the UI thread
        self._page_sizes: List[Tuple[float, float]] = [
            (page.rect.width, page.rect.height) for page in doc
        ]

        self.renderer = PageRenderer(doc, self.scale)
        self.manager = StampManager(
            settings, catalog.default_kind() if catalog is not None else None)
        self.exporter = StampExporter(settings)
        self.current_page = 1

    @classmethod
    def load(cls, data: bytes, filename: str,
             settings: Optional[StamperSettings] = None,
             catalog: Optional[StampCatalog] = None) -> "DocumentSession":
        """
        Open a PDF from memory.

        Args:
            data: PDF file contents
            filename: Original file name, used for the export name
            settings: Session settings
            catalog: Catalog providing the initially selected stamp

        Returns:
            New session
        """
        settings = settings or StamperSettings()
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error("Error loading PDF %s: %s", filename, e)
            raise DocumentLoadError(f"Cannot open {filename}: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise DocumentLoadError(f"{filename} is password protected")

        if doc.page_count == 0:
            doc.close()
            raise DocumentLoadError(f"{filename} has no pages")

        logger.info("Loaded %s with %d page(s)", filename, doc.page_count)
        return cls(doc, bytes(data), filename, settings, catalog)

    @classmethod
    def load_file(cls, file_path: str, settings: Optional[StamperSettings] = None,
                  catalog: Optional[StampCatalog] = None) -> "DocumentSession":
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise DocumentLoadError(f"Cannot read {file_path}: {e}") from e
        return cls.load(data, os.path.basename(file_path), settings, catalog)

    # ------------------------------------------------------------------
    # Document info
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._doc is not None

    @property
    def document(self) -> fitz.Document:
        if self._doc is None:
            raise DocumentLoadError("No document is loaded")
        return self._doc

    @property
    def page_count(self) -> int:
        return len(self._page_sizes)

    def page_size(self, page_number: int) -> Tuple[float, float]:
        """Native (width, height) of a 1-based page, in points."""
        if not 1 <= page_number <= self.page_count:
            raise IndexError(f"Page {page_number} out of range 1..{self.page_count}")
        return self._page_sizes[page_number - 1]

    def page_height(self, page_number: int) -> float:
        return self.page_size(page_number)[1]

    def display_size(self, page_number: int) -> Tuple[float, float]:
        width, height = self.page_size(page_number)
        return width * self.scale, height * self.scale

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def go_to_page(self, page_number: int) -> int:
        self.current_page = max(1, min(self.page_count, page_number))
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    # ------------------------------------------------------------------
    # Rendering and export
    # ------------------------------------------------------------------

    def render_current_page(self, preview=None):
        """Render the current page with its stamps and optional cursor preview."""
        if self._doc is None:
            raise DocumentLoadError("No document is loaded")
        return self.renderer.render_with_stamps(
            self.current_page,
            self.manager.stamps_for_page(self.current_page),
            preview,
        )

    def export(self, should_cancel: Optional[Callable[[], bool]] = None) -> bytes:
        """Export the source with every placed stamp embedded."""
        return self.exporter.export(self.source_bytes, self.manager.all_stamps(),
                                    self.scale, should_cancel=should_cancel)

    @property
    def export_filename(self) -> str:
        return suggested_filename(self.filename)

    def close(self) -> None:
        """Close the document and drop all stamps and history."""
        if self._doc is not None:
            self._doc.close()
            self._doc = None
        self.manager.reset()
        logger.debug("Closed session for %s", self.filename)
