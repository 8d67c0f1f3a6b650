"""
Page rasterization and stamp overlay composition.
"""
import logging
from typing import Dict, Iterable, Optional

import fitz  # PyMuPDF
from PyQt5.QtCore import QRectF
from PyQt5.QtGui import QImage, QPainter

from stampdesk.core.geometry import display_rect
from stampdesk.core.stamps.models import Stamp, StampKind
from stampdesk.errors import PageRenderError

logger = logging.getLogger(__name__)

PREVIEW_OPACITY = 0.5


class PageRenderer:
    """
    Renders pages of an open document at a fixed display scale.

    The scale is chosen once per session; every page is rendered with it so
    display coordinates stay comparable across pages.
    """

    def __init__(self, doc: fitz.Document, scale: float):
        if scale <= 0:
            raise ValueError(f"Display scale must be positive, got {scale}")
        self._doc = doc
        self.scale = scale
        self._stamp_images: Dict[str, QImage] = {}

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def render_page(self, page_number: int) -> QImage:
        """
        Rasterize one page.

        Args:
            page_number: 1-based page number

        Returns:
            Image sized to the page size multiplied by the display scale
        """
        if not 1 <= page_number <= self._doc.page_count:
            raise PageRenderError(
                page_number, f"out of range 1..{self._doc.page_count}")

        try:
            page = self._doc.load_page(page_number - 1)
            mat = fitz.Matrix(self.scale, self.scale)
            pix = page.get_pixmap(matrix=mat, alpha=False)
        except Exception as e:
            logger.error("Error rendering page %d: %s", page_number, e)
            raise PageRenderError(page_number, str(e)) from e

        img = QImage(pix.samples, pix.width, pix.height, pix.stride,
                     QImage.Format_RGB888)
        # Detach from the pixmap buffer, which is freed with pix
        return img.copy()

    def stamp_image(self, kind: StampKind) -> Optional[QImage]:
        """Decoded image for a stamp kind, cached per kind id."""
        img = self._stamp_images.get(kind.id)
        if img is None:
            img = QImage.fromData(kind.image_bytes)
            if img.isNull():
                logger.warning("Cannot decode image for stamp %s", kind.id)
                return None
            self._stamp_images[kind.id] = img
        return img

    def compose_overlay(self, base: QImage, stamps: Iterable[Stamp],
                        preview: Optional[Stamp] = None) -> QImage:
        """
        Paint stamps over a rendered page.

        Stamps are drawn in the given order, so later ones end up on top.
        The optional preview is drawn last at reduced opacity.

        Args:
            base: Rendered page image, left untouched
            stamps: Stamps of the page in placement order
            preview: Transient cursor preview

        Returns:
            New composed image
        """
        composed = base.convertToFormat(QImage.Format_ARGB32_Premultiplied)
        painter = QPainter(composed)
        try:
            painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
            for stamp in stamps:
                self._draw_stamp(painter, stamp)
            if preview is not None:
                painter.setOpacity(PREVIEW_OPACITY)
                self._draw_stamp(painter, preview)
        finally:
            painter.end()
        return composed

    def render_with_stamps(self, page_number: int, stamps: Iterable[Stamp],
                           preview: Optional[Stamp] = None) -> QImage:
        return self.compose_overlay(self.render_page(page_number), stamps, preview)

    def _draw_stamp(self, painter: QPainter, stamp: Stamp) -> None:
        img = self.stamp_image(stamp.kind)
        if img is None:
            return
        x0, y0, x1, y1 = display_rect(stamp.x, stamp.y, stamp.size)
        painter.drawImage(QRectF(x0, y0, x1 - x0, y1 - y0), img)
