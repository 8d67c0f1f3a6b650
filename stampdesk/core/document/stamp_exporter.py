import logging
import os
from typing import Callable, Dict, Iterable, List, Optional

import fitz  # PyMuPDF

from stampdesk.config import StamperSettings
from stampdesk.core.geometry import native_to_page_rect, stamp_rect
from stampdesk.core.stamps.models import ImageFormat, Stamp
from stampdesk.errors import (
    AnnotationEmbedError,
    ExportCancelledError,
    NothingToExportError,
    SourceParseError,
)

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "stamped_"

_SIGNATURES = {
    ImageFormat.PNG: b"\x89PNG\r\n\x1a\n",
    ImageFormat.JPEG: b"\xff\xd8",
}


def suggested_filename(original_filename: str) -> str:
    """Name offered for the exported copy of a document."""
    return EXPORT_PREFIX + os.path.basename(original_filename or "document.pdf")


class StampExporter:
    """Bakes placed stamps into a new copy of the source PDF."""

    def __init__(self, settings: Optional[StamperSettings] = None):
        self.settings = settings or StamperSettings()

    def export(self, source_bytes: bytes, stamps: Iterable[Stamp], scale: float,
               should_cancel: Optional[Callable[[], bool]] = None,
               progress: Optional[Callable[[int, int], None]] = None) -> bytes:
        """
        Produce new document bytes with every stamp drawn on its page.

        Args:
            source_bytes: Original PDF bytes, never modified
            stamps: All stamps of the session in placement order
            scale: Display scale the stamps were placed at
            should_cancel: Polled between stamps; True abandons the export
            progress: Called with (stamps processed, total stamps)

        Returns:
            Serialized PDF bytes
        """
        stamps = list(stamps)
        if not stamps:
            raise NothingToExportError("There are no stamps to export.")
        if scale <= 0:
            raise ValueError(f"Display scale must be positive, got {scale}")

        try:
            doc = fitz.open(stream=source_bytes, filetype="pdf")
        except Exception as e:
            raise SourceParseError(f"Cannot parse source PDF: {e}") from e

        try:
            by_page = self._group_by_page(stamps, doc.page_count)
            total = sum(len(items) for items in by_page.values())
            done = 0
            embedded = 0
            xrefs: Dict[str, int] = {}

            for page_index in range(doc.page_count):
                page_stamps = by_page.get(page_index + 1)
                if not page_stamps:
                    continue

                page = doc[page_index]
                for stamp in page_stamps:
                    if should_cancel is not None and should_cancel():
                        raise ExportCancelledError("Export cancelled")
                    try:
                        self._embed_stamp(page, stamp, scale, xrefs)
                        embedded += 1
                    except AnnotationEmbedError as e:
                        logger.warning("Skipping stamp %s on page %d: %s",
                                       stamp.kind.id, stamp.page_number, e)
                    done += 1
                    if progress is not None:
                        progress(done, total)

            if should_cancel is not None and should_cancel():
                raise ExportCancelledError("Export cancelled")

            data = doc.tobytes(garbage=self.settings.export_garbage,
                               deflate=self.settings.export_deflate)
            logger.info("Exported %d of %d stamp(s)", embedded, len(stamps))
            return data
        finally:
            doc.close()

    def _group_by_page(self, stamps: List[Stamp], page_count: int) -> Dict[int, List[Stamp]]:
        """Group stamps by page, keeping placement order and dropping stale pages."""
        by_page: Dict[int, List[Stamp]] = {}
        for stamp in stamps:
            if not 1 <= stamp.page_number <= page_count:
                logger.debug("Stamp on missing page %d skipped", stamp.page_number)
                continue
            by_page.setdefault(stamp.page_number, []).append(stamp)
        return by_page

    def _embed_stamp(self, page: fitz.Page, stamp: Stamp, scale: float,
                     xrefs: Dict[str, int]) -> None:
        """Draw a single stamp image onto a page."""
        kind = stamp.kind
        signature = _SIGNATURES.get(kind.image_format)
        if signature is None or not kind.image_bytes.startswith(signature):
            raise AnnotationEmbedError(
                stamp, f"image data is not valid {kind.image_format.value}")

        # page.rect and the rendered page follow /Rotate; insert_image does not
        page_height = page.rect.height
        rect = native_to_page_rect(
            stamp_rect(stamp.x, stamp.y, stamp.size, page_height, scale),
            page_height,
        ) * page.derotation_matrix
        rotate = page.rotation

        try:
            if kind.id in xrefs:
                page.insert_image(rect, xref=xrefs[kind.id], rotate=rotate,
                                  keep_proportion=False, overlay=True)
            else:
                xrefs[kind.id] = page.insert_image(
                    rect, stream=kind.image_bytes, rotate=rotate,
                    keep_proportion=False, overlay=True)
        except Exception as e:
            raise AnnotationEmbedError(stamp, str(e), e) from e
