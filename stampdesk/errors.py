"""
Exception types raised by the stamping core.
"""
from typing import Optional


class StampdeskError(Exception):
    """Base class for all Stampdesk errors."""


class DocumentLoadError(StampdeskError):
    """The source document could not be opened or has no pages."""


class PageRenderError(StampdeskError):
    """A single page failed to render. Other pages are unaffected."""

    def __init__(self, page_number: int, message: str):
        super().__init__(f"Page {page_number}: {message}")
        self.page_number = page_number


class SourceParseError(StampdeskError):
    """The source bytes could not be re-opened for export."""


class AnnotationEmbedError(StampdeskError):
    """A single stamp could not be embedded into the exported document."""

    def __init__(self, stamp, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.stamp = stamp
        self.cause = cause


class NothingToExportError(StampdeskError):
    """Export was requested with no stamps placed on any page."""


class ExportCancelledError(StampdeskError):
    """Export was abandoned before the document was serialized."""


class NoStampSelectedError(StampdeskError):
    """A placement was requested but no stamp kind is selected."""


class CatalogError(StampdeskError):
    """The stamp catalog manifest is missing or malformed."""
