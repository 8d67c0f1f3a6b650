from .renderer import PageRenderer
from .render_worker import RenderQueue, RenderWorker
from .session import DocumentSession
from .stamp_exporter import StampExporter, suggested_filename

__all__ = [
    "PageRenderer",
    "RenderQueue",
    "RenderWorker",
    "DocumentSession",
    "StampExporter",
    "suggested_filename",
]
