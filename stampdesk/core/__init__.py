"""
Core business logic for Stampdesk.
"""
from .document import DocumentSession, PageRenderer, StampExporter
from .stamps import Stamp, StampCatalog, StampKind, StampManager

__all__ = [
    'DocumentSession',
    'PageRenderer',
    'StampExporter',
    'Stamp',
    'StampCatalog',
    'StampKind',
    'StampManager',
]
