"""
Stamp placement system for PDF documents.
"""
from .models import ImageFormat, Stamp, StampKind
from .catalog import StampCatalog
from .store import Snapshot, StampStore
from .undo_redo import UndoRedoStack
from .manager import StampManager

__all__ = [
    'ImageFormat',
    'Stamp',
    'StampKind',
    'StampCatalog',
    'Snapshot',
    'StampStore',
    'UndoRedoStack',
    'StampManager',
]
