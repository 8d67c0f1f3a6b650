"""
Background export of stamped documents.
"""
from .export_worker import ExportWorker

__all__ = ['ExportWorker']
