"""
Custom widgets for PDF viewing and interaction.
"""
from .page_label import StampPageLabel

__all__ = ['StampPageLabel']
