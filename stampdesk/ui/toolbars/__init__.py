"""
Toolbar components for stamp operations.
"""
from .stamp_toolbar import StampToolbar

__all__ = ['StampToolbar']
