"""
Application controllers for managing interactions between UI and core logic.
"""
from .stamp_controller import StampController

__all__ = ['StampController']
