"""
Conversions between display space and PDF-native space.

Display space has its origin at the top-left of the rendered page, y grows
downward and units are pixels at the session display scale. Native space
has its origin at the bottom-left of the page, y grows upward and units are
PDF points. PyMuPDF itself draws in a top-left page space, so rectangles are
flipped once more before they are handed to it.
"""
from typing import Tuple

import fitz  # PyMuPDF

Point = Tuple[float, float]
Rect = Tuple[float, float, float, float]  # x0, y0, x1, y1


def _check_scale(scale: float) -> None:
    if scale <= 0:
        raise ValueError(f"Display scale must be positive, got {scale}")


def to_native(x: float, y: float, page_height: float, scale: float) -> Point:
    """
    Map a display-space point to native space.

    Args:
        x: Display x
        y: Display y
        page_height: Native height of the page in points
        scale: Display scale of the session

    Returns:
        Native (x, y) with bottom-left origin
    """
    _check_scale(scale)
    return x / scale, page_height - y / scale


def to_display(x: float, y: float, page_height: float, scale: float) -> Point:
    """Inverse of to_native."""
    _check_scale(scale)
    return x * scale, (page_height - y) * scale


def size_to_native(size: float, scale: float) -> float:
    _check_scale(scale)
    return size / scale


def stamp_rect(x: float, y: float, size: float,
               page_height: float, scale: float) -> Rect:
    """
    Native-space rectangle of a square stamp centered on a display point.

    Args:
        x: Display x of the stamp center
        y: Display y of the stamp center
        size: Display size of the stamp
        page_height: Native height of the page
        scale: Display scale of the session

    Returns:
        (x0, y0, x1, y1) in native space, y0 being the bottom edge
    """
    cx, cy = to_native(x, y, page_height, scale)
    half = size_to_native(size, scale) / 2
    return cx - half, cy - half, cx + half, cy + half


def native_to_page_rect(rect: Rect, page_height: float) -> fitz.Rect:
    """Express a native-space rectangle in PyMuPDF page coordinates."""
    x0, y0, x1, y1 = rect
    return fitz.Rect(x0, page_height - y1, x1, page_height - y0)


def display_rect(x: float, y: float, size: float) -> Rect:
    """Display-space rectangle of a stamp, used for the live overlay."""
    half = size / 2
    return x - half, y - half, x + half, y + half
