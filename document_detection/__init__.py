"""
Document Detection Module

Finds the text-bearing region of a photographed report and flattens
the selected quadrilateral into an upright image for OCR.
"""

from .pixel_buffer import PixelBuffer, RectifiedImage
from .corners import FALLBACK_CORNERS, normalize_corner_order
from .detector import DocumentCornerDetector, detect_document_corners
from .rectifier import AffineTransform, solve_affine, rectify, crop_selected_area
from .visualizer import DocumentVisualizer

__all__ = [
    'PixelBuffer',
    'RectifiedImage',
    'FALLBACK_CORNERS',
    'normalize_corner_order',
    'DocumentCornerDetector',
    'detect_document_corners',
    'AffineTransform',
    'solve_affine',
    'rectify',
    'crop_selected_area',
    'DocumentVisualizer',
]
