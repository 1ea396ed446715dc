"""
Data URL image codec and the data URL variants of detection / rectification
"""

import base64
import binascii
import cv2
import numpy as np
from typing import Optional

from constants import MAX_DIMENSION
from .corners import fallback_corners
from .detector import detect_document_corners
from .pixel_buffer import PixelBuffer
from .rectifier import rectify, crop_selected_area


PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def downscale_to_max_dimension(image: np.ndarray, max_dimension: int) -> np.ndarray:
    """
    Shrink the image so its longer edge is at most max_dimension pixels.
    Images that already fit are returned unchanged.
    """
    height, width = image.shape[:2]
    scale = min(1.0, max_dimension / float(max(width, height, 1)))
    if scale >= 1.0:
        return image

    new_width = max(1, int(round(width * scale)))
    new_height = max(1, int(round(height * scale)))
    return cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_AREA)


def decode_data_url(data_url: Optional[str], max_dimension: Optional[int] = MAX_DIMENSION) -> Optional[PixelBuffer]:
    """
    Decode a base64 image (optionally with a "data:...;base64," prefix) into a pixel buffer.

    Args:
        data_url: Encoded image
        max_dimension: Cap for the longer edge, None keeps the full resolution

    Returns:
        RGBA PixelBuffer, or None for empty or undecodable input
    """
    source = str(data_url or "").strip()
    if not source:
        return None

    # Handle data URL format (e.g., "data:image/jpeg;base64,...")
    if source.startswith("data:"):
        if "," not in source:
            return None
        source = source.split(",", 1)[1]

    try:
        img_data = base64.b64decode(source, validate=False)
    except (binascii.Error, ValueError):
        return None
    if not img_data:
        return None

    nparr = np.frombuffer(img_data, np.uint8)
    try:
        # IMREAD_COLOR applies the EXIF orientation of camera photos
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
        if image is not None:
            unchanged = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
            # Keep the alpha channel of transparent images
            if unchanged is not None and unchanged.ndim == 3 and unchanged.shape[2] == 4:
                image = unchanged
    except cv2.error:
        return None
    if image is None or image.size == 0:
        return None

    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        return None

    if max_dimension:
        image = downscale_to_max_dimension(image, max_dimension)

    return PixelBuffer.from_bgr(image)


def encode_png_data_url(buffer: PixelBuffer) -> Optional[str]:
    """Encode the buffer as a "data:image/png;base64,..." string."""
    bgra = buffer.to_bgra() if buffer is not None else None
    if bgra is None:
        return None

    ok, encoded = cv2.imencode(".png", bgra)
    if not ok:
        return None
    return PNG_DATA_URL_PREFIX + base64.b64encode(encoded.tobytes()).decode("utf-8")


def detect_document_corners_from_data_url(data_url: Optional[str], **params) -> np.ndarray:
    """Decode (downscaled to MAX_DIMENSION) and detect corners; fallback corners on any failure."""
    buffer = decode_data_url(data_url)
    if buffer is None:
        return fallback_corners()
    return detect_document_corners(buffer, **params)


def rectify_data_url(data_url: Optional[str], corners, interpolation: str = "bilinear") -> Optional[str]:
    """Rectify the selected quadrilateral of a full-resolution encoded image into a PNG data URL."""
    buffer = decode_data_url(data_url, max_dimension=None)
    if buffer is None:
        return None

    rectified = rectify(buffer, corners, interpolation=interpolation)
    if rectified is None:
        return None
    return encode_png_data_url(rectified)


def create_selected_area_data_url(data_url: Optional[str], corners) -> Optional[str]:
    """Crop the selected quadrilateral (transparent outside it) into a PNG data URL."""
    buffer = decode_data_url(data_url, max_dimension=None)
    if buffer is None:
        return None

    cropped = crop_selected_area(buffer, corners)
    if cropped is None:
        return None
    return encode_png_data_url(cropped)
