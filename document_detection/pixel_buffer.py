"""
Raw RGBA pixel buffers passed in and out of the detection core
"""

import cv2
import numpy as np
from typing import Optional


class PixelBuffer:
    """
    Row-major RGBA image: width, height and a flat uint8 array of
    width * height * 4 channel values.

    The buffer is treated as read-only by every operation in this package;
    anything that produces pixels allocates a new buffer.
    """

    def __init__(self, width: int, height: int, data):
        self.width = int(width or 0)
        self.height = int(height or 0)
        if data is None:
            self.data = None
        elif isinstance(data, (bytes, bytearray, memoryview)):
            self.data = np.frombuffer(data, dtype=np.uint8)
        else:
            self.data = np.asarray(data, dtype=np.uint8).reshape(-1)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}x{self.height})"

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        """Wrap an (h, w, 4) RGBA array."""
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Expected (h, w, 4) RGBA array, got shape {rgba.shape}")
        height, width = rgba.shape[:2]
        return cls(width, height, np.ascontiguousarray(rgba, dtype=np.uint8))

    @classmethod
    def from_bgr(cls, image: np.ndarray) -> "PixelBuffer":
        """
        Convert an OpenCV image (grayscale, BGR or BGRA) to an RGBA buffer.

        Args:
            image: Image as returned by cv2.imread / cv2.imdecode

        Returns:
            PixelBuffer with an opaque alpha channel unless the source had one
        """
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        return cls.from_array(rgba)

    def is_valid(self) -> bool:
        """True when dimensions are positive and data holds at least width*height*4 values."""
        if self.width <= 0 or self.height <= 0 or self.data is None:
            return False
        return self.data.size >= self.width * self.height * 4

    def to_array(self) -> Optional[np.ndarray]:
        """(h, w, 4) RGBA view of the buffer, or None when the buffer is invalid."""
        if not self.is_valid():
            return None
        return self.data[:self.width * self.height * 4].reshape(self.height, self.width, 4)

    def to_bgra(self) -> Optional[np.ndarray]:
        rgba = self.to_array()
        if rgba is None:
            return None
        return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)

    def to_bgr(self) -> Optional[np.ndarray]:
        rgba = self.to_array()
        if rgba is None:
            return None
        return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)


class RectifiedImage(PixelBuffer):
    """Upright output of the perspective rectifier."""
