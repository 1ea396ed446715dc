"""
Visualization of detected document corners
"""

import cv2
import numpy as np
from typing import Tuple, Optional

from .corners import denormalize_corners
from .rectifier import get_rectified_dimensions


class DocumentVisualizer:
    """
    Class for drawing a detected document quadrilateral.

    Draws a frame, corner handles and a transparent fill over the
    selected region, the way the capture screen shows it.
    """

    def __init__(
        self,
        border_color: Tuple[int, int, int] = (255, 100, 0),  # Blue in BGR
        border_thickness: int = 3,
        overlay_color: Tuple[int, int, int] = (255, 200, 100),  # Light blue in BGR
        overlay_alpha: float = 0.3,
        handle_radius: int = 6
    ):
        """
        Initialize the visualizer.

        Args:
            border_color: Frame color in BGR format
            border_thickness: Frame thickness in pixels
            overlay_color: Transparent overlay color in BGR format
            overlay_alpha: Overlay transparency (0.0 = transparent, 1.0 = opaque)
            handle_radius: Radius of the corner handles in pixels
        """
        self.border_color = border_color
        self.border_thickness = border_thickness
        self.overlay_color = overlay_color
        self.overlay_alpha = overlay_alpha
        self.handle_radius = handle_radius

    def visualize(
        self,
        image: np.ndarray,
        corners: Optional[np.ndarray],
        draw_border: bool = True,
        draw_overlay: bool = True
    ) -> np.ndarray:
        """
        Visualize the selected region on the image.

        Args:
            image: Input image (BGR format)
            corners: (4, 2) normalized corners
            draw_border: Whether to draw the frame and corner handles
            draw_overlay: Whether to draw transparent fill

        Returns:
            Image with visualization
        """
        if image is None or corners is None:
            return image

        result = image.copy()
        h, w = result.shape[:2]
        points = np.round(denormalize_corners(corners, w, h)).astype(np.int32)

        if draw_overlay:
            overlay = result.copy()
            cv2.fillPoly(overlay, [points], self.overlay_color)
            result = cv2.addWeighted(
                overlay,
                self.overlay_alpha,
                result,
                1 - self.overlay_alpha,
                0
            )

        if draw_border:
            cv2.polylines(result, [points], True, self.border_color, self.border_thickness)
            for point in points:
                cv2.circle(
                    result,
                    (int(point[0]), int(point[1])),
                    radius=self.handle_radius,
                    color=self.border_color,
                    thickness=-1
                )

        return result

    def visualize_with_info(self, image: np.ndarray, corners: Optional[np.ndarray]) -> np.ndarray:
        """
        Visualize the region and print the rectified output size in the top left corner.
        """
        result = self.visualize(image, corners)
        if result is None or corners is None:
            return result

        h, w = result.shape[:2]
        width, height = get_rectified_dimensions(denormalize_corners(corners, w, h))
        text = f"Output: {width}x{height}px"

        # Outline first so the text stays readable on any background
        cv2.putText(result, text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2, cv2.LINE_AA)
        cv2.putText(result, text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 0), 1, cv2.LINE_AA)

        return result
