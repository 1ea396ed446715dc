"""
Piecewise-affine perspective rectification of a selected quadrilateral
"""

import cv2
import numpy as np
from typing import Optional, Tuple, NamedTuple

from .corners import denormalize_corners
from .pixel_buffer import PixelBuffer, RectifiedImage


DETERMINANT_EPSILON = 1e-6

INTERPOLATION_FLAGS = {
    "bilinear": cv2.INTER_LINEAR,
    "nearest": cv2.INTER_NEAREST,
}


class AffineTransform(NamedTuple):
    """Maps (x, y) to (a*x + c*y + e, b*x + d*y + f)."""
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    def matrix(self) -> np.ndarray:
        """2x3 matrix in the layout cv2.warpAffine expects."""
        return np.array([
            [self.a, self.c, self.e],
            [self.b, self.d, self.f],
        ], dtype=np.float64)

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)


def solve_affine(src: np.ndarray, dst: np.ndarray) -> Optional[AffineTransform]:
    """
    Solve the affine transform taking 3 source points onto 3 destination points.

    Uses Cramer's rule on the source triangle.

    Args:
        src: (3, 2) source triangle
        dst: (3, 2) destination triangle

    Returns:
        AffineTransform, or None when the source triangle is degenerate
        (|det| < 1e-6) or a coefficient is not finite
    """
    (x0, y0), (x1, y1), (x2, y2) = np.asarray(src, dtype=np.float64)
    (u0, v0), (u1, v1), (u2, v2) = np.asarray(dst, dtype=np.float64)

    det = x0 * (y1 - y2) - y0 * (x1 - x2) + (x1 * y2 - x2 * y1)
    if not np.isfinite(det) or abs(det) < DETERMINANT_EPSILON:
        return None

    def solve(w0, w1, w2):
        # Coefficients (p, q, r) with p*x + q*y + r = w at every vertex
        p = (w0 * (y1 - y2) - y0 * (w1 - w2) + (w1 * y2 - w2 * y1)) / det
        q = (x0 * (w1 - w2) - w0 * (x1 - x2) + (x1 * w2 - x2 * w1)) / det
        r = (x0 * (y1 * w2 - y2 * w1) - y0 * (x1 * w2 - x2 * w1) + w0 * (x1 * y2 - x2 * y1)) / det
        return p, q, r

    a, c, e = solve(u0, u1, u2)
    b, d, f = solve(v0, v1, v2)

    transform = AffineTransform(a, b, c, d, e, f)
    if not np.all(np.isfinite(transform)):
        return None
    return transform


def get_rectified_dimensions(points: np.ndarray) -> Tuple[int, int]:
    """
    Output size for a pixel-space quadrilateral (TL, TR, BR, BL).

    Width averages the top and bottom edges, height the left and right edges.
    """
    tl, tr, br, bl = points
    width = (np.linalg.norm(tr - tl) + np.linalg.norm(br - bl)) / 2.0
    height = (np.linalg.norm(bl - tl) + np.linalg.norm(br - tr)) / 2.0
    return max(1, int(np.floor(width + 0.5))), max(1, int(np.floor(height + 0.5)))


def has_collinear_corners(points: np.ndarray) -> bool:
    """True when any 3 of the 4 pixel-space corners lie on one line."""
    for i, j, k in ((0, 1, 2), (0, 2, 3), (0, 1, 3), (1, 2, 3)):
        (x0, y0), (x1, y1), (x2, y2) = points[i], points[j], points[k]
        det = (x1 - x0) * (y2 - y0) - (x2 - x0) * (y1 - y0)
        if abs(det) < DETERMINANT_EPSILON:
            return True
    return False


def _triangle_mask(shape: Tuple[int, int], triangle: np.ndarray) -> np.ndarray:
    """Boolean mask of pixels inside or on the edge of the triangle (edge function test)."""
    h, w = shape
    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)
    (x0, y0), (x1, y1), (x2, y2) = triangle

    e0 = (x1 - x0) * (ys - y0) - (y1 - y0) * (xs - x0)
    e1 = (x2 - x1) * (ys - y1) - (y2 - y1) * (xs - x1)
    e2 = (x0 - x2) * (ys - y2) - (y0 - y2) * (xs - x2)

    # Either winding order
    inside_cw = (e0 >= 0) & (e1 >= 0) & (e2 >= 0)
    inside_ccw = (e0 <= 0) & (e1 <= 0) & (e2 <= 0)
    return inside_cw | inside_ccw


def rectify(
    buffer: Optional[PixelBuffer],
    corners: np.ndarray,
    interpolation: str = "bilinear"
) -> Optional[RectifiedImage]:
    """
    Flatten a quadrilateral region of the buffer into an upright rectangle.

    The quad is split along its TL-BR diagonal and each triangle is warped
    onto the matching half of the output by its own affine transform.

    Args:
        buffer: Source RGBA pixel buffer
        corners: (4, 2) canonical normalized corners (TL, TR, BR, BL)
        interpolation: "bilinear" or "nearest" sampling of the source

    Returns:
        RectifiedImage, or None for an invalid source, malformed corners or
        degenerate (collinear) geometry
    """
    if buffer is None or not buffer.is_valid():
        return None

    try:
        corners = np.asarray(corners, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    if corners.shape != (4, 2) or not np.all(np.isfinite(corners)):
        return None

    flags = INTERPOLATION_FLAGS.get(interpolation, cv2.INTER_LINEAR)

    source = buffer.to_array()
    points = denormalize_corners(corners, buffer.width, buffer.height)
    if has_collinear_corners(points):
        return None
    width, height = get_rectified_dimensions(points)

    p0, p1, p2, p3 = points
    d0, d1, d2, d3 = np.array([
        [0, 0],
        [width, 0],
        [width, height],
        [0, height],
    ], dtype=np.float64)

    triangles = [
        (np.array([p0, p1, p2]), np.array([d0, d1, d2])),
        (np.array([p0, p2, p3]), np.array([d0, d2, d3])),
    ]

    transforms = []
    for src_tri, dst_tri in triangles:
        transform = solve_affine(src_tri, dst_tri)
        if transform is None:
            return None
        transforms.append(transform)

    output = np.zeros((height, width, 4), dtype=np.uint8)
    for (_, dst_tri), transform in zip(triangles, transforms):
        # warpAffine inverts the forward transform and samples the source for every destination pixel
        warped = cv2.warpAffine(
            source,
            transform.matrix(),
            (width, height),
            flags=flags,
            borderMode=cv2.BORDER_REPLICATE
        )
        mask = _triangle_mask((height, width), dst_tri)
        output[mask] = warped[mask]

    return RectifiedImage.from_array(output)


def crop_selected_area(buffer: Optional[PixelBuffer], corners) -> Optional[PixelBuffer]:
    """
    Crop the bounding box of the quadrilateral, leaving pixels outside it transparent.

    Args:
        buffer: Source RGBA pixel buffer
        corners: 4 normalized corners in drawing order

    Returns:
        PixelBuffer of the bounding box, or None when there are not 4 corners
        or the buffer is invalid
    """
    if buffer is None or not buffer.is_valid():
        return None

    try:
        corners = np.asarray(corners, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    if corners.shape != (4, 2):
        return None

    corners = np.clip(np.nan_to_num(corners, nan=0.0), 0.0, 1.0)
    points = denormalize_corners(corners, buffer.width, buffer.height)

    min_x = int(np.floor(max(0.0, points[:, 0].min())))
    max_x = int(np.ceil(min(float(buffer.width), points[:, 0].max())))
    min_y = int(np.floor(max(0.0, points[:, 1].min())))
    max_y = int(np.ceil(min(float(buffer.height), points[:, 1].max())))

    crop_width = max(1, max_x - min_x)
    crop_height = max(1, max_y - min_y)
    min_x = min(min_x, buffer.width - crop_width)
    min_y = min(min_y, buffer.height - crop_height)

    cropped = buffer.to_array()[min_y:min_y + crop_height, min_x:min_x + crop_width].copy()

    mask = np.zeros((crop_height, crop_width), dtype=np.uint8)
    polygon = np.round(points - np.array([min_x, min_y])).astype(np.int32)
    cv2.fillPoly(mask, [polygon], 255)
    cropped[mask == 0, 3] = 0

    return PixelBuffer.from_array(cropped)
