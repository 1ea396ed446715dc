"""
Canonical ordering and clamping of document corners
"""

import numpy as np
from typing import Iterable, Mapping


# Used whenever no usable quadrilateral is available
FALLBACK_CORNERS = np.array([
    [0.08, 0.08],
    [0.92, 0.08],
    [0.92, 0.92],
    [0.08, 0.92],
], dtype=np.float64)
FALLBACK_CORNERS.setflags(write=False)

CORNER_NAMES = ["top-left", "top-right", "bottom-right", "bottom-left"]


def fallback_corners() -> np.ndarray:
    """Fresh copy of the fallback quadrilateral."""
    return FALLBACK_CORNERS.copy()


def _to_xy(point) -> tuple:
    if isinstance(point, Mapping):
        return point.get("x", 0), point.get("y", 0)
    x, y = point
    return x, y


def normalize_corner_order(points: Iterable) -> np.ndarray:
    """
    Order 4 normalized points as top-left, top-right, bottom-right, bottom-left.

    Coordinates are clamped into [0, 1] first. The point with the smallest x+y
    becomes top-left, the one with the largest x+y bottom-right; of the two
    left over, the one with larger x is top-right.

    Args:
        points: Sequence of (x, y) pairs, {"x": .., "y": ..} mappings or an (n, 2) array

    Returns:
        (4, 2) float64 array. The fallback quadrilateral when the input does not
        hold exactly 4 usable points.
    """
    if points is None:
        return fallback_corners()

    try:
        pts = np.array([_to_xy(p) for p in points], dtype=np.float64)
    except (TypeError, ValueError):
        return fallback_corners()

    if pts.shape != (4, 2):
        return fallback_corners()

    pts = np.clip(np.nan_to_num(pts, nan=0.0), 0.0, 1.0)

    s = pts.sum(axis=1)
    tl = int(np.argmin(s))

    remaining = [i for i in range(4) if i != tl]
    br = remaining[int(np.argmax(s[remaining]))]
    remaining.remove(br)

    first, second = remaining
    if pts[second][0] > pts[first][0]:
        tr, bl = second, first
    else:
        tr, bl = first, second

    return pts[[tl, tr, br, bl]]


def denormalize_corners(corners: np.ndarray, width: int, height: int) -> np.ndarray:
    """Scale normalized corners to pixel coordinates of a width x height image."""
    return np.asarray(corners, dtype=np.float64) * np.array([width, height], dtype=np.float64)


def corners_to_points(corners: np.ndarray) -> list[dict]:
    """JSON-friendly [{"x": .., "y": ..}, ...] representation."""
    return [{"x": float(x), "y": float(y)} for x, y in corners]
