"""
Document corner detector for photographed text documents
"""

import numpy as np
from typing import Optional, Tuple, NamedTuple

from common.bounds import Bounds
from .corners import fallback_corners
from .pixel_buffer import PixelBuffer


# ITU-R BT.601 weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


class DarkRatioProfiles(NamedTuple):
    row_ratio: np.ndarray
    col_ratio: np.ndarray
    max_row_ratio: float
    max_col_ratio: float
    dark_threshold: float


def round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def compute_luma_stats(buffer: Optional[PixelBuffer]) -> Optional[Tuple[np.ndarray, float, float]]:
    """
    Per-pixel luma and its global statistics.

    Args:
        buffer: RGBA pixel buffer

    Returns:
        (luma, mean, std) where luma has shape (height, width) and mean/std are
        population statistics, or None when the buffer is empty or undersized
    """
    if buffer is None or not buffer.is_valid():
        return None

    rgba = buffer.to_array()
    luma = rgba[:, :, :3].astype(np.float64) @ LUMA_WEIGHTS

    return luma, float(luma.mean()), float(luma.std())


def compute_dark_ratio_profiles(
    luma: np.ndarray,
    mean: float,
    std: float,
    threshold_std_factor: float = 0.35,
    threshold_bounds: Tuple[float, float] = (35.0, 165.0)
) -> DarkRatioProfiles:
    """
    Fraction of dark pixels in every row and every column.

    A pixel is dark when its luma is at or below
    clamp(mean - threshold_std_factor * std, *threshold_bounds).
    """
    low, high = threshold_bounds
    dark_threshold = float(np.clip(mean - threshold_std_factor * std, low, high))

    dark = luma <= dark_threshold
    row_ratio = dark.mean(axis=1)
    col_ratio = dark.mean(axis=0)

    return DarkRatioProfiles(
        row_ratio=row_ratio,
        col_ratio=col_ratio,
        max_row_ratio=float(row_ratio.max()) if row_ratio.size else 0.0,
        max_col_ratio=float(col_ratio.max()) if col_ratio.size else 0.0,
        dark_threshold=dark_threshold,
    )


def _first_and_last(ratio: np.ndarray, min_ratio: float) -> Tuple[int, int]:
    hits = np.flatnonzero(ratio >= min_ratio)
    if hits.size == 0:
        return -1, -1
    return int(hits[0]), int(hits[-1])


def locate_bounding_box(
    profiles: DarkRatioProfiles,
    min_ratio_floor: float = 0.008,
    peak_ratio_factor: float = 0.2
) -> Optional[Bounds]:
    """
    Tightest pixel box whose edge rows/columns carry enough dark pixels.

    A row counts when its ratio reaches max(min_ratio_floor, peak_ratio_factor * max_row_ratio),
    columns likewise.

    Returns:
        Bounds with inclusive edges, or None when no box with positive extent exists
    """
    min_row_ratio = max(min_ratio_floor, peak_ratio_factor * profiles.max_row_ratio)
    min_col_ratio = max(min_ratio_floor, peak_ratio_factor * profiles.max_col_ratio)

    top, bottom = _first_and_last(profiles.row_ratio, min_row_ratio)
    left, right = _first_and_last(profiles.col_ratio, min_col_ratio)

    if min(top, bottom, left, right) < 0 or bottom <= top or right <= left:
        return None

    return Bounds.from_edges(left, top, right, bottom)


class DocumentCornerDetector:
    """
    Class for locating the text-bearing region of a photographed document.

    Thresholds the image against its own brightness statistics, projects the
    dark pixels onto rows and columns and takes the tightest box holding ink.
    """

    def __init__(
        self,
        threshold_std_factor: float = 0.35,
        threshold_bounds: Tuple[float, float] = (35.0, 165.0),
        min_ratio_floor: float = 0.008,
        peak_ratio_factor: float = 0.2,
        padding_ratio: float = 0.01,
        min_std: float = 1.0,
        debug: bool = False
    ):
        """
        Initialize the detector.

        Args:
            threshold_std_factor: How many standard deviations below the mean a pixel must be to count as ink
            threshold_bounds: Clamp range (low, high) for the adaptive dark threshold (0-255)
            min_ratio_floor: Absolute minimum dark ratio for a row/column to count as content
            peak_ratio_factor: Minimum dark ratio relative to the strongest row/column
            padding_ratio: Padding added on each side, as a fraction of the box extent
            min_std: Images with a smaller luma standard deviation are treated as blank
            debug: Print intermediate statistics
        """
        self.threshold_std_factor = threshold_std_factor
        self.threshold_bounds = threshold_bounds
        self.min_ratio_floor = min_ratio_floor
        self.peak_ratio_factor = peak_ratio_factor
        self.padding_ratio = padding_ratio
        self.min_std = min_std
        self.debug = debug

    def detect(self, buffer: Optional[PixelBuffer]) -> np.ndarray:
        """
        Detect document corners in the buffer.

        Args:
            buffer: RGBA pixel buffer (ideally downscaled to at most 900px on the longer edge)

        Returns:
            (4, 2) array of normalized corners ordered top-left, top-right,
            bottom-right, bottom-left. Falls back to a fixed inset quadrilateral
            for invalid or blank input.
        """
        stats = compute_luma_stats(buffer)
        if stats is None:
            if self.debug:
                print("  ⚠️  Invalid pixel buffer, using fallback corners")
            return fallback_corners()

        luma, mean, std = stats
        if std < self.min_std:
            if self.debug:
                print(f"  ⚠️  Flat image (std={std:.2f}), using fallback corners")
            return fallback_corners()

        profiles = compute_dark_ratio_profiles(
            luma, mean, std,
            threshold_std_factor=self.threshold_std_factor,
            threshold_bounds=self.threshold_bounds
        )

        if self.debug:
            print(f"  Luma mean={mean:.1f} std={std:.1f} dark threshold={profiles.dark_threshold:.1f}")
            print(f"  Max row ratio={profiles.max_row_ratio:.3f} max col ratio={profiles.max_col_ratio:.3f}")

        box = locate_bounding_box(
            profiles,
            min_ratio_floor=self.min_ratio_floor,
            peak_ratio_factor=self.peak_ratio_factor
        )
        if box is None:
            if self.debug:
                print("  ⚠️  No dark region found, using fallback corners")
            return fallback_corners()

        width, height = buffer.width, buffer.height
        pad_x = round_half_up(box.width * self.padding_ratio)
        pad_y = round_half_up(box.height * self.padding_ratio)
        box = box.padded(pad_x, pad_y).clamped(width - 1, height - 1)

        if self.debug:
            print(f"  ✅ Content box {box} ({box.area() / float(width * height) * 100:.1f}% of image)")

        corners = np.array(box.corners(), dtype=np.float64)
        return corners / np.array([width, height], dtype=np.float64)


def detect_document_corners(buffer: Optional[PixelBuffer], **params) -> np.ndarray:
    """Detect normalized document corners; params are forwarded to DocumentCornerDetector."""
    return DocumentCornerDetector(**params).detect(buffer)
