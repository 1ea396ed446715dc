"""
Tests for document corner detection
"""

import numpy as np
import pytest

from document_detection import PixelBuffer, DocumentCornerDetector, FALLBACK_CORNERS, detect_document_corners
from document_detection.detector import compute_luma_stats, compute_dark_ratio_profiles, locate_bounding_box


def create_text_block_image(width, height, left, top, right, bottom):
    """Light page with a grid of dark text lines/columns inside the given pixel rect"""
    ys, xs = np.mgrid[0:height, 0:width]
    inside = (xs >= left) & (xs <= right) & (ys >= top) & (ys <= bottom)
    line_band = inside & ((ys - top) % 9 <= 2)
    column_band = inside & ((xs - left) % 11 <= 1)

    value = np.where(line_band | column_band, 20, 240).astype(np.uint8)
    rgba = np.stack([value, value, value, np.full_like(value, 255)], axis=-1)
    return PixelBuffer.from_array(rgba)


def create_uniform_image(width, height, value):
    rgba = np.full((height, width, 4), value, dtype=np.uint8)
    rgba[:, :, 3] = 255
    return PixelBuffer.from_array(rgba)


class TestDocumentCornerDetector:
    """Tests for DocumentCornerDetector"""

    @pytest.fixture
    def detector(self):
        return DocumentCornerDetector()

    @pytest.fixture
    def text_image(self):
        return create_text_block_image(120, 100, left=24, top=18, right=96, bottom=82)

    def test_detector_init(self):
        detector = DocumentCornerDetector()
        assert detector.threshold_std_factor == 0.35
        assert detector.threshold_bounds == (35.0, 165.0)
        assert detector.min_ratio_floor == 0.008
        assert detector.peak_ratio_factor == 0.2
        assert detector.padding_ratio == 0.01

    def test_detector_custom_params(self):
        detector = DocumentCornerDetector(
            threshold_std_factor=0.5,
            threshold_bounds=(20, 200),
            peak_ratio_factor=0.3,
            padding_ratio=0.05
        )
        assert detector.threshold_std_factor == 0.5
        assert detector.threshold_bounds == (20, 200)
        assert detector.peak_ratio_factor == 0.3
        assert detector.padding_ratio == 0.05

    def test_detect_none_buffer(self, detector):
        corners = detector.detect(None)
        assert np.array_equal(corners, FALLBACK_CORNERS)

    def test_detect_zero_sized_buffer(self, detector):
        corners = detector.detect(PixelBuffer(0, 0, None))
        assert corners.tolist() == [[0.08, 0.08], [0.92, 0.08], [0.92, 0.92], [0.08, 0.92]]

    def test_detect_undersized_buffer(self, detector):
        buffer = PixelBuffer(10, 10, np.zeros(10 * 10 * 4 - 1, dtype=np.uint8))
        assert np.array_equal(detector.detect(buffer), FALLBACK_CORNERS)

    @pytest.mark.parametrize("value", [0, 20, 128, 240, 255])
    def test_detect_uniform_buffer(self, detector, value):
        corners = detector.detect(create_uniform_image(64, 48, value))
        assert np.array_equal(corners, FALLBACK_CORNERS)

    def test_detect_text_block(self, detector, text_image):
        corners = detector.detect(text_image)

        assert corners.shape == (4, 2)

        tl, tr, br, bl = corners
        assert 0.15 < tl[0] < 0.28
        assert 0.12 < tl[1] < 0.25
        assert 0.75 < br[0] < 0.86
        assert 0.72 < br[1] < 0.9

    def test_detect_text_block_is_axis_aligned(self, detector, text_image):
        tl, tr, br, bl = detector.detect(text_image)

        assert tl[1] == tr[1] and bl[1] == br[1]
        assert tl[0] == bl[0] and tr[0] == br[0]

    def test_detect_padding(self, text_image):
        # 1% of 72px / 64px rounds to 1px on each side
        corners = detect_document_corners(text_image)
        assert np.allclose(corners[0], [23 / 120, 17 / 100])
        assert np.allclose(corners[2], [97 / 120, 83 / 100])

        unpadded = detect_document_corners(text_image, padding_ratio=0.0)
        assert np.allclose(unpadded[0], [24 / 120, 18 / 100])
        assert np.allclose(unpadded[2], [96 / 120, 82 / 100])

    def test_padding_clamped_to_image(self):
        image = create_text_block_image(50, 40, left=0, top=0, right=49, bottom=39)
        corners = detect_document_corners(image, padding_ratio=0.2)

        assert corners[0].tolist() == [0.0, 0.0]
        assert np.allclose(corners[2], [49 / 50, 39 / 40])

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_detect_random_noise_in_range(self, detector, seed):
        rng = np.random.default_rng(seed)
        rgba = rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)
        corners = detector.detect(PixelBuffer.from_array(rgba))

        assert corners.shape == (4, 2)
        assert np.all(corners >= 0.0) and np.all(corners <= 1.0)

    def test_fallback_is_a_copy(self, detector):
        corners = detector.detect(None)
        corners[0, 0] = 0.5
        assert FALLBACK_CORNERS[0, 0] == 0.08

    def test_debug_output(self, text_image, capsys):
        DocumentCornerDetector(debug=True).detect(text_image)
        captured = capsys.readouterr()
        assert "dark threshold" in captured.out


class TestDetectionStages:
    """Tests for the individual detection stages"""

    def test_luma_weights(self):
        rgba = np.array([[[255, 0, 0, 255], [0, 255, 0, 0], [0, 0, 255, 17]]], dtype=np.uint8)
        luma, mean, std = compute_luma_stats(PixelBuffer.from_array(rgba))

        assert luma.shape == (1, 3)
        assert np.allclose(luma[0], [76.245, 149.685, 29.07])
        assert mean == pytest.approx(np.mean([76.245, 149.685, 29.07]))
        assert std == pytest.approx(np.std([76.245, 149.685, 29.07]))

    def test_luma_stats_invalid_buffer(self):
        assert compute_luma_stats(None) is None
        assert compute_luma_stats(PixelBuffer(3, 0, [])) is None
        assert compute_luma_stats(PixelBuffer(2, 2, [0] * 15)) is None

    def test_dark_threshold_clamped(self):
        luma = np.zeros((2, 2))
        assert compute_dark_ratio_profiles(luma, 10.0, 0.0).dark_threshold == 35.0
        assert compute_dark_ratio_profiles(luma, 250.0, 10.0).dark_threshold == 165.0
        assert compute_dark_ratio_profiles(luma, 100.0, 20.0).dark_threshold == pytest.approx(93.0)

    def test_dark_ratio_profiles(self):
        luma = np.full((4, 5), 200.0)
        luma[1, 1:4] = 10.0
        profiles = compute_dark_ratio_profiles(luma, 150.0, 50.0)

        assert profiles.row_ratio.tolist() == [0.0, 0.6, 0.0, 0.0]
        assert profiles.col_ratio.tolist() == [0.0, 0.25, 0.25, 0.25, 0.0]
        assert profiles.max_row_ratio == pytest.approx(0.6)
        assert profiles.max_col_ratio == pytest.approx(0.25)

    def test_locate_bounding_box(self):
        luma = np.full((10, 10), 200.0)
        luma[2:7, 3:9] = 10.0
        profiles = compute_dark_ratio_profiles(luma, 150.0, 50.0)
        box = locate_bounding_box(profiles)

        assert (box.left, box.top, box.right, box.bottom) == (3, 2, 8, 6)

    def test_locate_bounding_box_ignores_weak_rows(self):
        luma = np.full((10, 10), 200.0)
        luma[2:7, 1:9] = 10.0
        luma[9, 0] = 10.0  # a single speck, 10% of the row
        profiles = compute_dark_ratio_profiles(luma, 150.0, 50.0)
        box = locate_bounding_box(profiles)

        assert (box.top, box.bottom) == (2, 6)

    def test_locate_bounding_box_single_row(self):
        luma = np.full((10, 10), 200.0)
        luma[4, 2:8] = 10.0
        profiles = compute_dark_ratio_profiles(luma, 150.0, 50.0)

        assert locate_bounding_box(profiles) is None

    def test_locate_bounding_box_no_signal(self):
        profiles = compute_dark_ratio_profiles(np.full((5, 5), 200.0), 200.0, 0.0)
        assert locate_bounding_box(profiles) is None
