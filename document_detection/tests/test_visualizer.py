"""
Tests for DocumentVisualizer
"""

import numpy as np
import pytest

from document_detection import DocumentVisualizer, FALLBACK_CORNERS


class TestDocumentVisualizer:
    """Tests for DocumentVisualizer"""

    @pytest.fixture
    def image(self):
        return np.zeros((100, 200, 3), dtype=np.uint8)

    def test_visualize_draws_on_copy(self, image):
        result = DocumentVisualizer().visualize(image, FALLBACK_CORNERS)

        assert result.shape == image.shape
        assert np.count_nonzero(result) > 0
        assert np.count_nonzero(image) == 0

    def test_border_at_corner(self, image):
        visualizer = DocumentVisualizer(border_color=(0, 0, 255))
        result = visualizer.visualize(image, FALLBACK_CORNERS, draw_overlay=False)

        # top-left handle sits at (16, 8)
        assert result[8, 16].tolist() == [0, 0, 255]
        # image center is inside the quad but not filled without overlay
        assert result[50, 100].tolist() == [0, 0, 0]

    def test_overlay_fills_quad(self, image):
        result = DocumentVisualizer().visualize(image, FALLBACK_CORNERS, draw_border=False)

        assert np.count_nonzero(result[50, 100]) > 0
        assert np.count_nonzero(result[2, 2]) == 0

    def test_none_inputs(self, image):
        visualizer = DocumentVisualizer()
        assert visualizer.visualize(None, FALLBACK_CORNERS) is None
        assert visualizer.visualize(image, None) is image

    def test_visualize_with_info(self, image):
        result = DocumentVisualizer().visualize_with_info(image, FALLBACK_CORNERS)
        assert result.shape == image.shape
