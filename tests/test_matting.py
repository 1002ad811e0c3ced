"""
Tests for background matting.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def single_pixel(b, g, r):
    return np.array([[[b, g, r]]], dtype=np.uint8)


def reference_matte(image, thresholds=(200, 200, 200)):
    """Pixel-by-pixel rule written out longhand."""
    red_t, green_t, blue_t = thresholds
    height, width = image.shape[:2]
    out = np.zeros((height, width, 4), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            b, g, r = (int(v) for v in image[y, x])
            if r > red_t and g > green_t and b > blue_t:
                out[y, x] = (255, 255, 255, 0)
            else:
                out[y, x] = (b, g, r, 255)
    return out


class TestBackgroundMatting:
    """Test near-white classification."""

    @pytest.fixture
    def matting(self):
        from signature_extract.utils.matting import BackgroundMatting
        return BackgroundMatting()

    @pytest.mark.parametrize("value,alpha", [
        (255, 0),
        (201, 0),
        (200, 255),
        (10, 255),
        (0, 255),
    ])
    def test_gray_levels(self, matting, value, alpha):
        result = matting.apply(single_pixel(value, value, value))

        assert result[0, 0, 3] == alpha

    def test_ink_color_preserved(self, matting):
        result = matting.apply(single_pixel(10, 10, 10))

        assert tuple(result[0, 0]) == (10, 10, 10, 255)

    def test_colored_ink_preserved(self, matting):
        """Channel order of the input is kept as is."""
        result = matting.apply(single_pixel(180, 20, 40))

        assert tuple(result[0, 0]) == (180, 20, 40, 255)

    def test_transparent_pixels_are_white(self, matting):
        result = matting.apply(single_pixel(230, 240, 250))

        assert tuple(result[0, 0]) == (255, 255, 255, 0)

    @pytest.mark.parametrize("pixel", [
        (255, 255, 100),
        (255, 100, 255),
        (100, 255, 255),
        (201, 201, 200),
    ])
    def test_all_channels_must_be_near_white(self, matting, pixel):
        """Channels are combined with AND, so one dark channel keeps the pixel."""
        result = matting.apply(single_pixel(*pixel))

        assert result[0, 0, 3] == 255
        assert tuple(result[0, 0, :3]) == pixel

    def test_per_channel_thresholds(self):
        from signature_extract.utils.matting import BackgroundMatting

        matting = BackgroundMatting(red_threshold=250, green_threshold=200, blue_threshold=200)

        # red = 240 is not > 250
        assert matting.apply(single_pixel(220, 220, 240))[0, 0, 3] == 255
        assert matting.apply(single_pixel(220, 220, 251))[0, 0, 3] == 0
        assert matting.thresholds == (250, 200, 200)

    def test_hard_matte(self, matting):
        image = np.random.randint(0, 256, (40, 60, 3), dtype=np.uint8)

        result = matting.apply(image)

        assert set(np.unique(result[:, :, 3])) <= {0, 255}

    def test_matches_pixel_rule(self, matting):
        image = np.random.randint(150, 256, (16, 16, 3), dtype=np.uint8)

        np.testing.assert_array_equal(matting.apply(image), reference_matte(image))

    def test_shape_and_dtype(self, matting):
        image = np.ones((7, 13, 3), dtype=np.uint8) * 255

        result = matting.apply(image)

        assert result.shape == (7, 13, 4)
        assert result.dtype == np.uint8

    def test_input_not_mutated(self, matting):
        image = np.random.randint(0, 256, (20, 20, 3), dtype=np.uint8)
        before = image.copy()

        matting.apply(image)

        np.testing.assert_array_equal(image, before)

    def test_idempotent_on_own_output(self, matting):
        """Matting depends on RGB only, so a second pass keeps every decision."""
        image = np.random.randint(0, 256, (30, 30, 3), dtype=np.uint8)

        first = matting.apply(image)
        second = matting.apply(np.ascontiguousarray(first[:, :, :3]))

        np.testing.assert_array_equal(second[:, :, 3], first[:, :, 3])
        np.testing.assert_array_equal(second, first)

    def test_alpha_mask_ignores_alpha_channel(self, matting):
        image = np.random.randint(0, 256, (10, 10, 3), dtype=np.uint8)
        bgra = matting.apply(image)

        np.testing.assert_array_equal(matting.alpha_mask(bgra), bgra[:, :, 3] == 0)

    def test_four_channel_input_rejected(self, matting):
        from signature_extract.utils.errors import InvalidInput

        with pytest.raises(InvalidInput, match="unsupported channel count"):
            matting.apply(np.zeros((5, 5, 4), dtype=np.uint8))

    def test_grayscale_input_rejected(self, matting):
        from signature_extract.utils.errors import InvalidInput

        with pytest.raises(InvalidInput, match="unsupported channel count"):
            matting.apply(np.zeros((5, 5), dtype=np.uint8))

    def test_empty_input_rejected(self, matting):
        from signature_extract.utils.errors import InvalidInput

        with pytest.raises(InvalidInput, match="empty image"):
            matting.apply(np.zeros((0, 5, 3), dtype=np.uint8))

    @pytest.mark.parametrize("shape", [(5,), (0, 5, 3), (5, 5, 2)])
    def test_alpha_mask_rejects_malformed_input(self, matting, shape):
        from signature_extract.utils.errors import InvalidInput

        with pytest.raises(InvalidInput):
            matting.alpha_mask(np.zeros(shape, dtype=np.uint8))

    def test_invalid_threshold(self):
        from signature_extract.utils.matting import BackgroundMatting
        from signature_extract.utils.errors import InvalidInput

        with pytest.raises(InvalidInput):
            BackgroundMatting(blue_threshold=-1)


class TestRemoveWhiteBackground:
    """Test the functional wrapper."""

    def test_default_thresholds(self):
        from signature_extract.utils.matting import remove_white_background

        image = np.array([[[255, 255, 255], [0, 0, 0]]], dtype=np.uint8)

        result = remove_white_background(image)

        assert result[0, 0, 3] == 0
        assert tuple(result[0, 1]) == (0, 0, 0, 255)

    def test_custom_thresholds(self):
        from signature_extract.utils.matting import remove_white_background

        image = single_pixel(230, 230, 230)

        assert remove_white_background(image, (240, 240, 240))[0, 0, 3] == 255
        assert remove_white_background(image, (220, 220, 220))[0, 0, 3] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
