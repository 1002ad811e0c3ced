"""
Background removal for cropped signature regions.

Every pixel is classified on its own: near-white pixels become fully
transparent, everything else stays fully opaque with its color unchanged.
The matte is hard (alpha is always 0 or 255) with no smoothing.
"""

import logging
from typing import Tuple
import numpy as np

from .errors import InvalidInput
from .images import validate_color_image, validate_threshold

logger = logging.getLogger(__name__)

DEFAULT_WHITE_THRESHOLD = 200
TRANSPARENT_PIXEL = (255, 255, 255, 0)
OPAQUE = 255


class BackgroundMatting:
    """
    Hard alpha matting against a near-white background.

    A pixel is background when red > red_threshold AND green > green_threshold
    AND blue > blue_threshold. Comparisons are strict.
    """

    def __init__(
        self,
        red_threshold: int = DEFAULT_WHITE_THRESHOLD,
        green_threshold: int = DEFAULT_WHITE_THRESHOLD,
        blue_threshold: int = DEFAULT_WHITE_THRESHOLD
    ):
        self.red_threshold = validate_threshold(red_threshold, "red_threshold")
        self.green_threshold = validate_threshold(green_threshold, "green_threshold")
        self.blue_threshold = validate_threshold(blue_threshold, "blue_threshold")

    @property
    def thresholds(self) -> Tuple[int, int, int]:
        return (self.red_threshold, self.green_threshold, self.blue_threshold)

    def alpha_mask(self, image: np.ndarray) -> np.ndarray:
        """
        Boolean mask of background pixels.

        Only the first three (B, G, R) channels are read, so a BGRA image
        produced by ``apply`` can be fed back in.
        """
        if image is None:
            raise InvalidInput("empty image")

        image = np.asarray(image)
        if image.size == 0 or image.ndim < 2 or 0 in image.shape[:2]:
            raise InvalidInput("empty image")
        if image.ndim != 3 or image.shape[2] < 3:
            channels = 1 if image.ndim == 2 else image.shape[-1]
            raise InvalidInput(f"unsupported channel count: {channels}")

        blue = image[:, :, 0]
        green = image[:, :, 1]
        red = image[:, :, 2]

        return (
            (red > self.red_threshold)
            & (green > self.green_threshold)
            & (blue > self.blue_threshold)
        )

    def apply(self, image: np.ndarray) -> np.ndarray:
        """
        Produce a BGRA image with a transparent background.

        Args:
            image: Cropped color region (H, W, 3), BGR

        Returns:
            New (H, W, 4) uint8 array, BGRA

        Raises:
            InvalidInput: If the image is empty or not three-channel
        """
        image = validate_color_image(image)
        background = self.alpha_mask(image)

        height, width = background.shape
        output = np.empty((height, width, 4), dtype=np.uint8)
        output[:, :, :3] = image
        output[:, :, 3] = OPAQUE
        output[background] = TRANSPARENT_PIXEL

        logger.debug(
            f"Matted {height}x{width} region: "
            f"{int(background.sum())} transparent pixels"
        )
        return output


def remove_white_background(
    image: np.ndarray,
    thresholds: Tuple[int, int, int] = (DEFAULT_WHITE_THRESHOLD,) * 3
) -> np.ndarray:
    """
    Convenience wrapper around ``BackgroundMatting``.

    Args:
        image: BGR image
        thresholds: (red, green, blue) near-white cutoffs

    Returns:
        BGRA image with near-white pixels transparent
    """
    red, green, blue = thresholds
    return BackgroundMatting(red, green, blue).apply(image)
