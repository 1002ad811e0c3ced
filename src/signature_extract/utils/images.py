"""
Image utilities for the signature extraction pipeline.

Provides:
- Input validation (empty images, channel counts)
- Grayscale conversion
- Inverse binary thresholding (ink -> foreground)
- Debug visualization
"""

import logging
from typing import List, Optional, Tuple
import numpy as np

from .errors import InvalidInput

logger = logging.getLogger(__name__)

FOREGROUND = 255
BACKGROUND = 0


# ============================================================================
# Validation
# ============================================================================

def validate_threshold(value: int, name: str = "threshold") -> int:
    """Check that a threshold is an integer intensity in 0..255."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if not 0 <= int(value) <= 255:
        raise InvalidInput(f"{name} must be in 0..255, got {value}")
    return int(value)


def validate_color_image(image: Optional[np.ndarray]) -> np.ndarray:
    """
    Ensure the input is a non-empty three-channel image.

    Args:
        image: Candidate image array

    Returns:
        The same array

    Raises:
        InvalidInput: If the image is empty or is not three-channel
    """
    if image is None:
        raise InvalidInput("empty image")

    image = np.asarray(image)
    if image.size == 0 or image.ndim < 2 or 0 in image.shape[:2]:
        raise InvalidInput("empty image")

    if image.ndim != 3 or image.shape[2] != 3:
        channels = 1 if image.ndim == 2 else image.shape[2]
        raise InvalidInput(f"unsupported channel count: {channels}")

    return image


# ============================================================================
# Core Conversion Functions
# ============================================================================

def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert a BGR image to single-channel luminance.

    Args:
        image: Input image (BGR)

    Returns:
        New grayscale image of the same height and width
    """
    import cv2

    image = validate_color_image(image)
    return cv2.cvtColor(np.ascontiguousarray(image, dtype=np.uint8), cv2.COLOR_BGR2GRAY)


def binarize_inverse(gray: np.ndarray, threshold: int = 200) -> np.ndarray:
    """
    Inverse binary threshold: dark pixels become foreground.

    A pixel with intensity strictly below ``threshold`` is set to
    FOREGROUND (255); every other pixel is BACKGROUND (0).

    Args:
        gray: Grayscale image
        threshold: Intensity cutoff (0..255)

    Returns:
        New binary mask
    """
    import cv2

    threshold = validate_threshold(threshold)

    # THRESH_BINARY_INV keeps pixels <= thresh, so shift by one to get "< threshold"
    _, mask = cv2.threshold(gray, threshold - 1, FOREGROUND, cv2.THRESH_BINARY_INV)

    logger.debug(f"Applied inverse binarization at threshold {threshold}")
    return mask


# ============================================================================
# Debug Visualization
# ============================================================================

def draw_debug_image(
    image: np.ndarray,
    boxes: List[Tuple[int, int, int, int]],
    labels: Optional[List[str]] = None,
    colors: Optional[List[Tuple[int, int, int]]] = None,
    line_width: int = 2
) -> np.ndarray:
    """
    Draw bounding boxes on a copy of the image for debugging.

    Args:
        image: Input image
        boxes: List of (x, y, width, height) tuples
        labels: Optional labels for each box
        colors: Optional colors for each box (BGR)
        line_width: Line thickness

    Returns:
        Image with drawn boxes
    """
    import cv2

    if len(image.shape) == 2:
        debug_img = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        debug_img = image.copy()

    default_colors = [
        (0, 0, 255),    # Red
        (0, 255, 0),    # Green
        (255, 0, 0),    # Blue
    ]

    for i, box in enumerate(boxes):
        x, y, w, h = box
        color = colors[i] if colors and i < len(colors) else default_colors[i % len(default_colors)]

        # Last pixel covered by the box is (x + w - 1, y + h - 1)
        cv2.rectangle(debug_img, (x, y), (x + w - 1, y + h - 1), color, line_width)

        if labels and i < len(labels):
            cv2.putText(
                debug_img,
                labels[i],
                (x, max(y - 5, 10)),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.5,
                color,
                1
            )

    return debug_img
