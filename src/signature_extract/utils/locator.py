"""
Signature region location.

Finds the bounding box of the largest connected dark region on a page,
on the assumption that a handwritten signature is the largest contiguous
blob of marking. Regions are ranked by bounding-box area, not by the
number of ink pixels they contain, so a large sparse scrawl outranks a
small dense stamp (and a long ruled line can outrank both).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import numpy as np

from .errors import InvalidInput, NoRegionFound
from .images import binarize_inverse, to_grayscale, validate_color_image, validate_threshold

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 200


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in pixel coordinates."""
    left: int
    top: int
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidInput(f"Bounding box must have positive size, got {self.width}x{self.height}")

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_xywh(self) -> Tuple[int, int, int, int]:
        return (self.left, self.top, self.width, self.height)

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> 'BoundingBox':
        return cls(int(x), int(y), int(w), int(h))

    def crop(self, image: np.ndarray) -> np.ndarray:
        """Copy the box out of an image; the result does not alias the source."""
        return image[self.top:self.bottom, self.left:self.right].copy()

    def to_dict(self) -> Dict[str, int]:
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class Region:
    """A connected foreground blob found in a binary mask."""
    contour: np.ndarray
    bbox: BoundingBox

    @property
    def area(self) -> int:
        """Bounding-box area used for ranking."""
        return self.bbox.area


@dataclass
class LocatorResult:
    """Outcome of a successful location pass."""
    bbox: BoundingBox
    crop: np.ndarray
    regions_found: int
    threshold: int


# ============================================================================
# Region Extraction
# ============================================================================

def find_regions(mask: np.ndarray) -> List[Region]:
    """
    Find the outer boundaries of all foreground blobs in a binary mask.

    Internal holes are ignored; only external contours are traced.

    Args:
        mask: Binary mask (255 = foreground)

    Returns:
        Regions in the order the contour tracer discovered them
    """
    import cv2

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    regions = []
    for contour in contours:
        x, y, w, h = cv2.boundingRect(contour)
        regions.append(Region(contour=contour, bbox=BoundingBox.from_xywh(x, y, w, h)))

    logger.debug(f"Found {len(regions)} external regions")
    return regions


def select_largest(regions: List[Region]) -> Region:
    """
    Pick the region with the largest bounding-box area.

    Ties keep the earliest region.

    Raises:
        NoRegionFound: If ``regions`` is empty
    """
    if not regions:
        raise NoRegionFound("no regions found")

    best = regions[0]
    for region in regions[1:]:
        if region.area > best.area:
            best = region
    return best


# ============================================================================
# Locator
# ============================================================================

class RegionLocator:
    """
    Locates the signature region on a page image.

    Args:
        threshold: Default intensity cutoff; pixels darker than this are ink.
            Can be overridden per call to ``locate``.
    """

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        self.threshold = validate_threshold(threshold)

    def locate(self, image: np.ndarray, threshold: Optional[int] = None) -> LocatorResult:
        """
        Find and crop the largest dark region of a BGR page image.

        Args:
            image: Page image (H, W, 3), BGR
            threshold: Optional per-call override of the intensity cutoff

        Returns:
            LocatorResult with the winning box and an independent color crop

        Raises:
            InvalidInput: If the image is empty or not three-channel
            NoRegionFound: If nothing on the page is darker than the cutoff
        """
        image = validate_color_image(image)
        threshold = self.threshold if threshold is None else validate_threshold(threshold)

        gray = to_grayscale(image)
        mask = binarize_inverse(gray, threshold)
        regions = find_regions(mask)

        if not regions:
            logger.info(f"No regions darker than {threshold} found")
            raise NoRegionFound(f"no regions found (threshold={threshold})")

        best = select_largest(regions)

        logger.info(
            f"Selected region {best.bbox.to_xywh()} "
            f"(area {best.area}) out of {len(regions)} candidates"
        )

        return LocatorResult(
            bbox=best.bbox,
            crop=best.bbox.crop(image),
            regions_found=len(regions),
            threshold=threshold,
        )
