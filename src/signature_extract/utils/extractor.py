"""
End-to-end signature extraction.

Runs the two stages in strict sequence on one in-memory page:

    page (BGR) -> RegionLocator -> crop (BGR) -> BackgroundMatting -> signature (BGRA)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import numpy as np

from .locator import BoundingBox, DEFAULT_THRESHOLD, RegionLocator
from .matting import BackgroundMatting, DEFAULT_WHITE_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """A located and matted signature."""
    bbox: BoundingBox
    crop: np.ndarray
    signature: np.ndarray
    regions_found: int
    threshold: int
    white_thresholds: Tuple[int, int, int]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def transparent_fraction(self) -> float:
        alpha = self.signature[:, :, 3]
        return float(np.count_nonzero(alpha == 0)) / alpha.size

    def to_dict(self) -> Dict[str, Any]:
        """Summary suitable for a JSON report (no pixel data)."""
        return {
            "bbox": self.bbox.to_dict(),
            "regions_found": self.regions_found,
            "threshold": self.threshold,
            "white_thresholds": {
                "red": self.white_thresholds[0],
                "green": self.white_thresholds[1],
                "blue": self.white_thresholds[2],
            },
            "transparent_fraction": round(self.transparent_fraction, 4),
            "metadata": self.metadata,
        }


class SignatureExtractor:
    """
    Locate the signature on a page and strip its background.

    Holds only immutable configuration, so one instance can be shared by
    workers that each own their page images.
    """

    def __init__(
        self,
        threshold: int = DEFAULT_THRESHOLD,
        white_thresholds: Tuple[int, int, int] = (DEFAULT_WHITE_THRESHOLD,) * 3
    ):
        self.locator = RegionLocator(threshold)
        self.matting = BackgroundMatting(*white_thresholds)

    @classmethod
    def from_config(cls, config) -> 'SignatureExtractor':
        """Build from a ``PipelineConfig``."""
        return cls(
            threshold=config.locator.threshold,
            white_thresholds=config.matting.as_tuple(),
        )

    def extract(
        self,
        image: np.ndarray,
        threshold: Optional[int] = None,
        source: Optional[str] = None
    ) -> ExtractionResult:
        """
        Extract the signature from a page image.

        Args:
            image: Page image (H, W, 3), BGR
            threshold: Optional per-call override of the ink cutoff
            source: Optional description of where the page came from

        Returns:
            ExtractionResult with the box, color crop and BGRA signature

        Raises:
            InvalidInput: If the page is empty or not three-channel
            NoRegionFound: If the page has no dark region
        """
        located = self.locator.locate(image, threshold=threshold)
        signature = self.matting.apply(located.crop)

        metadata = {"page_shape": list(np.shape(image)[:2])}
        if source:
            metadata["source"] = source

        return ExtractionResult(
            bbox=located.bbox,
            crop=located.crop,
            signature=signature,
            regions_found=located.regions_found,
            threshold=located.threshold,
            white_thresholds=self.matting.thresholds,
            metadata=metadata,
        )


def extract_signature(
    image: np.ndarray,
    threshold: int = DEFAULT_THRESHOLD,
    white_threshold: Tuple[int, int, int] = (DEFAULT_WHITE_THRESHOLD,) * 3
) -> ExtractionResult:
    """One-shot extraction with explicit thresholds."""
    return SignatureExtractor(threshold, white_threshold).extract(image)
