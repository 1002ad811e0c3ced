"""
Utility modules for the signature extraction pipeline.
"""

from .errors import SignatureExtractionError, InvalidInput, NoRegionFound
from .images import to_grayscale, binarize_inverse, draw_debug_image
from .locator import BoundingBox, Region, LocatorResult, RegionLocator, find_regions, select_largest
from .matting import BackgroundMatting, remove_white_background
from .extractor import SignatureExtractor, ExtractionResult, extract_signature
from .io import load_pdf_page, load_image, save_image, save_json, detect_input_type

__all__ = [
    # Errors
    "SignatureExtractionError", "InvalidInput", "NoRegionFound",
    # Images
    "to_grayscale", "binarize_inverse", "draw_debug_image",
    # Location
    "BoundingBox", "Region", "LocatorResult", "RegionLocator", "find_regions", "select_largest",
    # Matting
    "BackgroundMatting", "remove_white_background",
    # Pipeline
    "SignatureExtractor", "ExtractionResult", "extract_signature",
    # IO
    "load_pdf_page", "load_image", "save_image", "save_json",
    "detect_input_type",
]
