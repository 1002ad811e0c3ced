"""
Signature Extraction Pipeline
=============================

Locates the handwritten signature on a rendered document page, crops it,
and removes the paper background so the mark can be composited elsewhere.

Main components:
- Region location (threshold, external contours, largest bounding box)
- Background matting (near-white pixels become transparent)
- PDF page rendering and image I/O
- Command-line interface
"""

__version__ = "1.0.0"
__author__ = "Signature Extraction Team"
