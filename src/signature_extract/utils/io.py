"""
I/O utilities for the signature extraction pipeline.

Handles:
- Rendering a single PDF page to an image
- Image loading and saving
- JSON extraction reports
- Input type detection
"""

import json
import logging
from pathlib import Path
from typing import Union, Optional, Any
from dataclasses import asdict

import numpy as np

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.tiff', '.tif', '.bmp')


# ============================================================================
# PDF to Image Conversion
# ============================================================================

def load_pdf_page(
    pdf_path: Union[str, Path],
    page: int = 1,
    dpi: int = 200,
    fmt: str = "png",
    output_dir: Optional[Union[str, Path]] = None
) -> np.ndarray:
    """
    Render one PDF page to an image using pdf2image (poppler backend).

    Args:
        pdf_path: Path to the PDF file
        page: Page to render (1-indexed)
        dpi: Resolution for rendering
        fmt: Intermediate image format poppler renders to
        output_dir: Optional directory to save the rendered page

    Returns:
        Numpy array (BGR format) of the page

    Raises:
        FileNotFoundError: If PDF file doesn't exist
        ValueError: If the page number is out of range
        RuntimeError: If the PDF cannot be parsed or poppler is missing
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")
    if page < 1:
        raise ValueError(f"Page numbers start at 1, got {page}")

    from pdf2image import convert_from_path
    from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError

    try:
        logger.info(f"Rendering page {page} of {pdf_path} at {dpi} DPI")

        pil_images = convert_from_path(
            pdf_path,
            dpi=dpi,
            first_page=page,
            last_page=page,
            fmt=fmt,
        )
    except PDFInfoNotInstalledError:
        raise RuntimeError(
            "Poppler is not installed. Install with:\n"
            "  macOS: brew install poppler\n"
            "  Linux: sudo apt-get install poppler-utils"
        )
    except (PDFPageCountError, PDFSyntaxError) as e:
        raise RuntimeError(f"Failed to parse PDF: {e}")

    if not pil_images:
        raise ValueError(f"Page {page} is out of range for {pdf_path}")

    # RGB -> BGR for OpenCV compatibility
    img_array = np.array(pil_images[0].convert("RGB"))
    img_array = img_array[:, :, ::-1].copy()

    if output_dir:
        save_image(img_array, Path(output_dir) / f"page_{page:04d}.png")

    logger.debug(f"Rendered page shape: {img_array.shape}")
    return img_array


def get_pdf_page_count(pdf_path: Union[str, Path]) -> int:
    """Get the number of pages in a PDF file."""
    try:
        from pdf2image import pdfinfo_from_path
        info = pdfinfo_from_path(str(pdf_path))
        return info.get('Pages', 0)
    except Exception as e:
        logger.warning(f"Could not get PDF page count: {e}")
        return 0


# ============================================================================
# Image Loading
# ============================================================================

def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Load a color image from file.

    Args:
        image_path: Path to the image file

    Returns:
        Numpy array representing the image (BGR format)

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If image cannot be decoded
    """
    import cv2

    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    img = cv2.imread(str(image_path), cv2.IMREAD_COLOR)

    if img is None:
        raise ValueError(f"Could not decode image: {image_path}")

    logger.debug(f"Loaded image: {image_path}, shape: {img.shape}")
    return img


def save_image(
    image: np.ndarray,
    output_path: Union[str, Path],
    quality: int = 95
) -> Path:
    """
    Save an image to file.

    BGRA arrays keep their alpha channel when written as PNG.

    Args:
        image: Numpy array representing the image
        output_path: Path to save the image
        quality: JPEG quality (1-100)

    Returns:
        Path to the saved image

    Raises:
        IOError: If OpenCV fails to encode or write the file
    """
    import cv2

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix.lower() in ('.jpg', '.jpeg'):
        if image.ndim == 3 and image.shape[2] == 4:
            logger.warning(f"JPEG cannot store transparency, alpha dropped: {output_path}")
        ok = cv2.imwrite(str(output_path), image, [cv2.IMWRITE_JPEG_QUALITY, quality])
    else:
        ok = cv2.imwrite(str(output_path), image)

    if not ok:
        raise IOError(f"Failed to write image: {output_path}")

    logger.debug(f"Saved image: {output_path}")
    return output_path


# ============================================================================
# JSON Serialization
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy values and dataclasses."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if hasattr(obj, '__dataclass_fields__'):
            return asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def save_json(
    data: Any,
    output_path: Union[str, Path],
    indent: int = 2
) -> Path:
    """
    Save data to a JSON file.

    Args:
        data: Data to serialize (dict, list, dataclass, etc.)
        output_path: Path to save the JSON file
        indent: Indentation level for pretty printing

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False, cls=EnhancedJSONEncoder)

    logger.debug(f"Saved JSON: {output_path}")
    return output_path


# ============================================================================
# File Type Detection
# ============================================================================

def detect_input_type(input_path: Union[str, Path]) -> str:
    """
    Detect the type of an input file.

    Args:
        input_path: Path to file

    Returns:
        One of: 'pdf', 'image', 'unknown'
    """
    input_path = Path(input_path)

    if not input_path.is_file():
        return 'unknown'

    suffix = input_path.suffix.lower()
    if suffix == '.pdf':
        return 'pdf'
    elif suffix in IMAGE_EXTENSIONS:
        return 'image'

    return 'unknown'
