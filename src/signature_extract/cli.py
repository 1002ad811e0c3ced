#!/usr/bin/env python
"""
Command-line interface for the signature extraction pipeline.

Usage:
    signature-extract --input <pdf_or_image> [--output signature_result.png] [options]

Examples:
    # Extract the signature from the first page of a PDF
    signature-extract --input contract.pdf

    # Lower the ink threshold for a faint scan and keep the rendered page
    signature-extract --input scan.pdf --threshold 160 --save-page

    # Debug mode writes the page with the detected box drawn on it
    signature-extract --input page.png --output out/sig.png --debug --report
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger("signature_extract")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_REGION = 2
EXIT_INTERRUPTED = 130


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="signature-extract",
        description="Extract a handwritten signature from a document page onto a transparent background",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  signature written
  1  invalid input or I/O failure
  2  no dark region found on the page
        """
    )

    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input PDF file or page image"
    )

    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output PNG path (default: signature_result.png)"
    )

    parser.add_argument(
        "--threshold", "-t",
        type=int,
        default=None,
        help="Ink cutoff: pixels darker than this are ink (default: 200)"
    )

    white = parser.add_mutually_exclusive_group()
    white.add_argument(
        "--white-threshold",
        type=int,
        default=None,
        help="Near-white cutoff applied to all three channels (default: 200)"
    )
    white.add_argument(
        "--rgb-threshold",
        type=int,
        nargs=3,
        metavar=("R", "G", "B"),
        default=None,
        help="Per-channel near-white cutoffs"
    )

    parser.add_argument(
        "--dpi",
        type=int,
        default=None,
        help="DPI for PDF rendering (default: 200)"
    )

    parser.add_argument(
        "--page",
        type=int,
        default=None,
        help="PDF page to process, 1-indexed (default: 1)"
    )

    parser.add_argument(
        "--save-page",
        action="store_true",
        help="Also save the rendered PDF page next to the output"
    )

    parser.add_argument(
        "--page-dir",
        default=None,
        help="Directory for the rendered PDF page (default: next to the output)"
    )

    parser.add_argument(
        "--report",
        action="store_true",
        help="Write a JSON report with the detected bounding box"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Save the page with the detected box drawn on it"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser


def check_dependencies(needs_pdf: bool = False) -> bool:
    """Check if required dependencies are available."""
    missing = []

    try:
        import cv2  # noqa: F401
    except ImportError:
        missing.append("opencv-python")

    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")

    if needs_pdf:
        try:
            import pdf2image  # noqa: F401
        except ImportError:
            missing.append("pdf2image (for PDF support)")

    if missing:
        logger.error("Missing required dependencies:")
        for dep in missing:
            logger.error(f"  - {dep}")
        return False

    return True


def build_config(args):
    """Merge command-line arguments over the environment-derived config."""
    from .config import MattingConfig, get_config, validate_dpi, validate_threshold

    config = get_config()

    if args.threshold is not None:
        config.locator.threshold = validate_threshold(args.threshold, "--threshold")
    if args.white_threshold is not None:
        value = validate_threshold(args.white_threshold, "--white-threshold")
        config.matting = MattingConfig(value, value, value)
    if args.rgb_threshold is not None:
        red, green, blue = (validate_threshold(v, "--rgb-threshold") for v in args.rgb_threshold)
        config.matting = MattingConfig(red, green, blue)
    if args.dpi is not None:
        config.raster.dpi = validate_dpi(args.dpi, "--dpi")
    if args.page is not None:
        config.raster.page = args.page
    if args.output is not None:
        config.output.output_path = args.output
    if args.page_dir is not None:
        config.output.page_dir = args.page_dir

    config.output.save_page = config.output.save_page or args.save_page
    config.output.report = config.output.report or args.report
    if args.debug:
        config.output.debug_image = True

    return config


def run_pipeline(args) -> int:
    """Run signature extraction for one input file."""
    from .utils.errors import InvalidInput, NoRegionFound
    from .utils.extractor import SignatureExtractor
    from .utils.images import draw_debug_image
    from .utils.io import detect_input_type, get_pdf_page_count, load_image, load_pdf_page
    from .utils.io import save_image, save_json

    start_time = time.time()

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    input_path = Path(args.input)
    output_path = Path(config.output.output_path)
    input_type = detect_input_type(input_path)

    logger.info(f"Input type detected: {input_type}")

    if input_type == "pdf":
        if not check_dependencies(needs_pdf=True):
            return EXIT_FAILURE
        page_count = get_pdf_page_count(input_path)
        if page_count and config.raster.page > page_count:
            logger.error(f"Page {config.raster.page} requested but {input_path} has {page_count} page(s)")
            return EXIT_FAILURE
        page_dir = config.output.page_dir or output_path.parent
        image = load_pdf_page(
            input_path,
            page=config.raster.page,
            dpi=config.raster.dpi,
            fmt=config.raster.fmt,
            output_dir=page_dir if config.output.save_page else None
        )
    elif input_type == "image":
        image = load_image(input_path)
    else:
        logger.error(f"Unsupported input: {input_path}")
        return EXIT_FAILURE

    extractor = SignatureExtractor.from_config(config)

    try:
        result = extractor.extract(image, source=str(input_path))
    except NoRegionFound as e:
        logger.error(f"No signature found: {e}")
        return EXIT_NO_REGION
    except InvalidInput as e:
        logger.error(f"Invalid page image: {e}")
        return EXIT_FAILURE

    save_image(result.signature, output_path)
    logger.info(f"Saved signature: {output_path}")

    if config.output.debug_image:
        debug_path = output_path.with_name(f"{output_path.stem}_debug.png")
        debug = draw_debug_image(image, [result.bbox.to_xywh()], ["signature"])
        save_image(debug, debug_path)
        logger.info(f"Saved debug image: {debug_path}")

    if config.output.report:
        report_path = output_path.with_suffix(".json")
        save_json(result.to_dict(), report_path)
        logger.info(f"Saved report: {report_path}")

    elapsed = time.time() - start_time

    if not args.quiet:
        box = result.bbox
        print(f"Signature with transparent background saved to {output_path}")
        print(f"  Region: x={box.left} y={box.top} w={box.width} h={box.height} "
              f"({result.regions_found} candidate regions)")
        print(f"  Processing time: {elapsed:.2f}s")

    return EXIT_OK


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    if not check_dependencies():
        sys.exit(EXIT_FAILURE)

    try:
        exit_code = run_pipeline(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except (FileNotFoundError, ValueError, RuntimeError, IOError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        if args.debug:
            raise
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
