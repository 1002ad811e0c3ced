"""
Configuration for the signature extraction pipeline.

This module provides:
- Threshold settings for region location and background matting
- PDF rasterization settings
- Output settings used by the CLI
- Environment variable overrides
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple
import logging

from .utils.images import validate_threshold

logger = logging.getLogger("signature_extract")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class LocatorConfig:
    """Region location configuration."""
    threshold: int = 200  # pixels darker than this are ink


@dataclass
class MattingConfig:
    """Background matting configuration (near-white cutoffs, strict >)."""
    red_threshold: int = 200
    green_threshold: int = 200
    blue_threshold: int = 200

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.red_threshold, self.green_threshold, self.blue_threshold)


@dataclass
class RasterConfig:
    """PDF rasterization configuration."""
    dpi: int = 200
    page: int = 1  # 1-indexed
    fmt: str = "png"  # intermediate format pdf2image asks poppler for


@dataclass
class OutputConfig:
    """Output configuration."""
    output_path: str = "signature_result.png"
    save_page: bool = False
    debug_image: bool = False
    report: bool = False
    page_dir: Optional[str] = None


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    locator: LocatorConfig = field(default_factory=LocatorConfig)
    matting: MattingConfig = field(default_factory=MattingConfig)
    raster: RasterConfig = field(default_factory=RasterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# ============================================================================
# Default Configuration Instance
# ============================================================================

def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def validate_dpi(value: int, name: str) -> int:
    """Reject non-positive rendering resolutions."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    threshold = _env_int("SIGNATURE_THRESHOLD")
    if threshold is not None:
        config.locator.threshold = validate_threshold(threshold, "SIGNATURE_THRESHOLD")
        logger.debug(f"Threshold overridden from environment: {threshold}")

    white = _env_int("SIGNATURE_WHITE_THRESHOLD")
    if white is not None:
        validate_threshold(white, "SIGNATURE_WHITE_THRESHOLD")
        config.matting = MattingConfig(white, white, white)
        logger.debug(f"White thresholds overridden from environment: {white}")

    dpi = _env_int("SIGNATURE_DPI")
    if dpi is not None:
        config.raster.dpi = validate_dpi(dpi, "SIGNATURE_DPI")

    if os.environ.get("SIGNATURE_DEBUG", "").lower() == "true":
        config.output.debug_image = True

    return config
