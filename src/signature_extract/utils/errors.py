"""
Error taxonomy for the signature extraction pipeline.

Failures of the core are explicit and distinguishable so callers can react
to a blank page (e.g. fall back to a manual crop) differently from a
malformed image.
"""


class SignatureExtractionError(Exception):
    """Base class for all errors raised by the extraction core."""


class InvalidInput(SignatureExtractionError, ValueError):
    """Image is empty, zero-sized, has the wrong channel count, or a threshold is out of range."""


class NoRegionFound(SignatureExtractionError):
    """The thresholded mask contains no foreground region."""
