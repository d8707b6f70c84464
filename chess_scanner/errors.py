"""Exception types raised across the scanner."""

from __future__ import annotations


class ChessScannerError(Exception):
    """Base class for recoverable scanner failures."""


class ImageDecodeError(ChessScannerError):
    """The input bytes could not be decoded into an image."""


class AnalysisError(ChessScannerError):
    """The remote vision model did not return a usable FEN."""
