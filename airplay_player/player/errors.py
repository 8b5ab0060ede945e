"""Errors raised by the player."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Raised when the media engine cannot build, start or drive a pipeline."""


class SequencingError(RuntimeError):
    """Raised when an event arrives before the pipeline it needs exists or runs."""


class UnhandledCompressionError(ValueError):
    """Raised when audio arrives for a compression type without a pipeline."""
