"""Anime Mirror error hierarchy.

All custom exceptions inherit from AnimeMirrorError. Everything raised
inside the two-step generation chain derives from GenerationError, which
is what MirrorController.generate() catches and reports as a generic
failure.
"""


class AnimeMirrorError(Exception):
    """Base exception for all Anime Mirror errors."""


class InvalidUploadError(AnimeMirrorError):
    """Raised when an uploaded file is not image content."""


class GenerationInProgressError(AnimeMirrorError):
    """Raised when generate is triggered while a run is already in flight."""


class GenerationError(AnimeMirrorError):
    """Raised when the analysis or synthesis step fails."""


class RemoteError(GenerationError):
    """Raised when a call to the generative service itself fails."""


class ParseError(GenerationError):
    """Raised when the analysis response does not match the descriptor schema."""


class NoImageProducedError(GenerationError):
    """Raised when the synthesis response carries no inline image data."""
