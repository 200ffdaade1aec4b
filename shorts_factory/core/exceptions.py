"""Error taxonomy for the shorts pipeline.

Only ``ProviderUnavailable`` is recovered inside a stage (the asset fetcher
falls back to placeholders). Every other error ends the current run.
"""

from typing import Optional


class ShortsFactoryError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(ShortsFactoryError):
    """Required configuration is missing; raised at construction time."""


class InvalidInput(ShortsFactoryError, ValueError):
    """Bad arguments to a pure function (non-positive duration or count)."""


class ProviderUnavailable(ShortsFactoryError):
    """The stock photo provider failed (network, auth, rate limit, bad payload)."""


class GenerationError(ShortsFactoryError):
    """The script generator failed or returned unusable structured text."""


class SynthesisError(ShortsFactoryError):
    """Narration synthesis failed."""


class EmptyScript(ShortsFactoryError):
    """The script has no non-empty sentence to build subtitles from."""


class CompositionError(ShortsFactoryError):
    """The transcoding engine failed or produced no output file."""

    def __init__(self, message: str, diagnostics: Optional[str] = None):
        super().__init__(message)
        self.diagnostics = diagnostics or ""


class ThumbnailError(ShortsFactoryError):
    """The thumbnail image could not be rendered."""


class PublishError(ShortsFactoryError):
    """Uploading the video or its thumbnail failed."""
