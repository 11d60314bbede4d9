"""Poster generation module."""
from poster.models import (
    PosterRequest,
    ImageResult,
    DescriptionResult,
    FailureResult,
    GenerationOutcome
)
from poster.provider import PosterProvider, GeminiPosterProvider, get_poster_provider
from poster.services import PosterGenerator

__all__ = [
    "PosterRequest",
    "ImageResult",
    "DescriptionResult",
    "FailureResult",
    "GenerationOutcome",
    "PosterProvider",
    "GeminiPosterProvider",
    "get_poster_provider",
    "PosterGenerator"
]
