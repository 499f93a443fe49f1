"""Metadata providers queried while composing notifications."""

from .base import MetadataClient
from .omdb import OmdbClient
from .tmdb import TmdbClient

__all__ = [
    "MetadataClient",
    "OmdbClient",
    "TmdbClient",
]
