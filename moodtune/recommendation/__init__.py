"""
Recommendation module for MoodTune.

This module turns stored mood analyses into persisted playlists.
"""

from .engine import PlaylistGenerator, default_playlist_name
from .schemas import GenerationRequest, GenerationResult

__all__ = [
    'PlaylistGenerator',
    'default_playlist_name',
    'GenerationRequest',
    'GenerationResult'
]
