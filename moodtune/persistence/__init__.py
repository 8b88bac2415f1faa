"""
Persistence layer module for MoodTune.

Handles storage of mood analyses, playlists and their tracks.
"""

from .store import JsonDocumentStore, MoodRepository, PlaylistRepository

__all__ = ['JsonDocumentStore', 'MoodRepository', 'PlaylistRepository']
