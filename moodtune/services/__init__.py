"""
External-service clients and application services for MoodTune.
"""

from .classifier import HuggingFaceClassifier, ClassificationAdapter
from .track_search import SpotifyClientCredentials, SpotifyTrackSearch, track_from_spotify
from .playlist_export import SpotifyPlaylistExporter
from .mood_service import MoodService

__all__ = [
    'HuggingFaceClassifier',
    'ClassificationAdapter',
    'SpotifyClientCredentials',
    'SpotifyTrackSearch',
    'track_from_spotify',
    'SpotifyPlaylistExporter',
    'MoodService'
]
