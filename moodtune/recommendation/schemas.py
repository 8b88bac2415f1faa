"""
Playlist generation schemas for the MoodTune system.
"""
from dataclasses import dataclass
from typing import Optional

from ..data.schemas import ExportResult, Playlist


@dataclass
class GenerationRequest:
    """Request to build a playlist from a stored mood.

    ``track_count`` of None means the configured default.
    """
    user_id: str
    mood_id: str
    name: Optional[str] = None
    track_count: Optional[int] = None
    save_to_spotify: bool = False
    spotify_access_token: Optional[str] = None

    def __post_init__(self):
        if not self.mood_id:
            raise ValueError("Mood ID is required")
        if self.track_count is not None and self.track_count <= 0:
            raise ValueError("Track count must be positive")


@dataclass
class GenerationResult:
    """Stored playlist plus the outcome of the optional Spotify export."""
    playlist: Playlist
    export: ExportResult
    processing_time_ms: float = 0.0
