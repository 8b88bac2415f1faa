"""
Pydantic schemas for MoodTune REST API.
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field


class MoodCreateRequest(BaseModel):
    """Request body for mood analysis."""
    text: str = Field(
        description="Free-text description of the user's mood (max 500 characters)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {"text": "Finally finished my exams, I could dance all night!"}
        }
    }


class ScoreResponse(BaseModel):
    """One classifier label with its confidence."""
    label: str
    score: float


class AudioFeaturesResponse(BaseModel):
    """Target audio features derived from a mood."""
    valence: float
    energy: float
    danceability: float
    acousticness: float
    instrumentalness: float
    tempo: float
    dominant_emotion: str
    emotion_score: float
    positivity: float


class MoodResponse(BaseModel):
    """A stored mood analysis."""
    id: str
    user_id: str
    text: str
    dominant_emotion: str
    emotion_score: float
    positivity: float
    sentiment: List[ScoreResponse]
    emotions: List[ScoreResponse]
    audio_features: AudioFeaturesResponse
    created_at: datetime


class MoodListResponse(BaseModel):
    """Page of a user's moods, newest first."""
    moods: List[MoodResponse]
    total: int = Field(ge=0)
    limit: int
    offset: int


class PlaylistCreateRequest(BaseModel):
    """Request body for playlist generation."""
    mood_id: str = Field(min_length=1, description="ID of a stored mood")
    name: Optional[str] = Field(
        default=None,
        description="Playlist name; defaults to '<Emotion> Vibes - <date>'"
    )
    track_count: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of tracks to fetch; defaults to playlist.default_track_count, "
                    "at most playlist.max_track_count"
    )
    save_to_spotify: bool = Field(
        default=False,
        description="Also create the playlist in the user's Spotify account"
    )
    spotify_access_token: Optional[str] = Field(
        default=None,
        description="User Spotify token, required when save_to_spotify is true"
    )


class TrackResponse(BaseModel):
    """Track at a position in a playlist."""
    position: int = Field(ge=0)
    id: str
    name: str
    artist: str
    artists: List[str]
    album: str
    uri: str
    preview_url: Optional[str] = None
    duration_ms: int
    external_url: str
    image_url: Optional[str] = None


class PlaylistSummaryResponse(BaseModel):
    """Playlist without its tracks."""
    id: str
    user_id: str
    mood_id: str
    name: str
    description: str
    spotify_playlist_id: Optional[str] = None
    spotify_url: Optional[str] = None
    is_public: bool
    track_count: int
    created_at: datetime


class PlaylistResponse(PlaylistSummaryResponse):
    """Playlist with its ordered tracks."""
    tracks: List[TrackResponse]


class ExportResponse(BaseModel):
    """Outcome of the optional Spotify export."""
    status: str = Field(description="skipped, exported or failed")
    playlist_id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None


class PlaylistCreateResponse(BaseModel):
    """Response body for playlist generation."""
    playlist: PlaylistResponse
    export: ExportResponse
    processing_time_ms: float = Field(ge=0.0)


class PlaylistListResponse(BaseModel):
    """Page of a user's playlists, newest first."""
    playlists: List[PlaylistSummaryResponse]
    total: int = Field(ge=0)
    limit: int
    offset: int


class GenreResponse(BaseModel):
    """Genre seeds used for an emotion."""
    emotion: str
    genres: List[str]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="API status")
    version: str = Field(description="API version")
    classifier_configured: bool = Field(description="Whether a Hugging Face API key is set")
    search_configured: bool = Field(description="Whether Spotify client credentials are set")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error response format."""
    detail: str = Field(description="Error message")
