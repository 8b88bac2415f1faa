"""
API module for MoodTune REST API.
"""
from .routes import router
from .schemas import (
    MoodCreateRequest,
    MoodResponse,
    PlaylistCreateRequest,
    PlaylistCreateResponse,
    PlaylistResponse,
    HealthResponse
)

__all__ = [
    "router",
    "MoodCreateRequest",
    "MoodResponse",
    "PlaylistCreateRequest",
    "PlaylistCreateResponse",
    "PlaylistResponse",
    "HealthResponse"
]
