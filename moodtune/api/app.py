"""
FastAPI application factory for MoodTune.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import router
from .dependencies import get_app_state


DESCRIPTION = """
**Mood-based playlist generation API**

Describe how you feel in a sentence; MoodTune classifies the text for
sentiment and emotion, turns that into target audio features and builds a
playlist of matching tracks.

## Quick Start

1. Check API health: `GET /health`
2. Analyze a mood: `POST /moods` with `{"text": "..."}`
3. Generate a playlist: `POST /playlists` with `{"mood_id": "..."}`
4. Browse history: `GET /moods`, `GET /playlists`

Every request except `/health` and `/genres/{emotion}` needs an
`X-User-Id` header identifying the owner of stored records.

## Audio Features

| Feature | Description | Range |
|---------|-------------|-------|
| valence | Musical positivity/happiness | 0.0 - 1.0 |
| energy | Intensity and power | 0.0 - 1.0 |
| danceability | Rhythm suitability | 0.0 - 1.0 |
| acousticness | Acoustic vs electronic | 0.0 - 1.0 |
| tempo | Target tempo in BPM | 50 - 200 |
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the application state on startup."""
    state = get_app_state()
    state.logger.log_config({
        'classifier': vars(state.config.classifier),
        'track_search': vars(state.config.track_search),
        'storage': vars(state.config.storage)
    })
    state.logger.info("MoodTune API is ready")
    yield


def create_app(with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="MoodTune",
        description=DESCRIPTION,
        version="1.0.0",
        lifespan=lifespan if with_lifespan else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")
    # Also mount at root for convenience
    app.include_router(router)
    return app
