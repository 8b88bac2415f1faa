"""
FastAPI dependency injection for MoodTune.
"""
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Header, HTTPException, status

from ..config.settings import ConfigManager, AppConfig, DEFAULT_CONFIG_PATH
from ..data.validator import MoodTextValidator
from ..persistence.store import JsonDocumentStore, MoodRepository, PlaylistRepository
from ..recommendation.engine import PlaylistGenerator
from ..services.classifier import ClassificationAdapter, HuggingFaceClassifier
from ..services.mood_service import MoodService
from ..services.playlist_export import SpotifyPlaylistExporter
from ..services.track_search import SpotifyTrackSearch
from ..utils.logging import StructuredLogger


logger = logging.getLogger(__name__)


class AppState:
    """Singleton state for the MoodTune application."""

    _instance: Optional["AppState"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.config_manager = ConfigManager()
        self.config: Optional[AppConfig] = None
        self.logger: Optional[StructuredLogger] = None
        self.mood_service: Optional[MoodService] = None
        self.playlist_generator: Optional[PlaylistGenerator] = None
        self._initialized = True

    def initialize(self, config_path: str = DEFAULT_CONFIG_PATH) -> None:
        """Load configuration and wire the services together."""
        if self.config is not None:
            return

        try:
            self.config = self.config_manager.load(config_path)
            self.logger = StructuredLogger(
                "moodtune.api",
                level=self.config.logging.level,
                fmt=self.config.logging.format
            )
            self._build_services()
            self.logger.info("MoodTune API initialized")
        except Exception as e:
            logger.error(f"Failed to initialize MoodTune: {e}")
            raise

    def _build_services(self) -> None:
        config = self.config
        store = JsonDocumentStore(config.storage.path)
        moods = MoodRepository(store)
        playlists = PlaylistRepository(store)

        adapter = ClassificationAdapter(
            HuggingFaceClassifier(config.classifier),
            validator=MoodTextValidator(config.mood.max_text_length),
            logger=self.logger
        )
        self.mood_service = MoodService(adapter, moods, logger=self.logger)
        self.playlist_generator = PlaylistGenerator(
            moods,
            playlists,
            SpotifyTrackSearch(config.track_search),
            exporter=SpotifyPlaylistExporter(config.track_search),
            logger=self.logger,
            config=config.playlist
        )


@lru_cache()
def get_app_state() -> AppState:
    """Shared AppState, initialized on first use."""
    state = AppState()
    state.initialize()
    return state


def get_config() -> AppConfig:
    """Loaded AppConfig (overridable in tests)."""
    return get_app_state().config


def get_mood_service() -> MoodService:
    return get_app_state().mood_service


def get_playlist_generator() -> PlaylistGenerator:
    return get_app_state().playlist_generator


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Owner key for stored records, taken from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required"
        )
    return x_user_id.strip()
