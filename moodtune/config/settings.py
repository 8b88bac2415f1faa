"""
Configuration management for MoodTune.

Settings live in a YAML file (see ``default_config.yaml``). ``MOODTUNE_*``
variables override individual values; API credentials come only from the
environment or a ``.env`` file.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_CONFIG_PATH = str(Path(__file__).parent / "default_config.yaml")

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
LOG_FORMATS = ('json', 'text')

# Spotify returns at most this many recommendations per request.
MAX_SEARCH_LIMIT = 100


@dataclass
class ClassifierConfig:
    """Configuration for the Hugging Face text classifiers."""
    api_url: str = "https://router.huggingface.co/hf-inference/models"
    sentiment_model: str = "distilbert/distilbert-base-uncased-finetuned-sst-2-english"
    emotion_model: str = "j-hartmann/emotion-english-distilroberta-base"
    timeout_seconds: float = 30.0
    api_key: Optional[str] = None


@dataclass
class TrackSearchConfig:
    """Configuration for the Spotify track search."""
    api_url: str = "https://api.spotify.com/v1"
    token_url: str = "https://accounts.spotify.com/api/token"
    timeout_seconds: float = 20.0
    client_id: Optional[str] = None
    client_secret: Optional[str] = None


@dataclass
class MoodConfig:
    """Configuration for mood text submission."""
    max_text_length: int = 500


@dataclass
class PlaylistConfig:
    """Configuration for playlist generation."""
    default_track_count: int = 20
    max_track_count: int = 100


@dataclass
class StorageConfig:
    """Configuration for the JSON record store."""
    path: str = "data/moodtune.json"


@dataclass
class LoggingConfig:
    """Log level and output format (json or text)."""
    level: str = "INFO"
    format: str = "json"


@dataclass
class VersioningConfig:
    """Configuration for API versioning."""
    api_version: str = "1.0.0"


@dataclass
class AppConfig:
    """Root configuration; one attribute per YAML section."""
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    track_search: TrackSearchConfig = field(default_factory=TrackSearchConfig)
    mood: MoodConfig = field(default_factory=MoodConfig)
    playlist: PlaylistConfig = field(default_factory=PlaylistConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    versioning: VersioningConfig = field(default_factory=VersioningConfig)


class ConfigValidationError(Exception):
    """Raised with every problem found in a loaded configuration."""
    pass


class ConfigManager:
    """Loads, overrides and validates the MoodTune configuration."""

    # Secrets never live in the YAML file.
    SECRET_ENV = {
        'HUGGINGFACE_API_KEY': ['classifier', 'api_key'],
        'SPOTIFY_CLIENT_ID': ['track_search', 'client_id'],
        'SPOTIFY_CLIENT_SECRET': ['track_search', 'client_secret'],
    }

    ENV_MAPPINGS = {
        'MOODTUNE_STORAGE_PATH': ['storage', 'path'],
        'MOODTUNE_LOG_LEVEL': ['logging', 'level'],
        'MOODTUNE_LOG_FORMAT': ['logging', 'format'],
        'MOODTUNE_API_VERSION': ['versioning', 'api_version'],
        'MOODTUNE_CLASSIFIER_URL': ['classifier', 'api_url'],
        'MOODTUNE_CLASSIFIER_TIMEOUT': ['classifier', 'timeout_seconds'],
        'MOODTUNE_SPOTIFY_URL': ['track_search', 'api_url'],
        'MOODTUNE_SPOTIFY_TIMEOUT': ['track_search', 'timeout_seconds'],
        'MOODTUNE_MAX_TEXT_LENGTH': ['mood', 'max_text_length'],
        'MOODTUNE_DEFAULT_TRACK_COUNT': ['playlist', 'default_track_count'],
        'MOODTUNE_MAX_TRACK_COUNT': ['playlist', 'max_track_count'],
    }

    INT_KEYS = {'max_text_length', 'default_track_count', 'max_track_count'}
    FLOAT_KEYS = {'timeout_seconds'}

    def __init__(self, use_dotenv: bool = True):
        self._config: Optional[AppConfig] = None
        self.use_dotenv = use_dotenv

    def load(self, config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
        """Read ``config_path``, apply environment overrides and validate.

        Raises:
            FileNotFoundError: ``config_path`` does not exist
            ConfigValidationError: One or more values are invalid
        """
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if self.use_dotenv:
            load_dotenv()

        raw = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
        config = self._create_config_from_dict(self._apply_env_overrides(raw))
        self.validate(config)
        self._config = config
        return config

    def _create_config_from_dict(self, config_data: Dict[str, Any]) -> AppConfig:
        """Build each section from its YAML mapping.

        Missing keys fall back to the dataclass defaults; unknown keys are dropped.
        """
        sections = {
            'classifier': ClassifierConfig,
            'track_search': TrackSearchConfig,
            'mood': MoodConfig,
            'playlist': PlaylistConfig,
            'storage': StorageConfig,
            'logging': LoggingConfig,
            'versioning': VersioningConfig,
        }

        built = {}
        for name, section_cls in sections.items():
            section_data = config_data.get(name) or {}
            defaults = section_cls()
            values = {
                key: section_data.get(key, getattr(defaults, key))
                for key in defaults.__dataclass_fields__
            }
            built[name] = section_cls(**values)

        return AppConfig(**built)

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Copy set environment variables into ``config_data``, converting numeric keys."""
        mappings = dict(self.ENV_MAPPINGS)
        mappings.update(self.SECRET_ENV)

        for env_var, config_path in mappings.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            current = config_data
            for key in config_path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            final_key = config_path[-1]
            if final_key in self.INT_KEYS:
                current[final_key] = int(env_value)
            elif final_key in self.FLOAT_KEYS:
                current[final_key] = float(env_value)
            else:
                current[final_key] = env_value

        return config_data

    def validate(self, config: AppConfig) -> bool:
        """Check every section and report all problems at once.

        Raises:
            ConfigValidationError: Listing each failed check
        """
        classifier, search, playlist = config.classifier, config.track_search, config.playlist
        checks = [
            (bool(classifier.api_url), "Classifier api_url cannot be empty"),
            (bool(classifier.sentiment_model and classifier.emotion_model),
             "Classifier sentiment_model and emotion_model are required"),
            (classifier.timeout_seconds > 0, "Classifier timeout_seconds must be positive"),
            (bool(search.api_url), "Track search api_url cannot be empty"),
            (search.timeout_seconds > 0, "Track search timeout_seconds must be positive"),
            (config.mood.max_text_length > 0, "Mood max_text_length must be positive"),
            (playlist.max_track_count > 0, "Playlist max_track_count must be positive"),
            (0 < playlist.default_track_count <= playlist.max_track_count,
             "Playlist default_track_count must be between 1 and max_track_count"),
            (playlist.max_track_count <= MAX_SEARCH_LIMIT,
             f"Playlist max_track_count cannot exceed {MAX_SEARCH_LIMIT}"),
            (bool(config.storage.path), "Storage path cannot be empty"),
            (config.logging.level in LOG_LEVELS, f"Logging level must be one of: {list(LOG_LEVELS)}"),
            (config.logging.format in LOG_FORMATS, "Logging format must be 'json' or 'text'"),
            (bool(config.versioning.api_version), "API version cannot be empty"),
        ]
        errors = [message for ok, message in checks if not ok]
        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")
        return True

    def get_with_env_override(self, key: str) -> Any:
        """Value for a dotted key such as ``mood.max_text_length``.

        ``MOODTUNE_MOOD_MAX_TEXT_LENGTH`` takes precedence when set; its raw
        string is returned.
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")

        override = os.getenv("MOODTUNE_" + key.upper().replace('.', '_'))
        if override is not None:
            return override

        value: Any = self._config
        for part in key.split('.'):
            if not hasattr(value, part):
                raise KeyError(f"Configuration key not found: {key}")
            value = getattr(value, part)
        return value
