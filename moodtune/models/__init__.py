"""
Mood models for MoodTune.

Pure, deterministic policies that turn classifier output into search inputs.
"""

from .mood_mapper import (
    MoodToAudioMapper,
    map_mood_to_audio_features,
    dominant_emotion,
    extract_positivity
)
from .genres import genres_for, GENRE_SEEDS, DEFAULT_GENRES

__all__ = [
    'MoodToAudioMapper',
    'map_mood_to_audio_features',
    'dominant_emotion',
    'extract_positivity',
    'genres_for',
    'GENRE_SEEDS',
    'DEFAULT_GENRES'
]
