"""
Data module for MoodTune.

This module provides the domain dataclasses and input validation used
throughout the mood analysis and playlist pipeline.
"""

from .schemas import (
    EmotionLabel,
    EmotionScore,
    SentimentScore,
    AudioFeatureVector,
    MoodAnalysis,
    MoodRecord,
    Track,
    PlaylistTrack,
    Playlist,
    ExportStatus,
    ExportResult,
    ValidationResult
)
from .validator import MoodTextValidator, ClassifierPayloadValidator

__all__ = [
    'EmotionLabel',
    'EmotionScore',
    'SentimentScore',
    'AudioFeatureVector',
    'MoodAnalysis',
    'MoodRecord',
    'Track',
    'PlaylistTrack',
    'Playlist',
    'ExportStatus',
    'ExportResult',
    'ValidationResult',
    'MoodTextValidator',
    'ClassifierPayloadValidator'
]
