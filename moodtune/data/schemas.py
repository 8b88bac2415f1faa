"""
Data schemas for the MoodTune system.

This module contains dataclasses that define the structure of data
used throughout the system, from raw classifier scores to stored playlists.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional, List


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmotionLabel(Enum):
    """Emotions produced by the emotion classifier."""
    JOY = "joy"
    SADNESS = "sadness"
    ANGER = "anger"
    FEAR = "fear"
    SURPRISE = "surprise"
    NEUTRAL = "neutral"
    DISGUST = "disgust"

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional['EmotionLabel']:
        """Parse a classifier label, returning None for anything unrecognized."""
        if not label:
            return None
        try:
            return cls(label.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class EmotionScore:
    """One emotion label with its classifier confidence"""
    label: str
    score: float


@dataclass(frozen=True)
class SentimentScore:
    """One sentiment label (POSITIVE / NEGATIVE) with its confidence"""
    label: str
    score: float


@dataclass(frozen=True)
class AudioFeatureVector:
    """Target audio characteristics derived from a mood"""
    valence: float       # Happiness/sadness
    energy: float        # Intensity
    danceability: float  # Rhythm suitability
    acousticness: float  # Acoustic vs electronic
    tempo: float         # BPM, nominally 50-200
    instrumentalness: float = 0.3
    dominant_emotion: str = "neutral"
    emotion_score: float = 0.0
    positivity: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AudioFeatureVector':
        return cls(
            valence=data['valence'],
            energy=data['energy'],
            danceability=data['danceability'],
            acousticness=data['acousticness'],
            tempo=data['tempo'],
            instrumentalness=data.get('instrumentalness', 0.3),
            dominant_emotion=data.get('dominant_emotion', 'neutral'),
            emotion_score=data.get('emotion_score', 0.0),
            positivity=data.get('positivity', 0.5)
        )

    def search_targets(self) -> Dict[str, float]:
        """Targets sent to the track search, keyed by feature name."""
        return {
            'valence': self.valence,
            'energy': self.energy,
            'danceability': self.danceability,
            'acousticness': self.acousticness
        }


@dataclass(frozen=True)
class MoodAnalysis:
    """Complete result of analysing one mood text. Never mutated."""
    text: str
    sentiment: List[SentimentScore]
    emotions: List[EmotionScore]
    audio_features: AudioFeatureVector
    analyzed_at: datetime = field(default_factory=utcnow)

    @property
    def dominant_emotion(self) -> str:
        return self.audio_features.dominant_emotion

    @property
    def emotion_score(self) -> float:
        return self.audio_features.emotion_score

    @property
    def positivity(self) -> float:
        return self.audio_features.positivity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text': self.text,
            'sentiment': [asdict(s) for s in self.sentiment],
            'emotions': [asdict(e) for e in self.emotions],
            'audio_features': self.audio_features.to_dict(),
            'analyzed_at': self.analyzed_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MoodAnalysis':
        return cls(
            text=data['text'],
            sentiment=[SentimentScore(**s) for s in data.get('sentiment', [])],
            emotions=[EmotionScore(**e) for e in data.get('emotions', [])],
            audio_features=AudioFeatureVector.from_dict(data['audio_features']),
            analyzed_at=datetime.fromisoformat(data['analyzed_at'])
        )


@dataclass
class MoodRecord:
    """A stored mood analysis owned by one user"""
    id: str
    user_id: str
    analysis: MoodAnalysis
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'analysis': self.analysis.to_dict(),
            'created_at': self.created_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MoodRecord':
        return cls(
            id=data['id'],
            user_id=data['user_id'],
            analysis=MoodAnalysis.from_dict(data['analysis']),
            created_at=datetime.fromisoformat(data['created_at'])
        )


@dataclass(frozen=True)
class Track:
    """Track descriptor returned by the track search"""
    id: str
    name: str
    artist_names: List[str]
    album_name: str
    uri: str
    duration_ms: int
    external_url: str
    preview_url: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def artist(self) -> str:
        return self.artist_names[0] if self.artist_names else ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Track':
        return cls(
            id=data['id'],
            name=data['name'],
            artist_names=list(data.get('artist_names', [])),
            album_name=data.get('album_name', ''),
            uri=data['uri'],
            duration_ms=int(data.get('duration_ms', 0)),
            external_url=data.get('external_url', ''),
            preview_url=data.get('preview_url'),
            image_url=data.get('image_url')
        )


@dataclass(frozen=True)
class PlaylistTrack:
    """A track attached to a playlist at a fixed position"""
    position: int
    track: Track


@dataclass
class Playlist:
    """Playlist generated from one stored mood"""
    id: str
    user_id: str
    mood_id: str
    name: str
    description: str
    tracks: List[PlaylistTrack]
    is_public: bool = False
    spotify_playlist_id: Optional[str] = None
    spotify_url: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        positions = [t.position for t in self.tracks]
        if positions != list(range(len(self.tracks))):
            raise ValueError("Playlist track positions must run 0..N-1 without gaps")

    @classmethod
    def from_tracks(cls, tracks: List[Track], **kwargs) -> 'Playlist':
        return cls(
            tracks=[PlaylistTrack(position=i, track=t) for i, t in enumerate(tracks)],
            **kwargs
        )

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'mood_id': self.mood_id,
            'name': self.name,
            'description': self.description,
            'tracks': [t.track.to_dict() for t in self.tracks],
            'is_public': self.is_public,
            'spotify_playlist_id': self.spotify_playlist_id,
            'spotify_url': self.spotify_url,
            'created_at': self.created_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Playlist':
        return cls.from_tracks(
            [Track.from_dict(t) for t in data.get('tracks', [])],
            id=data['id'],
            user_id=data['user_id'],
            mood_id=data['mood_id'],
            name=data['name'],
            description=data.get('description', ''),
            is_public=data.get('is_public', False),
            spotify_playlist_id=data.get('spotify_playlist_id'),
            spotify_url=data.get('spotify_url'),
            created_at=datetime.fromisoformat(data['created_at'])
        )


class ExportStatus(Enum):
    SKIPPED = "skipped"
    EXPORTED = "exported"
    FAILED = "failed"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of the best-effort external playlist export"""
    status: ExportStatus
    playlist_id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of data validation operations"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    metadata: Optional[Dict[str, Any]] = None

    def add_error(self, error: str) -> None:
        """Add an error to the validation result"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning to the validation result"""
        self.warnings.append(warning)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0
