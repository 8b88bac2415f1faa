"""
Playlist generation engine for MoodTune.
"""
import time
import uuid
from datetime import date
from typing import List, Optional, Tuple

from ..config.settings import PlaylistConfig
from ..data.schemas import ExportResult, ExportStatus, MoodRecord, Playlist, Track
from ..errors import InvalidInput, MoodNotFound, NoTracksFound, PlaylistNotFound
from ..models.genres import genres_for
from ..persistence.store import MoodRepository, PlaylistRepository
from ..services.playlist_export import SpotifyPlaylistExporter
from ..services.track_search import SpotifyTrackSearch
from ..utils.logging import StructuredLogger, get_logger
from .schemas import GenerationRequest, GenerationResult


def default_playlist_name(emotion: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{emotion[:1].upper()}{emotion[1:]} Vibes - {today.isoformat()}"


class PlaylistGenerator:
    """Orchestrates mood-based playlist generation.

    Search, then persist, then (optionally) export. The export step is best
    effort: its failures are logged and reported in the result, never raised.
    """

    def __init__(self, moods: MoodRepository, playlists: PlaylistRepository,
                 track_search: SpotifyTrackSearch,
                 exporter: Optional[SpotifyPlaylistExporter] = None,
                 logger: Optional[StructuredLogger] = None,
                 config: Optional[PlaylistConfig] = None):
        """Initialize the playlist generator.

        Args:
            moods: Repository holding the users' mood analyses
            playlists: Repository receiving generated playlists
            track_search: Track search collaborator
            exporter: Spotify exporter; export is skipped when None
            logger: Structured logger (optional)
            config: Default and maximum track counts
        """
        self.moods = moods
        self.playlists = playlists
        self.track_search = track_search
        self.exporter = exporter
        self.logger = logger or get_logger("moodtune.playlists")
        self.config = config or PlaylistConfig()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate, store and optionally export a playlist.

        Raises:
            InvalidInput: More tracks requested than max_track_count
            MoodNotFound: The mood does not exist for this user
            SearchUnavailable: The track search failed
            NoTracksFound: The search succeeded with no tracks
        """
        start_time = time.time()
        track_count = request.track_count or self.config.default_track_count
        if track_count > self.config.max_track_count:
            raise InvalidInput(
                f"Track count cannot exceed {self.config.max_track_count}"
            )

        with self.logger.operation_context("PlaylistGenerator", "generate",
                                           mood_id=request.mood_id,
                                           track_count=track_count) as log:
            mood = self.moods.get(request.user_id, request.mood_id)
            if mood is None:
                raise MoodNotFound(f"Mood {request.mood_id} not found")

            features = mood.analysis.audio_features
            genre_hint = genres_for(features.dominant_emotion)
            tracks = await self.track_search.search(features, genre_hint, track_count)
            if not tracks:
                raise NoTracksFound("No tracks found for this mood")

            playlist = self._store(request, mood, tracks)
            log.metric("playlist_tracks", len(tracks), tags={"emotion": features.dominant_emotion})

        export = await self._export(request, playlist)
        if export.status is ExportStatus.EXPORTED:
            playlist.spotify_playlist_id = export.playlist_id
            playlist.spotify_url = export.url

        return GenerationResult(
            playlist=playlist,
            export=export,
            processing_time_ms=(time.time() - start_time) * 1000
        )

    def _store(self, request: GenerationRequest, mood: MoodRecord, tracks: List[Track]) -> Playlist:
        playlist = Playlist.from_tracks(
            tracks,
            id=str(uuid.uuid4()),
            user_id=request.user_id,
            mood_id=mood.id,
            name=request.name or default_playlist_name(mood.analysis.dominant_emotion),
            description=f'Generated from mood: "{mood.analysis.text}"'
        )
        return self.playlists.add(playlist)

    async def _export(self, request: GenerationRequest, playlist: Playlist) -> ExportResult:
        if not request.save_to_spotify:
            return ExportResult(status=ExportStatus.SKIPPED)
        if self.exporter is None:
            return ExportResult(status=ExportStatus.FAILED, error="Spotify export is not configured")

        try:
            created = await self.exporter.export(
                request.spotify_access_token,
                playlist.name,
                playlist.description,
                [t.track.uri for t in playlist.tracks],
                public=playlist.is_public
            )
            self.playlists.set_external(playlist.user_id, playlist.id,
                                        created['id'], created.get('external_url'))
        except Exception as e:
            # the stored playlist stands whatever happens here
            self.logger.error("Failed to create Spotify playlist", exc_info=True,
                              playlist_id=playlist.id, error_type=type(e).__name__,
                              error_message=str(e))
            return ExportResult(status=ExportStatus.FAILED, error=str(e))

        return ExportResult(
            status=ExportStatus.EXPORTED,
            playlist_id=created['id'],
            url=created.get('external_url')
        )

    def list(self, user_id: str, limit: int = 20, offset: int = 0) -> Tuple[List[Playlist], int]:
        return self.playlists.list_for_user(user_id, limit=limit, offset=offset)

    def get(self, user_id: str, playlist_id: str) -> Playlist:
        playlist = self.playlists.get(user_id, playlist_id)
        if playlist is None:
            raise PlaylistNotFound(f"Playlist {playlist_id} not found")
        return playlist

    def delete(self, user_id: str, playlist_id: str) -> None:
        if not self.playlists.delete(user_id, playlist_id):
            raise PlaylistNotFound(f"Playlist {playlist_id} not found")
