"""
Tests for the playlist generation engine and the mood service.
"""
from datetime import date
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from moodtune.config.settings import PlaylistConfig
from moodtune.data.schemas import ExportStatus
from moodtune.errors import (
    ClassificationUnavailable,
    ExportFailed,
    InvalidInput,
    MoodNotFound,
    NoTracksFound,
    PlaylistNotFound,
    SearchUnavailable
)
from moodtune.recommendation import GenerationRequest, PlaylistGenerator, default_playlist_name
from moodtune.services import ClassificationAdapter, MoodService
from moodtune.services.playlist_export import SpotifyPlaylistExporter

from fakes import FakeClassifier, FakeTrackSearch, make_track


@pytest.fixture
def mood_service(adapter, moods):
    return MoodService(adapter, moods)


@pytest_asyncio.fixture
async def mood(mood_service):
    return await mood_service.create("alice", "Best day ever")


@pytest.fixture
def track_search():
    return FakeTrackSearch(tracks=[make_track(i) for i in range(30)])


@pytest.fixture
def exporter():
    exporter = AsyncMock()
    exporter.export.return_value = {
        "id": "sp-1",
        "name": "Joy Vibes",
        "uri": "spotify:playlist:sp-1",
        "external_url": "https://open.spotify.com/playlist/sp-1"
    }
    return exporter


@pytest.fixture
def generator(moods, playlists, track_search, exporter):
    return PlaylistGenerator(moods, playlists, track_search, exporter=exporter)


class TestMoodService:

    @pytest.mark.asyncio
    async def test_create_stores_analysis(self, mood_service, moods):
        record = await mood_service.create("alice", "Best day ever")
        assert record.user_id == "alice"
        assert record.analysis.dominant_emotion == "joy"
        assert moods.get("alice", record.id) is not None

    @pytest.mark.asyncio
    async def test_failed_analysis_stores_nothing(self, moods):
        service = MoodService(
            ClassificationAdapter(FakeClassifier(fail="emotions")), moods)
        with pytest.raises(ClassificationUnavailable):
            await service.create("alice", "hello")
        assert moods.list_for_user("alice") == ([], 0)

    @pytest.mark.asyncio
    async def test_get_and_delete_are_owner_scoped(self, mood_service):
        record = await mood_service.create("alice", "Best day ever")

        with pytest.raises(MoodNotFound):
            mood_service.get("bob", record.id)
        with pytest.raises(MoodNotFound):
            mood_service.delete("bob", record.id)

        mood_service.delete("alice", record.id)
        with pytest.raises(MoodNotFound):
            mood_service.get("alice", record.id)


class TestGenerate:

    @pytest.mark.asyncio
    async def test_generates_stored_playlist(self, generator, mood, track_search, playlists):
        result = await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id, track_count=5))

        playlist = result.playlist
        assert playlist.track_count == 5
        assert [t.position for t in playlist.tracks] == [0, 1, 2, 3, 4]
        assert [t.track.id for t in playlist.tracks] == [f"track{i}" for i in range(5)]
        assert playlist.mood_id == mood.id
        assert playlist.description == 'Generated from mood: "Best day ever"'
        assert playlists.get("alice", playlist.id) is not None
        assert result.export.status is ExportStatus.SKIPPED
        assert result.processing_time_ms >= 0

        features, genre_hint, limit = track_search.calls[0]
        assert features == mood.analysis.audio_features
        assert genre_hint == "pop,dance,party"
        assert limit == 5

    @pytest.mark.asyncio
    async def test_default_name_uses_emotion_and_date(self, generator, mood):
        result = await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id))
        assert result.playlist.name == default_playlist_name("joy")

    @pytest.mark.asyncio
    async def test_custom_name(self, generator, mood):
        result = await generator.generate(
            GenerationRequest(user_id="alice", mood_id=mood.id, name="Morning")
        )
        assert result.playlist.name == "Morning"

    @pytest.mark.asyncio
    async def test_unknown_mood(self, generator, mood, track_search):
        with pytest.raises(MoodNotFound):
            await generator.generate(GenerationRequest(user_id="bob", mood_id=mood.id))
        assert track_search.calls == []

    @pytest.mark.asyncio
    async def test_empty_search_stores_nothing(self, moods, playlists, mood):
        generator = PlaylistGenerator(moods, playlists, FakeTrackSearch(tracks=[]))
        with pytest.raises(NoTracksFound):
            await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id))
        assert playlists.list_for_user("alice") == ([], 0)

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self, moods, playlists, mood):
        generator = PlaylistGenerator(moods, playlists, FakeTrackSearch(fail=True))
        with pytest.raises(SearchUnavailable):
            await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id))
        assert playlists.list_for_user("alice") == ([], 0)

    @pytest.mark.parametrize("kwargs", [
        {"mood_id": ""},
        {"mood_id": "m", "track_count": 0},
        {"mood_id": "m", "track_count": -5},
    ])
    def test_invalid_requests(self, kwargs):
        with pytest.raises(ValueError):
            GenerationRequest(user_id="alice", **kwargs)

    @pytest.mark.asyncio
    async def test_track_count_defaults_to_config(self, moods, playlists, mood, track_search):
        generator = PlaylistGenerator(moods, playlists, track_search,
                                      config=PlaylistConfig(default_track_count=7, max_track_count=10))
        result = await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id))

        assert result.playlist.track_count == 7
        assert track_search.calls[0][2] == 7

    @pytest.mark.asyncio
    async def test_track_count_above_configured_max(self, moods, playlists, mood, track_search):
        generator = PlaylistGenerator(moods, playlists, track_search,
                                      config=PlaylistConfig(default_track_count=7, max_track_count=10))
        with pytest.raises(InvalidInput):
            await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id, track_count=11))
        assert track_search.calls == []
        assert playlists.list_for_user("alice") == ([], 0)


class TestExport:

    @pytest.mark.asyncio
    async def test_successful_export_records_external_id(self, generator, mood, exporter, playlists):
        result = await generator.generate(GenerationRequest(
            user_id="alice", mood_id=mood.id, track_count=3,
            save_to_spotify=True, spotify_access_token="user-token"
        ))

        assert result.export.status is ExportStatus.EXPORTED
        assert result.export.playlist_id == "sp-1"
        assert result.playlist.spotify_playlist_id == "sp-1"

        stored = playlists.get("alice", result.playlist.id)
        assert stored.spotify_playlist_id == "sp-1"
        assert stored.spotify_url == "https://open.spotify.com/playlist/sp-1"

        args = exporter.export.call_args
        assert args.args[0] == "user-token"
        assert args.args[3] == ["spotify:track:track0", "spotify:track:track1", "spotify:track:track2"]

    @pytest.mark.asyncio
    async def test_failed_export_keeps_playlist(self, generator, mood, exporter, playlists):
        exporter.export.side_effect = ExportFailed("Failed to create Spotify playlist")

        result = await generator.generate(GenerationRequest(
            user_id="alice", mood_id=mood.id, save_to_spotify=True, spotify_access_token="t"
        ))

        assert result.export.status is ExportStatus.FAILED
        assert "Failed to create Spotify playlist" in result.export.error
        stored = playlists.get("alice", result.playlist.id)
        assert stored is not None
        assert stored.spotify_playlist_id is None

    @pytest.mark.asyncio
    async def test_unexpected_export_error_keeps_playlist(self, generator, mood, exporter, playlists):
        exporter.export.side_effect = AttributeError("'list' object has no attribute 'get'")

        result = await generator.generate(GenerationRequest(
            user_id="alice", mood_id=mood.id, save_to_spotify=True, spotify_access_token="t"
        ))

        assert result.export.status is ExportStatus.FAILED
        assert "has no attribute" in result.export.error
        assert playlists.get("alice", result.playlist.id).spotify_playlist_id is None

    @pytest.mark.asyncio
    async def test_malformed_spotify_account_reports_failed_export(self, app_config, moods, playlists,
                                                                   mood, track_search):
        def handler(request):
            return httpx.Response(200, json=["unexpected"])

        exporter = SpotifyPlaylistExporter(app_config.track_search, transport=httpx.MockTransport(handler))
        generator = PlaylistGenerator(moods, playlists, track_search, exporter=exporter)

        result = await generator.generate(GenerationRequest(
            user_id="alice", mood_id=mood.id, save_to_spotify=True, spotify_access_token="t"
        ))

        assert result.export.status is ExportStatus.FAILED
        assert playlists.get("alice", result.playlist.id) is not None

    @pytest.mark.asyncio
    async def test_export_without_exporter_fails_softly(self, moods, playlists, mood, track_search):
        generator = PlaylistGenerator(moods, playlists, track_search)
        result = await generator.generate(GenerationRequest(
            user_id="alice", mood_id=mood.id, save_to_spotify=True, spotify_access_token="t"
        ))
        assert result.export.status is ExportStatus.FAILED
        assert playlists.get("alice", result.playlist.id) is not None

    @pytest.mark.asyncio
    async def test_export_not_requested(self, generator, mood, exporter):
        await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id))
        exporter.export.assert_not_called()


class TestPlaylistAccess:

    @pytest.mark.asyncio
    async def test_get_list_delete(self, generator, mood):
        result = await generator.generate(GenerationRequest(user_id="alice", mood_id=mood.id, track_count=2))
        playlist_id = result.playlist.id

        assert generator.get("alice", playlist_id).track_count == 2
        assert generator.list("alice")[1] == 1
        with pytest.raises(PlaylistNotFound):
            generator.get("bob", playlist_id)

        generator.delete("alice", playlist_id)
        with pytest.raises(PlaylistNotFound):
            generator.delete("alice", playlist_id)


def test_default_playlist_name():
    assert default_playlist_name("joy", today=date(2024, 3, 9)) == "Joy Vibes - 2024-03-09"
    assert default_playlist_name("neutral", today=date(2024, 12, 31)) == "Neutral Vibes - 2024-12-31"
