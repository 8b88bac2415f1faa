"""
Tests for the JSON record store and its repositories.
"""
import json
from datetime import datetime, timedelta, timezone

import pytest

from moodtune.data.schemas import (
    AudioFeatureVector,
    EmotionScore,
    MoodAnalysis,
    MoodRecord,
    Playlist,
    PlaylistTrack,
    SentimentScore
)
from moodtune.persistence.store import JsonDocumentStore, PlaylistRepository

from fakes import make_track


def analysis(text="Best day ever"):
    return MoodAnalysis(
        text=text,
        sentiment=[SentimentScore("POSITIVE", 0.8)],
        emotions=[EmotionScore("joy", 0.9)],
        audio_features=AudioFeatureVector(
            valence=0.94, energy=0.84, danceability=0.76, acousticness=0.3, tempo=144.0,
            dominant_emotion="joy", emotion_score=0.9, positivity=0.8
        )
    )


def playlist(playlist_id, mood_id, user_id="alice", created_at=None, tracks=2):
    kwargs = dict(id=playlist_id, user_id=user_id, mood_id=mood_id, name=playlist_id, description="")
    if created_at is not None:
        kwargs['created_at'] = created_at
    return Playlist.from_tracks([make_track(i) for i in range(tracks)], **kwargs)


class TestJsonDocumentStore:

    def test_missing_file_is_empty(self, store):
        assert store.load() == {'moods': {}, 'playlists': {}}

    def test_transaction_persists_to_disk(self, store):
        with store.transaction() as doc:
            doc['moods']['m1'] = {'id': 'm1'}

        with open(store.storage_path, encoding='utf-8') as f:
            assert json.load(f)['moods'] == {'m1': {'id': 'm1'}}
        assert JsonDocumentStore(store.storage_path).load()['moods'] == {'m1': {'id': 'm1'}}

    def test_failed_transaction_rolls_back(self, store):
        with store.transaction() as doc:
            doc['moods']['m1'] = {'id': 'm1'}

        with pytest.raises(RuntimeError):
            with store.transaction() as doc:
                doc['moods']['m2'] = {'id': 'm2'}
                raise RuntimeError("boom")

        assert list(store.load()['moods']) == ['m1']
        assert list(JsonDocumentStore(store.storage_path).load()['moods']) == ['m1']

    def test_failed_save_rolls_back(self, store, monkeypatch):
        with store.transaction() as doc:
            doc['moods']['m1'] = {'id': 'm1'}

        def failing_save(document):
            raise IOError("Failed to save store atomically: disk full")

        monkeypatch.setattr(store, "save_atomic", failing_save)
        with pytest.raises(IOError):
            with store.transaction() as doc:
                doc['moods']['m2'] = {'id': 'm2'}

        assert list(store.load()['moods']) == ['m1']

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding='utf-8')
        with pytest.raises(ValueError, match="JSON corruption"):
            JsonDocumentStore(str(path)).load()

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[]", encoding='utf-8')
        with pytest.raises(ValueError):
            JsonDocumentStore(str(path)).load()

    def test_no_temp_files_left_behind(self, store, tmp_path):
        with store.transaction() as doc:
            doc['moods']['m1'] = {'id': 'm1'}
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_creates_parent_directory(self, tmp_path):
        store = JsonDocumentStore(str(tmp_path / "nested" / "dir" / "store.json"))
        with store.transaction():
            pass
        assert (tmp_path / "nested" / "dir" / "store.json").exists()


class TestMoodRepository:

    def test_add_and_get_round_trip(self, moods):
        record = moods.add("alice", analysis())
        loaded = moods.get("alice", record.id)
        assert loaded.analysis == record.analysis
        assert loaded.created_at == record.created_at

    def test_other_users_cannot_see_or_delete(self, moods):
        record = moods.add("alice", analysis())
        assert moods.get("bob", record.id) is None
        assert moods.delete("bob", record.id) is False
        assert moods.get("alice", record.id) is not None

    def test_list_is_newest_first_and_paged(self, moods, store):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        with store.transaction() as doc:
            for i in range(5):
                record = MoodRecord(id=f"m{i}", user_id="alice", analysis=analysis(f"text {i}"),
                                    created_at=base + timedelta(hours=i))
                doc['moods'][record.id] = record.to_dict()
        moods.add("bob", analysis())

        page, total = moods.list_for_user("alice", limit=2, offset=1)
        assert total == 5
        assert [r.id for r in page] == ["m3", "m2"]

    def test_delete_cascades_to_playlists(self, moods, playlists):
        keep = moods.add("alice", analysis("keep"))
        drop = moods.add("alice", analysis("drop"))
        playlists.add(playlist("p1", drop.id))
        playlists.add(playlist("p2", drop.id))
        playlists.add(playlist("p3", keep.id))

        assert moods.delete("alice", drop.id) is True

        assert [p.id for p in playlists.list_for_user("alice")[0]] == ["p3"]
        assert moods.get("alice", drop.id) is None


class TestPlaylistRepository:

    def test_positions_survive_persistence(self, playlists, store):
        playlists.add(playlist("p1", "m1", tracks=4))
        reloaded = PlaylistRepository(JsonDocumentStore(store.storage_path)).get("alice", "p1")
        assert [t.position for t in reloaded.tracks] == [0, 1, 2, 3]
        assert [t.track.id for t in reloaded.tracks] == ["track0", "track1", "track2", "track3"]

    def test_duplicate_id_is_rejected(self, playlists):
        playlists.add(playlist("p1", "m1"))
        with pytest.raises(ValueError):
            playlists.add(playlist("p1", "m1"))

    def test_set_external_is_owner_scoped(self, playlists):
        playlists.add(playlist("p1", "m1"))
        assert playlists.set_external("bob", "p1", "sp-1", "url") is False
        assert playlists.set_external("alice", "p1", "sp-1", "url") is True

        stored = playlists.get("alice", "p1")
        assert (stored.spotify_playlist_id, stored.spotify_url) == ("sp-1", "url")
        assert stored.track_count == 2

    def test_list_and_delete(self, playlists):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        playlists.add(playlist("old", "m1", created_at=base))
        playlists.add(playlist("new", "m1", created_at=base + timedelta(days=1)))
        playlists.add(playlist("other", "m1", user_id="bob"))

        page, total = playlists.list_for_user("alice")
        assert total == 2
        assert [p.id for p in page] == ["new", "old"]

        assert playlists.delete("bob", "new") is False
        assert playlists.delete("alice", "new") is True
        assert playlists.get("alice", "new") is None


def test_playlist_positions_must_be_contiguous():
    with pytest.raises(ValueError):
        Playlist(id="p", user_id="u", mood_id="m", name="n", description="",
                 tracks=[PlaylistTrack(position=1, track=make_track(0))])
