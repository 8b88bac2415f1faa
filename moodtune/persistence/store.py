"""
Record storage for MoodTune.

Moods and playlists live in one JSON document that is rewritten atomically
on every change. Every lookup is scoped to the owning user.
"""
import json
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Tuple
import logging

from ..data.schemas import MoodAnalysis, MoodRecord, Playlist


EMPTY_DOCUMENT = {'moods': {}, 'playlists': {}}


class JsonDocumentStore:
    """
    Holds the whole record document and persists it atomically.

    Read-modify-write cycles go through ``transaction()``, which serializes
    writers with a lock and saves only when the block completes.
    """

    def __init__(self, storage_path: str):
        """
        Args:
            storage_path: Path to the JSON file holding all records
        """
        self.storage_path = storage_path
        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._cache: Optional[Dict[str, Dict[str, Any]]] = None

    def load(self) -> Dict[str, Dict[str, Any]]:
        """
        Load the document, creating an empty one if the file does not exist.

        Raises:
            ValueError: If the file is not a JSON object with the expected sections
        """
        with self._lock:
            if self._cache is not None:
                return self._cache

            if not os.path.exists(self.storage_path):
                self._cache = json.loads(json.dumps(EMPTY_DOCUMENT))
                return self._cache

            try:
                with open(self.storage_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                error_msg = f"JSON corruption in store file {self.storage_path}: {e}"
                self.logger.error(error_msg)
                raise ValueError(error_msg) from e

            if not isinstance(data, dict):
                raise ValueError("Store file must contain a JSON object")
            for section in EMPTY_DOCUMENT:
                data.setdefault(section, {})

            self._cache = data
            self.logger.info(
                f"Loaded store with {len(data['moods'])} moods and "
                f"{len(data['playlists'])} playlists"
            )
            return self._cache

    @contextmanager
    def transaction(self) -> Generator[Dict[str, Dict[str, Any]], None, None]:
        """Yield the document for modification and save it afterwards.

        The cached document is restored if the block or the save fails.
        """
        with self._lock:
            document = self.load()
            snapshot = json.dumps(document)
            try:
                yield document
                self.save_atomic(document)
            except Exception:
                self._cache = json.loads(snapshot)
                raise

    def save_atomic(self, document: Dict[str, Dict[str, Any]]) -> None:
        """
        Atomically save the document to storage.

        Raises:
            IOError: If saving fails
        """
        directory = os.path.dirname(os.path.abspath(self.storage_path))
        os.makedirs(directory, exist_ok=True)

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=directory,
                delete=False,
                suffix='.tmp',
                encoding='utf-8'
            ) as temp_file:
                temp_path = temp_file.name
                json.dump(document, temp_file, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.storage_path)
            temp_path = None
            self.logger.debug(f"Atomically saved store to {self.storage_path}")

        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            error_msg = f"Failed to save store atomically: {e}"
            self.logger.error(error_msg)
            raise IOError(error_msg) from e


def _page(records: List[Any], limit: int, offset: int) -> Tuple[List[Any], int]:
    records.sort(key=lambda r: r.created_at, reverse=True)
    return records[offset:offset + limit], len(records)


class MoodRepository:
    """Stores mood analyses keyed by id and owner."""

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def add(self, user_id: str, analysis: MoodAnalysis) -> MoodRecord:
        record = MoodRecord(id=str(uuid.uuid4()), user_id=user_id, analysis=analysis)
        with self.store.transaction() as doc:
            doc['moods'][record.id] = record.to_dict()
        return record

    def get(self, user_id: str, mood_id: str) -> Optional[MoodRecord]:
        data = self.store.load()['moods'].get(mood_id)
        if data is None or data['user_id'] != user_id:
            return None
        return MoodRecord.from_dict(data)

    def list_for_user(self, user_id: str, limit: int = 20, offset: int = 0) -> Tuple[List[MoodRecord], int]:
        """Moods for ``user_id``, newest first, and the user's total count."""
        records = [
            MoodRecord.from_dict(data)
            for data in self.store.load()['moods'].values()
            if data['user_id'] == user_id
        ]
        return _page(records, limit, offset)

    def delete(self, user_id: str, mood_id: str) -> bool:
        """Delete a mood and the playlists generated from it."""
        with self.store.transaction() as doc:
            data = doc['moods'].get(mood_id)
            if data is None or data['user_id'] != user_id:
                return False
            del doc['moods'][mood_id]
            for playlist_id in [pid for pid, p in doc['playlists'].items() if p['mood_id'] == mood_id]:
                del doc['playlists'][playlist_id]
        return True


class PlaylistRepository:
    """Stores playlists with their ordered tracks."""

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def add(self, playlist: Playlist) -> Playlist:
        with self.store.transaction() as doc:
            if playlist.id in doc['playlists']:
                raise ValueError(f"Playlist {playlist.id} already exists")
            doc['playlists'][playlist.id] = playlist.to_dict()
        return playlist

    def get(self, user_id: str, playlist_id: str) -> Optional[Playlist]:
        data = self.store.load()['playlists'].get(playlist_id)
        if data is None or data['user_id'] != user_id:
            return None
        return Playlist.from_dict(data)

    def list_for_user(self, user_id: str, limit: int = 20, offset: int = 0) -> Tuple[List[Playlist], int]:
        """Playlists for ``user_id``, newest first, and the user's total count."""
        playlists = [
            Playlist.from_dict(data)
            for data in self.store.load()['playlists'].values()
            if data['user_id'] == user_id
        ]
        return _page(playlists, limit, offset)

    def set_external(self, user_id: str, playlist_id: str,
                     spotify_playlist_id: str, spotify_url: Optional[str]) -> bool:
        """Record the Spotify copy of a playlist. Tracks are left untouched."""
        with self.store.transaction() as doc:
            data = doc['playlists'].get(playlist_id)
            if data is None or data['user_id'] != user_id:
                return False
            data['spotify_playlist_id'] = spotify_playlist_id
            data['spotify_url'] = spotify_url
        return True

    def delete(self, user_id: str, playlist_id: str) -> bool:
        with self.store.transaction() as doc:
            data = doc['playlists'].get(playlist_id)
            if data is None or data['user_id'] != user_id:
                return False
            del doc['playlists'][playlist_id]
        return True
