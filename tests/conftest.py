"""
Shared fixtures for the MoodTune test suite.
"""
import pytest

from moodtune.config.settings import AppConfig, ClassifierConfig, TrackSearchConfig
from moodtune.persistence.store import JsonDocumentStore, MoodRepository, PlaylistRepository
from moodtune.services.classifier import ClassificationAdapter

from fakes import FakeClassifier


@pytest.fixture
def app_config():
    return AppConfig(
        classifier=ClassifierConfig(api_url="https://hf.test/models", api_key="hf-key"),
        track_search=TrackSearchConfig(
            api_url="https://spotify.test/v1",
            token_url="https://accounts.spotify.test/api/token",
            client_id="client",
            client_secret="secret"
        )
    )


@pytest.fixture
def store(tmp_path):
    return JsonDocumentStore(str(tmp_path / "store.json"))


@pytest.fixture
def moods(store):
    return MoodRepository(store)


@pytest.fixture
def playlists(store):
    return PlaylistRepository(store)


@pytest.fixture
def fake_classifier():
    return FakeClassifier()


@pytest.fixture
def adapter(fake_classifier):
    return ClassificationAdapter(fake_classifier)
