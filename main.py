import argparse
import asyncio
import sys
from typing import Optional

from moodtune.config.settings import ConfigManager, AppConfig, DEFAULT_CONFIG_PATH
from moodtune.utils.logging import StructuredLogger
from moodtune.data.schemas import AudioFeatureVector, EmotionScore, SentimentScore
from moodtune.data.validator import MoodTextValidator
from moodtune.errors import MoodTuneError
from moodtune.models.mood_mapper import MoodToAudioMapper
from moodtune.models.genres import genres_for
from moodtune.persistence.store import JsonDocumentStore, MoodRepository, PlaylistRepository
from moodtune.recommendation.engine import PlaylistGenerator
from moodtune.recommendation.schemas import GenerationRequest, GenerationResult
from moodtune.services.classifier import ClassificationAdapter, HuggingFaceClassifier
from moodtune.services.mood_service import MoodService
from moodtune.services.playlist_export import SpotifyPlaylistExporter
from moodtune.services.track_search import SpotifyTrackSearch


class MoodTuneApp:

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_manager = ConfigManager()
        self.config: Optional[AppConfig] = None
        self.logger: Optional[StructuredLogger] = None
        self.config_path = config_path

    def initialize(self) -> None:
        try:
            self.config = self.config_manager.load(self.config_path)
            self.logger = StructuredLogger(
                "moodtune.main",
                level=self.config.logging.level,
                fmt=self.config.logging.format
            )
            self.logger.debug("MoodTune initialized successfully")
        except Exception as e:
            print(f"Failed to initialize MoodTune: {e}")
            sys.exit(1)

    def _adapter(self) -> ClassificationAdapter:
        return ClassificationAdapter(
            HuggingFaceClassifier(self.config.classifier),
            validator=MoodTextValidator(self.config.mood.max_text_length),
            logger=self.logger
        )

    def analyze(self, text: str) -> None:
        analysis = asyncio.run(self._adapter().analyze(text))
        print(f"\nDominant emotion: {analysis.dominant_emotion} ({analysis.emotion_score:.2f})")
        print(f"Positivity: {analysis.positivity:.2f}")
        self._display_features(analysis.audio_features)

    def map_offline(self, emotion: Optional[str], emotion_score: float, positivity: Optional[float]) -> None:
        emotions = [EmotionScore(label=emotion, score=emotion_score)] if emotion else []
        sentiment = [SentimentScore(label="POSITIVE", score=positivity)] if positivity is not None else []
        self._display_features(MoodToAudioMapper().map(emotions, sentiment))

    def generate(self, user_id: str, text: str, track_count: Optional[int] = None,
                 name: Optional[str] = None) -> None:
        store = JsonDocumentStore(self.config.storage.path)
        moods = MoodRepository(store)
        playlists = PlaylistRepository(store)
        mood_service = MoodService(self._adapter(), moods, logger=self.logger)
        generator = PlaylistGenerator(
            moods,
            playlists,
            SpotifyTrackSearch(self.config.track_search),
            exporter=SpotifyPlaylistExporter(self.config.track_search),
            logger=self.logger,
            config=self.config.playlist
        )

        async def _run() -> GenerationResult:
            record = await mood_service.create(user_id, text)
            return await generator.generate(GenerationRequest(
                user_id=user_id,
                mood_id=record.id,
                name=name,
                track_count=track_count
            ))

        result = asyncio.run(_run())
        self._display_playlist(result)

    def _display_features(self, features: AudioFeatureVector) -> None:
        print("\n" + "="*60)
        print("MOODTUNE AUDIO FEATURES")
        print("="*60)
        print(f"  Dominant emotion: {features.dominant_emotion}")
        print(f"  Valence: {features.valence:.2f}")
        print(f"  Energy: {features.energy:.2f}")
        print(f"  Danceability: {features.danceability:.2f}")
        print(f"  Acousticness: {features.acousticness:.2f}")
        print(f"  Instrumentalness: {features.instrumentalness:.2f}")
        print(f"  Tempo: {features.tempo:.1f} BPM")
        print(f"  Genre seeds: {genres_for(features.dominant_emotion)}")

    def _display_playlist(self, result: GenerationResult) -> None:
        playlist = result.playlist
        print("\n" + "="*60)
        print(f"{playlist.name}")
        print("="*60)
        print(f"{playlist.description}")
        print(f"Playlist ID: {playlist.id}")
        print(f"Processing time: {result.processing_time_ms:.1f}ms\n")

        for entry in playlist.tracks:
            track = entry.track
            print(f"{entry.position + 1:2d}. {track.name}")
            print(f"     Artist: {', '.join(track.artist_names)} | Album: {track.album_name}")
            print(f"     URI: {track.uri}")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MoodTune - mood-based playlist generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze mood text without storing it")
    analyze_parser.add_argument("text", help="Mood description")

    map_parser = subparsers.add_parser("map", help="Map classifier scores to audio features offline")
    map_parser.add_argument(
        "--emotion",
        help="Dominant emotion label (joy, sadness, anger, fear, surprise, neutral, disgust)"
    )
    map_parser.add_argument(
        "--emotion-score",
        type=float,
        default=1.0,
        help="Confidence of the dominant emotion (0.0-1.0)"
    )
    map_parser.add_argument(
        "--positivity",
        type=float,
        help="POSITIVE sentiment score (0.0-1.0); omitted means 0.5"
    )

    generate_parser = subparsers.add_parser("generate", help="Analyze a mood and build a playlist")
    generate_parser.add_argument("text", help="Mood description")
    generate_parser.add_argument(
        "--user",
        default="cli",
        help="Owner of the stored mood and playlist"
    )
    generate_parser.add_argument(
        "--tracks",
        type=int,
        help="Number of tracks to fetch (default: playlist.default_track_count)"
    )
    generate_parser.add_argument(
        "--name",
        help="Playlist name"
    )

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main():
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        import uvicorn
        uvicorn.run("api:app", host=args.host, port=args.port)
        return

    app = MoodTuneApp(args.config)
    app.initialize()

    try:
        if args.command == "analyze":
            app.analyze(args.text)
        elif args.command == "map":
            app.map_offline(args.emotion, args.emotion_score, args.positivity)
        elif args.command == "generate":
            app.generate(args.user, args.text, args.tracks, name=args.name)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except MoodTuneError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
