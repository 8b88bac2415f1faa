"""
Text classification for MoodTune.

``HuggingFaceClassifier`` talks to the Hugging Face inference API.
``ClassificationAdapter`` runs the sentiment and emotion calls concurrently
and feeds both results into the mood mapper.
"""
import asyncio
import logging
from typing import List, Optional, Tuple, Type

import httpx

from ..config.settings import ClassifierConfig
from ..data.schemas import EmotionScore, MoodAnalysis, SentimentScore
from ..data.validator import ClassifierPayloadValidator, MoodTextValidator, ScoreT
from ..errors import ClassificationUnavailable
from ..models.mood_mapper import MoodToAudioMapper
from ..utils.logging import StructuredLogger, get_logger


class HuggingFaceClassifier:
    """Client for the sentiment and emotion text-classification models."""

    def __init__(self, config: ClassifierConfig,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            config: Classifier endpoint, model ids and API key
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.transport = transport
        self.payloads = ClassifierPayloadValidator()
        self.logger = logging.getLogger(__name__)

    def _headers(self) -> dict:
        headers = {'Content-Type': 'application/json'}
        if self.config.api_key:
            headers['Authorization'] = f"Bearer {self.config.api_key}"
        return headers

    async def _classify(self, model: str, text: str, score_cls: Type[ScoreT]) -> List[ScoreT]:
        url = f"{self.config.api_url.rstrip('/')}/{model}"
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds,
                                         transport=self.transport) as client:
                response = await client.post(url, json={'inputs': text}, headers=self._headers())
                response.raise_for_status()
                payload = response.json()
            return self.payloads.normalize(payload, score_cls)
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"Classification with {model} failed: {e}")
            raise ClassificationUnavailable(f"Failed to classify text with {model}") from e

    async def sentiment(self, text: str) -> List[SentimentScore]:
        return await self._classify(self.config.sentiment_model, text, SentimentScore)

    async def emotions(self, text: str) -> List[EmotionScore]:
        return await self._classify(self.config.emotion_model, text, EmotionScore)


class ClassificationAdapter:
    """Turns mood text into a complete, unsaved MoodAnalysis."""

    def __init__(self, classifier: HuggingFaceClassifier,
                 mapper: Optional[MoodToAudioMapper] = None,
                 validator: Optional[MoodTextValidator] = None,
                 logger: Optional[StructuredLogger] = None):
        self.classifier = classifier
        self.mapper = mapper or MoodToAudioMapper()
        self.validator = validator or MoodTextValidator()
        self.logger = logger or get_logger("moodtune.classifier")

    async def _run_classifiers(self, text: str) -> Tuple[List[SentimentScore], List[EmotionScore]]:
        """Run both classifiers at once; the first failure cancels the other call."""
        tasks = [
            asyncio.ensure_future(self.classifier.sentiment(text)),
            asyncio.ensure_future(self.classifier.emotions(text))
        ]
        try:
            sentiment, emotions = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return sentiment, emotions

    async def analyze(self, text: str) -> MoodAnalysis:
        """Classify ``text`` and map it to audio features.

        Raises:
            InvalidInput: Empty or oversized text; no call is made
            ClassificationUnavailable: Either classifier call failed
        """
        self.validator.require_valid(text)

        with self.logger.operation_context("ClassificationAdapter", "analyze",
                                           text_length=len(text)) as log:
            sentiment, emotions = await self._run_classifiers(text)
            features = self.mapper.map(emotions, sentiment)
            log.info("Mood classified",
                     dominant_emotion=features.dominant_emotion,
                     emotion_score=features.emotion_score,
                     positivity=features.positivity)

        return MoodAnalysis(
            text=text,
            sentiment=sentiment,
            emotions=emotions,
            audio_features=features
        )
