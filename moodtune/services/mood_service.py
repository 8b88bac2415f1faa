"""
Mood submission and history for MoodTune.
"""
from typing import List, Optional, Tuple

from ..data.schemas import MoodRecord
from ..errors import MoodNotFound
from ..persistence.store import MoodRepository
from ..utils.logging import StructuredLogger, get_logger
from .classifier import ClassificationAdapter


class MoodService:
    """Analyzes mood text and keeps each user's mood history."""

    def __init__(self, adapter: ClassificationAdapter, moods: MoodRepository,
                 logger: Optional[StructuredLogger] = None):
        self.adapter = adapter
        self.moods = moods
        self.logger = logger or get_logger("moodtune.moods")

    async def create(self, user_id: str, text: str) -> MoodRecord:
        """Analyze ``text`` and store the result for ``user_id``.

        Nothing is stored when the analysis fails.
        """
        analysis = await self.adapter.analyze(text)
        record = self.moods.add(user_id, analysis)
        self.logger.info("Mood stored", mood_id=record.id, user_id=user_id,
                         dominant_emotion=analysis.dominant_emotion)
        return record

    def list(self, user_id: str, limit: int = 20, offset: int = 0) -> Tuple[List[MoodRecord], int]:
        return self.moods.list_for_user(user_id, limit=limit, offset=offset)

    def get(self, user_id: str, mood_id: str) -> MoodRecord:
        record = self.moods.get(user_id, mood_id)
        if record is None:
            raise MoodNotFound(f"Mood {mood_id} not found")
        return record

    def delete(self, user_id: str, mood_id: str) -> None:
        if not self.moods.delete(user_id, mood_id):
            raise MoodNotFound(f"Mood {mood_id} not found")
        self.logger.info("Mood deleted", mood_id=mood_id, user_id=user_id)
