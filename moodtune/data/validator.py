"""
Input validation module for the MoodTune system.
"""
from typing import Any, List, Type, TypeVar, Union

from ..errors import InvalidInput
from .schemas import EmotionScore, SentimentScore, ValidationResult


ScoreT = TypeVar('ScoreT', EmotionScore, SentimentScore)


class MoodTextValidator:
    """Validates user mood text before it is sent to the classifiers."""

    def __init__(self, max_length: int = 500):
        self.max_length = max_length

    def validate(self, text: Any) -> ValidationResult:
        """Validate mood text.

        Args:
            text: Raw text submitted by the user

        Returns:
            ValidationResult with any problems found
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])
        if not isinstance(text, str):
            result.add_error("Mood text must be a string")
            return result
        if not text.strip():
            result.add_error("Mood text is required")
        if len(text) > self.max_length:
            result.add_error(f"Mood text must be at most {self.max_length} characters")
        result.metadata = {'length': len(text)}
        return result

    def require_valid(self, text: Any) -> str:
        """Return ``text`` unchanged, or raise InvalidInput."""
        result = self.validate(text)
        if result.has_errors():
            raise InvalidInput("; ".join(result.errors))
        return text


class ClassifierPayloadValidator:
    """Normalizes raw classifier responses into ranked score lists.

    The inference API answers either ``[{label, score}, ...]`` or, for a
    single input, ``[[{label, score}, ...]]``.
    """

    def normalize(self, payload: Union[list, dict], score_cls: Type[ScoreT]) -> List[ScoreT]:
        """Convert a classifier payload into a confidence-descending list.

        Raises:
            ValueError: If the payload does not have the expected shape
        """
        if isinstance(payload, dict):
            if 'error' in payload:
                raise ValueError(f"Classifier returned an error: {payload['error']}")
            raise ValueError("Classifier payload must be a list")
        if not isinstance(payload, list):
            raise ValueError("Classifier payload must be a list")

        entries = payload
        if entries and isinstance(entries[0], list):
            entries = entries[0]

        scores = []
        for entry in entries:
            if not isinstance(entry, dict) or 'label' not in entry or 'score' not in entry:
                raise ValueError(f"Malformed classifier entry: {entry!r}")
            try:
                score = float(entry['score'])
            except (TypeError, ValueError) as e:
                raise ValueError(f"Non-numeric classifier score: {entry['score']!r}") from e
            scores.append(score_cls(label=str(entry['label']), score=score))

        scores.sort(key=lambda s: s.score, reverse=True)
        return scores
