"""
Genre seeds for the track search, keyed by dominant emotion.
"""
from typing import Dict, Optional, Union

from ..data.schemas import EmotionLabel


GENRE_SEEDS: Dict[EmotionLabel, str] = {
    EmotionLabel.JOY: "pop,dance,party",
    EmotionLabel.SADNESS: "indie,acoustic,sad",
    EmotionLabel.ANGER: "rock,metal,punk",
    EmotionLabel.FEAR: "ambient,electronic,sleep",
    EmotionLabel.SURPRISE: "electronic,edm,dance",
    EmotionLabel.NEUTRAL: "chill,jazz,study",
}

DEFAULT_GENRES = "pop,indie,electronic"


def genres_for(emotion: Optional[Union[str, EmotionLabel]]) -> str:
    """Comma-joined genre seeds for an emotion label.

    Total: disgust, unknown labels and None all resolve to DEFAULT_GENRES.
    """
    label = emotion if isinstance(emotion, EmotionLabel) else EmotionLabel.from_label(emotion)
    return GENRE_SEEDS.get(label, DEFAULT_GENRES)
