"""
Mood-to-audio-feature mapping for MoodTune.

Turns a pair of classifier outputs (emotion and sentiment) into the target
audio characteristics used to drive the track search. The policy is keyed on
the dominant emotion; each branch is an affine formula in the POSITIVE
sentiment score ("positivity") and/or the dominant emotion's confidence.
"""
from typing import Optional, Sequence

from ..data.schemas import AudioFeatureVector, EmotionLabel, EmotionScore, SentimentScore


BASELINE = {
    'valence': 0.5,
    'energy': 0.5,
    'danceability': 0.5,
    'acousticness': 0.5,
    'instrumentalness': 0.3,  # prefer some vocals
    'tempo': 120.0
}

DEFAULT_POSITIVITY = 0.5
POSITIVE_LABEL = "POSITIVE"


def dominant_emotion(emotions: Sequence[EmotionScore]) -> Optional[EmotionScore]:
    """Highest-scoring emotion. Ties keep classifier order."""
    if not emotions:
        return None
    return sorted(emotions, key=lambda e: e.score, reverse=True)[0]


def extract_positivity(sentiment: Sequence[SentimentScore]) -> float:
    """Score of the POSITIVE label, or 0.5 when it is missing."""
    for entry in sentiment or ():
        if entry.label.upper() == POSITIVE_LABEL:
            return entry.score
    return DEFAULT_POSITIVITY


class MoodToAudioMapper:
    """Maps emotion and sentiment scores onto an AudioFeatureVector.

    Pure and total: any well-typed input, including empty sequences, yields a
    vector. Values are not clamped here; for inputs in [0, 1] every branch
    stays within [0, 1].
    """

    def map(self, emotions: Sequence[EmotionScore], sentiment: Sequence[SentimentScore]) -> AudioFeatureVector:
        """Compute the target audio features for a mood.

        Args:
            emotions: Emotion classifier output, any order
            sentiment: Sentiment classifier output, any order

        Returns:
            AudioFeatureVector tagged with the dominant emotion, its score and
            the positivity used
        """
        dominant = dominant_emotion(emotions)
        positivity = extract_positivity(sentiment)
        label = EmotionLabel.from_label(dominant.label) if dominant else None
        emotion_score = dominant.score if dominant else 0.0

        features = dict(BASELINE)
        features.update(self._branch(label, positivity, emotion_score))

        return AudioFeatureVector(
            valence=features['valence'],
            energy=features['energy'],
            danceability=features['danceability'],
            acousticness=features['acousticness'],
            instrumentalness=features['instrumentalness'],
            tempo=float(features['tempo']),
            dominant_emotion=dominant.label if dominant and dominant.label else "neutral",
            emotion_score=emotion_score,
            positivity=positivity
        )

    def _branch(self, label: Optional[EmotionLabel], positivity: float, emotion_score: float) -> dict:
        if label is EmotionLabel.JOY:
            return {
                'valence': 0.7 + (positivity * 0.3),
                'energy': 0.6 + (positivity * 0.3),
                'danceability': 0.6 + (positivity * 0.2),
                'tempo': 120 + (positivity * 30),
                'acousticness': 0.3
            }
        elif label is EmotionLabel.SADNESS:
            return {
                'valence': 0.2 - (positivity * 0.1),
                'energy': 0.3 + (positivity * 0.2),
                'danceability': 0.3,
                'tempo': 80 + (positivity * 20),
                'acousticness': 0.6 + (positivity * 0.2)
            }
        elif label is EmotionLabel.ANGER:
            return {
                'valence': 0.3,
                'energy': 0.8 + (emotion_score * 0.2),
                'danceability': 0.5,
                'tempo': 130 + (emotion_score * 40),
                'acousticness': 0.2
            }
        elif label is EmotionLabel.FEAR:
            return {
                'valence': 0.3,
                'energy': 0.6,
                'danceability': 0.4,
                'tempo': 110,
                'acousticness': 0.4
            }
        elif label is EmotionLabel.SURPRISE:
            return {
                'valence': 0.6 + (positivity * 0.2),
                'energy': 0.7,
                'danceability': 0.6,
                'tempo': 125,
                'acousticness': 0.3
            }
        elif label is EmotionLabel.NEUTRAL:
            return {
                'valence': 0.5,
                'energy': 0.5,
                'danceability': 0.5,
                'tempo': 110,
                'acousticness': 0.4
            }
        else:
            # disgust, unknown labels and no emotions at all; acousticness stays at baseline
            return {
                'valence': positivity,
                'energy': 0.5 + (positivity * 0.3),
                'danceability': 0.5 + (positivity * 0.2),
                'tempo': 100 + (positivity * 40)
            }


_default_mapper = MoodToAudioMapper()


def map_mood_to_audio_features(emotions: Sequence[EmotionScore],
                               sentiment: Sequence[SentimentScore]) -> AudioFeatureVector:
    """Module-level shortcut for ``MoodToAudioMapper().map``."""
    return _default_mapper.map(emotions, sentiment)
