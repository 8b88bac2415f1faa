"""
MoodTune: mood-driven playlist generation.

Free-text mood -> sentiment and emotion classification -> target audio
features -> track search -> stored playlist.
"""

__version__ = "1.0.0"
