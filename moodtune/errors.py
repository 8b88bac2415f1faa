"""
Error taxonomy for MoodTune.

Every failure that crosses a component boundary is one of these. The HTTP
layer maps them onto status codes; ``retryable`` tells a caller whether trying
the same request again can succeed.
"""


class MoodTuneError(Exception):
    """Base class for all MoodTune domain errors."""
    retryable = False


class InvalidInput(MoodTuneError):
    """Raised when user input is rejected before any external call is made."""
    pass


class ClassificationUnavailable(MoodTuneError):
    """Raised when either the sentiment or the emotion classifier call fails."""
    retryable = True


class SearchUnavailable(MoodTuneError):
    """Raised when the track-search service call fails."""
    retryable = True


class NoTracksFound(MoodTuneError):
    """Raised when the track search succeeded but returned no tracks."""
    pass


class NotFoundError(MoodTuneError):
    """Raised when a stored record does not exist for the requesting user."""
    pass


class MoodNotFound(NotFoundError):
    pass


class PlaylistNotFound(NotFoundError):
    pass


class ExportFailed(MoodTuneError):
    """Raised inside the playlist export step. Never leaves PlaylistGenerator."""
    retryable = True
