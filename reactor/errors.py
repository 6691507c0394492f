"""
Reactor Errors - Failure taxonomy for catalog loading and playback.
"""
from typing import Optional


class ReactorError(Exception):
    """Base class for all reactor failures."""


class FetchError(ReactorError):
    """The catalog request did not complete or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ReactorError):
    """The catalog payload is not a well-formed array of records."""


class PlaybackError(ReactorError):
    """The audio resource rejected a play request or failed while loading."""

    def __init__(self, reason: str, track_id: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.track_id = track_id

    @classmethod
    def wrap(cls, exc: BaseException, track_id: Optional[str] = None) -> 'PlaybackError':
        """Coerce any failure reported by a resource into a PlaybackError."""
        if isinstance(exc, PlaybackError):
            if exc.track_id is None:
                exc.track_id = track_id
            return exc
        return cls(str(exc) or type(exc).__name__, track_id=track_id)
