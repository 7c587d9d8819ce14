"""Speech synthesis boundary and adapter."""

from .interfaces import SpeechBackend
from .service import SpeechService

__all__ = [
    "SpeechBackend",
    "SpeechService",
]
