"""Speak code-assistant suggestions through a system text-to-speech engine."""

from .config import ConfigStore, Settings
from .errors import (
    InitializationError,
    InvalidParameterError,
    NotInitializedError,
    SourceConnectionError,
    SynthesisError,
    TTSCopilotError,
    UnspeakableTextError,
)
from .models import AppConfig, OrchestratorState, Suggestion, SuggestionContext, SuggestionSourceConfig, VoiceConfig
from .orchestrator import TTSCopilot
from .speech import SpeechBackend, SpeechService
from .suggestions import HttpSuggestionFeed, InMemorySuggestionFeed, SuggestionFeed, SuggestionSource
from .text import is_speakable, normalize

__all__ = [
    "AppConfig",
    "ConfigStore",
    "HttpSuggestionFeed",
    "InMemorySuggestionFeed",
    "InitializationError",
    "InvalidParameterError",
    "NotInitializedError",
    "OrchestratorState",
    "Settings",
    "SourceConnectionError",
    "SpeechBackend",
    "SpeechService",
    "Suggestion",
    "SuggestionContext",
    "SuggestionFeed",
    "SuggestionSource",
    "SuggestionSourceConfig",
    "SynthesisError",
    "TTSCopilot",
    "TTSCopilotError",
    "UnspeakableTextError",
    "VoiceConfig",
    "is_speakable",
    "normalize",
]
