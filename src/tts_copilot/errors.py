"""Error taxonomy for TTS Copilot."""

from __future__ import annotations


class TTSCopilotError(Exception):
    """Base class for all TTS Copilot failures."""


class InvalidParameterError(TTSCopilotError, ValueError):
    """Raised when a voice parameter falls outside its valid range."""

    def __init__(self, field: str, low: float | None = None, high: float | None = None) -> None:
        self.field = field
        self.low = low
        self.high = high
        if low is None or high is None:
            message = f"Unknown parameter: {field}"
        else:
            message = f"{field.capitalize()} must be between {low:.1f} and {high:.1f}"
        super().__init__(message)


class SourceConnectionError(TTSCopilotError, ConnectionError):
    """Raised when the suggestion source handshake fails."""


class NotInitializedError(TTSCopilotError, RuntimeError):
    """Raised when listening is requested before the suggestion source is connected."""


class SynthesisError(TTSCopilotError, RuntimeError):
    """Raised when the speech backend reports a failure."""


class UnspeakableTextError(TTSCopilotError, ValueError):
    """Raised when normalized text is not suitable for speech."""

    def __init__(self, message: str = "Text is not suitable for TTS conversion") -> None:
        super().__init__(message)


class InitializationError(TTSCopilotError, RuntimeError):
    """Wraps any failure raised while initializing the orchestrator."""
