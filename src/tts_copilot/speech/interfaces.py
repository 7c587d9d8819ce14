"""Contract for the speech synthesis capability."""

from typing import Protocol


class SpeechBackend(Protocol):
    """Speaks text through a system text-to-speech engine."""

    def say(self, text: str, *, voice: str | None, rate: int, volume: float) -> None:
        """Speak ``text`` and block until the utterance finishes or is stopped."""

    def stop(self) -> None:
        """Cancel the utterance currently being spoken, if any."""

    def installed_voices(self) -> list[str] | None:
        """Return the names of voices installed on the system."""
