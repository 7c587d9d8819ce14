"""Contract for suggestion-producing feeds."""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from tts_copilot.models import Suggestion, SuggestionSourceConfig


class SuggestionFeed(Protocol):
    """External capability that yields code-assistant suggestions."""

    async def connect(self, config: SuggestionSourceConfig) -> None:
        """Perform the connection handshake, raising on failure."""

    async def fetch(self) -> list[Suggestion]:
        """Return the suggestions currently available."""

    def stream(self) -> AsyncIterator[Suggestion]:
        """Yield suggestions as they arrive; each call starts a fresh stream."""

    async def close(self) -> None:
        """Release any connection resources."""
