"""Caller-scripted suggestion feed for local demos and tests."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterable

from tts_copilot.models import Suggestion, SuggestionSourceConfig


class InMemorySuggestionFeed:
    """Replays scripted suggestions, then waits for suggestions pushed at runtime."""

    def __init__(
        self,
        suggestions: Iterable[Suggestion] = (),
        *,
        interval_seconds: float = 0.0,
        fail_connect: bool = False,
    ) -> None:
        self._suggestions = list(suggestions)
        self._interval_seconds = interval_seconds
        self._fail_connect = fail_connect
        self._pushed: asyncio.Queue[Suggestion] = asyncio.Queue()
        self.connect_calls: list[SuggestionSourceConfig] = []
        self.closed = False

    async def connect(self, config: SuggestionSourceConfig) -> None:
        self.connect_calls.append(config)
        if self._fail_connect:
            raise ConnectionRefusedError("suggestion feed refused the connection")
        self.closed = False

    async def fetch(self) -> list[Suggestion]:
        return list(self._suggestions)

    async def stream(self) -> AsyncIterator[Suggestion]:
        for suggestion in self._suggestions:
            yield suggestion
            await asyncio.sleep(self._interval_seconds)

        while True:
            yield await self._pushed.get()

    def push(self, suggestion: Suggestion) -> None:
        """Deliver ``suggestion`` to the running stream."""
        self._pushed.put_nowait(suggestion)

    async def close(self) -> None:
        self.closed = True
