"""Suggestion source adapter with push-based observer delivery."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

from tts_copilot.errors import NotInitializedError, SourceConnectionError
from tts_copilot.models import Suggestion, SuggestionSourceConfig

from .interfaces import SuggestionFeed

SuggestionObserver = Callable[[Suggestion], Union[Awaitable[None], None]]


class SuggestionSource:
    """Connects to a suggestion feed and pushes each suggestion to registered observers.

    Observers run one at a time in registration order. Coroutine observers are
    awaited before the next suggestion is pulled from the feed, so a slow
    observer holds back the stream instead of letting work pile up.
    """

    def __init__(self, feed: SuggestionFeed, *, logger: logging.Logger | None = None) -> None:
        self._feed = feed
        self._logger = logger or logging.getLogger("tts_copilot.suggestions")
        self._config = SuggestionSourceConfig()
        self._connected = False
        self._listening = False
        self._observers: list[SuggestionObserver] = []
        self._delivery_task: asyncio.Task[None] | None = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def is_listening(self) -> bool:
        return self._listening

    async def initialize(self, config: SuggestionSourceConfig) -> None:
        """Store ``config`` and connect to the feed when it is enabled."""
        self._config = config

        if not config.enabled:
            self._connected = False
            return

        try:
            await self._feed.connect(config)
        except Exception as exc:
            self._connected = False
            self._logger.warning("suggestion_source_connect_failed", extra={"error": str(exc)})
            raise SourceConnectionError(f"Failed to initialize suggestion source: {exc}") from exc

        self._connected = True
        self._logger.info("suggestion_source_connected", extra={"api_url": config.api_url})

    def start_listening(self) -> None:
        """Begin delivering suggestions to observers; must run inside an event loop."""
        if not self._connected:
            raise NotInitializedError("Suggestion source not initialized")

        self._listening = True
        if self._delivery_task and not self._delivery_task.done():
            return

        self._delivery_task = asyncio.create_task(self._delivery_loop(), name="suggestion-delivery")
        self._logger.info("suggestion_listening_started", extra={"observers": len(self._observers)})

    async def stop_listening(self) -> None:
        """Stop delivering suggestions; safe to call repeatedly or from an observer."""
        self._listening = False
        task = self._delivery_task
        if not task:
            return

        self._delivery_task = None
        task.cancel()
        if task is not asyncio.current_task():
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._logger.info("suggestion_listening_stopped")

    async def get_suggestions(self) -> list[Suggestion]:
        if not self._connected:
            return []
        return await self._feed.fetch()

    def on_suggestion(self, observer: SuggestionObserver) -> None:
        self._observers.append(observer)

    def remove_suggestion_listener(self, observer: SuggestionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def close(self) -> None:
        await self.stop_listening()
        await self._feed.close()
        self._connected = False

    async def _delivery_loop(self) -> None:
        delivered_texts: set[str] = set()
        try:
            async for suggestion in self._feed.stream():
                if not self._listening:
                    break
                if self._config.coalesce_duplicates:
                    if suggestion.text in delivered_texts:
                        continue
                    delivered_texts.add(suggestion.text)
                await self._notify(suggestion)
        except Exception:  # noqa: BLE001 - a broken feed must not crash the process.
            self._logger.exception("suggestion_stream_failed")
        finally:
            # A stream that ends on its own leaves nothing listening.
            if self._delivery_task is asyncio.current_task():
                self._delivery_task = None
                self._listening = False

    async def _notify(self, suggestion: Suggestion) -> None:
        for observer in list(self._observers):
            try:
                result = observer(suggestion)
                if inspect.isawaitable(result):
                    await result
            except Exception:  # noqa: BLE001 - one failing observer must not starve the rest.
                self._logger.exception(
                    "suggestion_observer_failed",
                    extra={"observer": getattr(observer, "__qualname__", repr(observer))},
                )
