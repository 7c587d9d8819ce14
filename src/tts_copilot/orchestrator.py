"""Orchestration of configuration, normalization, suggestion delivery and speech."""

from __future__ import annotations

import logging
from typing import Any

from .config import ConfigStore, Settings
from .errors import InitializationError, UnspeakableTextError
from .models import AppConfig, OrchestratorState, Suggestion, VoiceConfig
from .speech import SpeechBackend, SpeechService
from .suggestions import HttpSuggestionFeed, SuggestionFeed, SuggestionSource
from .text import is_speakable, normalize, preview


class TTSCopilot:
    """Speaks code-assistant suggestions and manual text through one speech backend."""

    def __init__(
        self,
        backend: SpeechBackend,
        feed: SuggestionFeed,
        config: AppConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = ConfigStore(config)
        self._logger = logger or logging.getLogger("tts_copilot.orchestrator")
        self._speech = SpeechService(backend, self._store.get_config().voice)
        self._source = SuggestionSource(feed)
        self._state = OrchestratorState.IDLE
        self._observer_registered = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        backend: SpeechBackend | None = None,
        feed: SuggestionFeed | None = None,
    ) -> TTSCopilot:
        """Build an instance wired to pyttsx3 and the HTTP suggestion feed unless overridden."""
        if backend is None:
            from .speech.tts_pyttsx3 import Pyttsx3SpeechBackend

            backend = Pyttsx3SpeechBackend()
        return cls(backend, feed or HttpSuggestionFeed(), settings.to_app_config())

    @property
    def state(self) -> OrchestratorState:
        return self._state

    def is_running(self) -> bool:
        return self._state == OrchestratorState.RUNNING

    def is_suggestion_source_connected(self) -> bool:
        return self._source.is_connected

    def get_config(self) -> AppConfig:
        return self._store.get_config()

    async def initialize(self) -> None:
        config = self._store.get_config()
        try:
            if config.suggestion_source.enabled:
                await self._source.initialize(config.suggestion_source)
        except Exception as exc:
            raise InitializationError(f"Failed to initialize TTS Copilot: {exc}") from exc

        self._logger.info(
            "tts_copilot_initialized",
            extra={"suggestions_enabled": config.suggestion_source.enabled},
        )

    async def start(self) -> None:
        if self._state == OrchestratorState.RUNNING:
            return

        config = self._store.get_config()
        if config.suggestion_source.enabled and config.real_time_enabled:
            self._listen()
        self._state = OrchestratorState.RUNNING

        self._logger.info("tts_copilot_started", extra={"real_time_enabled": config.real_time_enabled})

    async def stop(self) -> None:
        if self._state == OrchestratorState.IDLE:
            return

        self._state = OrchestratorState.IDLE
        self._speech.stop()
        await self._source.stop_listening()
        self._logger.info("tts_copilot_stopped")

    async def speak_text(self, text: str) -> None:
        """Normalize ``text`` and speak it, bypassing the suggestion source."""
        processed = normalize(text)
        if not is_speakable(processed):
            raise UnspeakableTextError()

        await self._speech.speak(processed)

    def update_voice_config(self, **partial: Any) -> VoiceConfig:
        voice = self._store.update_voice(**partial)
        self._speech.set_voice_config(voice)
        return voice

    async def update_suggestion_source_config(self, **partial: Any) -> None:
        source_config = self._store.update_suggestion_source(**partial)
        if source_config.enabled:
            await self._source.initialize(source_config)

    async def set_real_time_enabled(self, enabled: bool) -> None:
        self._store.set_real_time_enabled(enabled)

        if enabled and self.is_running():
            if self._store.get_config().suggestion_source.enabled:
                self._listen()
        else:
            await self._source.stop_listening()

    async def list_voices(self) -> list[str]:
        return await self._speech.list_voices()

    async def get_current_suggestions(self) -> list[Suggestion]:
        return await self._source.get_suggestions()

    async def close(self) -> None:
        await self.stop()
        await self._source.close()

    def _listen(self) -> None:
        if not self._observer_registered:
            self._source.on_suggestion(self._handle_suggestion)
            self._observer_registered = True
        self._source.start_listening()

    async def _handle_suggestion(self, suggestion: Suggestion) -> None:
        if self._state != OrchestratorState.RUNNING:
            return

        try:
            processed = normalize(suggestion.text)
            if is_speakable(processed):
                self._logger.info("speaking_suggestion", extra={"preview": preview(processed)})
                await self._speech.speak(processed)
        except Exception:  # noqa: BLE001 - a bad suggestion must not end the listening loop.
            self._logger.exception("suggestion_processing_failed", extra={"language": suggestion.language})
