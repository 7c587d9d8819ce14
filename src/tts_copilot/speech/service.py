"""Speech adapter that serializes utterances against a speech backend."""

from __future__ import annotations

import asyncio
import logging

from tts_copilot.errors import SynthesisError
from tts_copilot.models import VoiceConfig

from .interfaces import SpeechBackend


class SpeechService:
    """Speaks one utterance at a time; a new utterance preempts the previous one."""

    def __init__(
        self,
        backend: SpeechBackend,
        voice_config: VoiceConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._backend = backend
        self._voice_config = voice_config or VoiceConfig()
        self._logger = logger or logging.getLogger("tts_copilot.speech")
        self._utterance: asyncio.Future[None] | None = None

    @property
    def voice_config(self) -> VoiceConfig:
        return self._voice_config

    @property
    def is_speaking(self) -> bool:
        return self._utterance is not None and not self._utterance.done()

    def set_voice_config(self, config: VoiceConfig) -> None:
        """Use ``config`` from the next utterance on; in-flight speech is unaffected."""
        self._voice_config = config

    async def speak(self, text: str) -> None:
        """Speak ``text`` and wait for the backend to finish it."""
        if not text or not text.strip():
            return

        self.stop()

        config = self._voice_config
        utterance = asyncio.ensure_future(
            asyncio.to_thread(
                self._backend.say,
                text,
                voice=config.voice,
                rate=config.rate,
                volume=config.volume,
            )
        )
        self._utterance = utterance
        self._logger.debug("speech_started", extra={"chars": len(text), "rate": config.rate, "voice": config.voice})
        try:
            await utterance
        except Exception as exc:
            self._logger.warning("speech_failed", extra={"error": str(exc)})
            raise SynthesisError(f"TTS Error: {exc}") from exc
        finally:
            if self._utterance is utterance:
                self._utterance = None

        self._logger.debug("speech_finished", extra={"chars": len(text)})

    async def list_voices(self) -> list[str]:
        """Return installed voice names, or an empty list when the backend cannot tell."""
        try:
            voices = await asyncio.to_thread(self._backend.installed_voices)
        except Exception:  # noqa: BLE001 - voice listing is best effort.
            self._logger.warning("voice_listing_failed", exc_info=True)
            return []
        return [str(voice) for voice in voices or []]

    def stop(self) -> None:
        """Request cancellation of the in-flight utterance; never raises."""
        if not self.is_speaking:
            return

        try:
            self._backend.stop()
        except Exception:  # noqa: BLE001 - stopping is best effort.
            self._logger.warning("speech_stop_failed", exc_info=True)
        self._logger.debug("speech_stopped")
