"""Text-to-speech backend powered by ``pyttsx3``."""

from __future__ import annotations

import threading

from .interfaces import SpeechBackend


class Pyttsx3SpeechBackend(SpeechBackend):
    """Speaker playback using a local pyttsx3 engine instance."""

    def __init__(self) -> None:
        try:
            import pyttsx3
        except ImportError as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Voice TTS backend unavailable. Install extras with: pip install 'tts-copilot[voice]'"
            ) from exc

        self._engine = pyttsx3.init()
        self._default_voice_id = self._engine.getProperty("voice")
        # runAndWait must not be re-entered while a previous utterance drains.
        self._lock = threading.Lock()

    def say(self, text: str, *, voice: str | None, rate: int, volume: float) -> None:
        with self._lock:
            self._engine.setProperty("voice", self._resolve_voice_id(voice))
            self._engine.setProperty("rate", rate)
            self._engine.setProperty("volume", max(0.0, min(1.0, volume)))
            self._engine.say(text)
            self._engine.runAndWait()

    def stop(self) -> None:
        self._engine.stop()

    def installed_voices(self) -> list[str]:
        return [voice.name for voice in self._engine.getProperty("voices") or []]

    def _resolve_voice_id(self, voice: str | None) -> str | None:
        if not voice:
            return self._default_voice_id

        wanted = voice.lower()
        for candidate in self._engine.getProperty("voices") or []:
            if candidate.id == voice or (candidate.name or "").lower() == wanted:
                return candidate.id
        return voice
