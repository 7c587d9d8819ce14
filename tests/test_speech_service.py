from __future__ import annotations

import asyncio
import threading

import pytest

from tts_copilot.errors import SynthesisError
from tts_copilot.models import VoiceConfig
from tts_copilot.speech import SpeechService


class RecordingBackend:
    def __init__(self, *, voices: list[str] | Exception | None = None, fail_with: Exception | None = None) -> None:
        self.calls: list[tuple] = []
        self.stop_calls = 0
        self.voices = voices
        self.fail_with = fail_with

    def say(self, text: str, *, voice: str | None, rate: int, volume: float) -> None:
        self.calls.append((text, voice, rate, volume))
        if self.fail_with:
            raise self.fail_with

    def stop(self) -> None:
        self.stop_calls += 1

    def installed_voices(self) -> list[str] | None:
        if isinstance(self.voices, Exception):
            raise self.voices
        return self.voices


class BlockingBackend:
    """Holds the first utterance open until ``stop`` is called."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.entered = threading.Event()
        self.release = threading.Event()

    def say(self, text: str, *, voice: str | None, rate: int, volume: float) -> None:
        self.events.append(f"say:{text}")
        if text == "first":
            self.entered.set()
            self.release.wait(timeout=2)

    def stop(self) -> None:
        self.events.append("stop")
        self.release.set()

    def installed_voices(self) -> list[str]:
        return []


def test_speak_forwards_derived_parameters() -> None:
    backend = RecordingBackend()
    service = SpeechService(backend, VoiceConfig(speed=1.5, volume=0.8, voice="Alex"))

    asyncio.run(service.speak("Hello world"))

    assert backend.calls == [("Hello world", "Alex", 300, 0.8)]
    assert service.is_speaking is False


def test_speak_ignores_blank_text() -> None:
    backend = RecordingBackend()
    service = SpeechService(backend)

    asyncio.run(service.speak("   "))

    assert backend.calls == []


def test_speak_wraps_backend_failure() -> None:
    backend = RecordingBackend(fail_with=OSError("audio device busy"))
    service = SpeechService(backend)

    with pytest.raises(SynthesisError, match="TTS Error: audio device busy"):
        asyncio.run(service.speak("Hello"))


def test_new_utterance_cancels_the_one_in_flight() -> None:
    backend = BlockingBackend()

    async def _run() -> None:
        service = SpeechService(backend)
        first = asyncio.create_task(service.speak("first"))
        await asyncio.to_thread(backend.entered.wait, 2)
        await service.speak("second")
        await asyncio.wait_for(first, timeout=2)

    asyncio.run(_run())

    assert backend.events == ["say:first", "stop", "say:second"]


def test_voice_config_applies_to_next_utterance() -> None:
    backend = RecordingBackend()
    service = SpeechService(backend)

    async def _run() -> None:
        await service.speak("one")
        service.set_voice_config(VoiceConfig(speed=2.0, voice="Samantha"))
        await service.speak("two")

    asyncio.run(_run())

    assert backend.calls == [("one", None, 200, 1.0), ("two", "Samantha", 400, 1.0)]
    assert service.voice_config.voice == "Samantha"


def test_list_voices_is_best_effort() -> None:
    assert asyncio.run(SpeechService(RecordingBackend(voices=["Alex", "Samantha"])).list_voices()) == [
        "Alex",
        "Samantha",
    ]
    assert asyncio.run(SpeechService(RecordingBackend(voices=None)).list_voices()) == []
    assert asyncio.run(SpeechService(RecordingBackend(voices=RuntimeError("no driver"))).list_voices()) == []


def test_stop_without_utterance_does_not_touch_backend() -> None:
    backend = RecordingBackend()

    SpeechService(backend).stop()

    assert backend.stop_calls == 0


def test_stop_swallows_backend_errors() -> None:
    class _BrokenStop(RecordingBackend):
        def stop(self) -> None:
            super().stop()
            raise RuntimeError("driver gone")

    backend = _BrokenStop()

    async def _run() -> None:
        service = SpeechService(backend)
        service._utterance = asyncio.get_running_loop().create_future()
        service.stop()

    asyncio.run(_run())

    assert backend.stop_calls == 1
