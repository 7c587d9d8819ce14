from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from tts_copilot.config import Settings
from tts_copilot.errors import InitializationError, InvalidParameterError, NotInitializedError, UnspeakableTextError
from tts_copilot.models import AppConfig, OrchestratorState, Suggestion, SuggestionSourceConfig
from tts_copilot.orchestrator import TTSCopilot
from tts_copilot.suggestions import InMemorySuggestionFeed

LIVE = AppConfig(suggestion_source=SuggestionSourceConfig(enabled=True, api_url="https://feed.test"))


class RecordingBackend:
    def __init__(self, *, fail_first: bool = False) -> None:
        self.spoken: list[tuple[str, str | None, int]] = []
        self.stop_calls = 0
        self.fail_first = fail_first

    def say(self, text: str, *, voice: str | None, rate: int, volume: float) -> None:
        self.spoken.append((text, voice, rate))
        if self.fail_first and len(self.spoken) == 1:
            raise OSError("device unavailable")

    def stop(self) -> None:
        self.stop_calls += 1

    def installed_voices(self) -> list[str]:
        return ["Alex"]


async def _wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


def test_speak_text_normalizes_before_speaking() -> None:
    backend = RecordingBackend()
    copilot = TTSCopilot(backend, InMemorySuggestionFeed())

    asyncio.run(copilot.speak_text('Code: ```console.log("hello")``` end'))

    assert backend.spoken == [("Code: end", None, 200)]


@pytest.mark.parametrize("text", ["", "a" * 1001, "```only code```"])
def test_speak_text_rejects_unspeakable_text(text: str) -> None:
    backend = RecordingBackend()
    copilot = TTSCopilot(backend, InMemorySuggestionFeed())

    with pytest.raises(UnspeakableTextError, match="not suitable for TTS"):
        asyncio.run(copilot.speak_text(text))

    assert backend.spoken == []


def test_start_is_idempotent_and_stop_before_start_is_a_no_op() -> None:
    backend = RecordingBackend()
    copilot = TTSCopilot(backend, InMemorySuggestionFeed())

    async def _run() -> None:
        await copilot.stop()
        assert copilot.state == OrchestratorState.IDLE
        assert backend.stop_calls == 0

        await copilot.initialize()
        await copilot.start()
        await copilot.start()
        assert copilot.is_running() is True

        await copilot.stop()
        assert copilot.is_running() is False

    asyncio.run(_run())


def test_initialize_skips_disabled_source() -> None:
    feed = InMemorySuggestionFeed()
    copilot = TTSCopilot(RecordingBackend(), feed)

    asyncio.run(copilot.initialize())

    assert feed.connect_calls == []
    assert copilot.is_suggestion_source_connected() is False


def test_initialize_wraps_source_failure() -> None:
    copilot = TTSCopilot(RecordingBackend(), InMemorySuggestionFeed(fail_connect=True), LIVE)

    with pytest.raises(InitializationError, match="Failed to initialize TTS Copilot"):
        asyncio.run(copilot.initialize())


def test_running_copilot_speaks_normalized_suggestions() -> None:
    backend = RecordingBackend()
    feed = InMemorySuggestionFeed([Suggestion(text="Try `sum(a, b)` for totals", confidence=0.8)])
    copilot = TTSCopilot(backend, feed, LIVE)

    async def _run() -> None:
        await copilot.initialize()
        await copilot.start()
        await _wait_for(lambda: len(backend.spoken) == 1)
        await copilot.close()

    asyncio.run(_run())

    assert backend.spoken == [("Try for totals", None, 200)]
    assert feed.closed is True


def test_failing_suggestion_does_not_stop_listening() -> None:
    backend = RecordingBackend(fail_first=True)
    feed = InMemorySuggestionFeed(
        [
            Suggestion(text="first suggestion", confidence=0.5),
            Suggestion(text="```skip()```", confidence=0.5),
            Suggestion(text="second suggestion", confidence=0.5),
        ]
    )
    copilot = TTSCopilot(backend, feed, LIVE)

    async def _run() -> None:
        await copilot.initialize()
        await copilot.start()
        await _wait_for(lambda: len(backend.spoken) == 2)
        await copilot.stop()

    asyncio.run(_run())

    assert [text for text, _, _ in backend.spoken] == ["first suggestion", "second suggestion"]


def test_real_time_disabled_does_not_listen() -> None:
    backend = RecordingBackend()
    feed = InMemorySuggestionFeed([Suggestion(text="hello", confidence=0.5)])
    copilot = TTSCopilot(backend, feed, AppConfig(real_time_enabled=False, suggestion_source=LIVE.suggestion_source))

    async def _run() -> None:
        await copilot.initialize()
        await copilot.start()
        await asyncio.sleep(0.05)
        await copilot.stop()

    asyncio.run(_run())

    assert backend.spoken == []


def test_toggle_real_time_while_running() -> None:
    backend = RecordingBackend()
    feed = InMemorySuggestionFeed()
    copilot = TTSCopilot(backend, feed, AppConfig(real_time_enabled=False, suggestion_source=LIVE.suggestion_source))

    async def _run() -> None:
        await copilot.initialize()
        await copilot.start()

        await copilot.set_real_time_enabled(True)
        feed.push(Suggestion(text="now listening", confidence=0.7))
        await _wait_for(lambda: len(backend.spoken) == 1)

        await copilot.set_real_time_enabled(False)
        feed.push(Suggestion(text="ignored", confidence=0.7))
        await asyncio.sleep(0.05)
        assert copilot.get_config().real_time_enabled is False
        await copilot.stop()

    asyncio.run(_run())

    assert [text for text, _, _ in backend.spoken] == ["now listening"]


def test_suggestions_ignored_when_idle() -> None:
    backend = RecordingBackend()
    copilot = TTSCopilot(backend, InMemorySuggestionFeed())

    asyncio.run(copilot._handle_suggestion(Suggestion(text="hello", confidence=0.5)))

    assert backend.spoken == []


def test_update_voice_config_reaches_speech_backend() -> None:
    backend = RecordingBackend()
    copilot = TTSCopilot(backend, InMemorySuggestionFeed())

    copilot.update_voice_config(speed=1.5, voice="Alex")
    asyncio.run(copilot.speak_text("faster"))

    assert backend.spoken == [("faster", "Alex", 300)]


def test_invalid_voice_update_leaves_config_unchanged() -> None:
    copilot = TTSCopilot(RecordingBackend(), InMemorySuggestionFeed())
    before = copilot.get_config()

    with pytest.raises(InvalidParameterError):
        copilot.update_voice_config(speed=20)

    assert copilot.get_config() == before


def test_update_suggestion_source_config_reinitializes() -> None:
    feed = InMemorySuggestionFeed([Suggestion(text="if (condition) { ok(); }", confidence=0.78)])
    copilot = TTSCopilot(RecordingBackend(), feed)

    async def _run() -> list[Suggestion]:
        await copilot.update_suggestion_source_config(enabled=True, api_url="https://feed.test")
        await copilot.update_suggestion_source_config(api_key="rotated")
        return await copilot.get_current_suggestions()

    suggestions = asyncio.run(_run())

    assert copilot.is_suggestion_source_connected() is True
    assert len(feed.connect_calls) == 2
    assert feed.connect_calls[-1].api_key == "rotated"
    assert suggestions[0].confidence == 0.78


def test_list_voices_delegates_to_backend() -> None:
    copilot = TTSCopilot(RecordingBackend(), InMemorySuggestionFeed())

    assert asyncio.run(copilot.list_voices()) == ["Alex"]


def test_from_settings_uses_environment_config(monkeypatch) -> None:
    monkeypatch.setenv("TTS_COPILOT_VOICE_PITCH", "1.1")
    monkeypatch.setenv("TTS_COPILOT_REAL_TIME_ENABLED", "false")

    copilot = TTSCopilot.from_settings(
        Settings(_env_file=None),
        backend=RecordingBackend(),
        feed=InMemorySuggestionFeed(),
    )

    assert copilot.get_config().voice.pitch == 1.1
    assert copilot.get_config().real_time_enabled is False


def test_start_without_connected_source_stays_idle() -> None:
    copilot = TTSCopilot(RecordingBackend(), InMemorySuggestionFeed(), LIVE)

    async def _run() -> None:
        with pytest.raises(NotInitializedError):
            await copilot.start()
        assert copilot.state == OrchestratorState.IDLE

        await copilot.initialize()
        await copilot.start()
        assert copilot.is_running() is True
        await copilot.stop()

    asyncio.run(_run())
