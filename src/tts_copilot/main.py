"""CLI startup entrypoint for TTS Copilot."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, replace
from pathlib import Path

import typer
from rich import print

from tts_copilot.config import settings
from tts_copilot.errors import InitializationError, InvalidParameterError, SynthesisError, UnspeakableTextError
from tts_copilot.models import Suggestion
from tts_copilot.orchestrator import TTSCopilot
from tts_copilot.speech import SpeechBackend
from tts_copilot.suggestions import HttpSuggestionFeed, InMemorySuggestionFeed, SuggestionFeed
from tts_copilot.telemetry import configure_logging

app = typer.Typer(help="TTS Copilot: speak code-assistant suggestions aloud")


@app.callback()
def _main() -> None:
    configure_logging(settings.log_level)


def _build_backend() -> SpeechBackend:
    from tts_copilot.speech.tts_pyttsx3 import Pyttsx3SpeechBackend

    return Pyttsx3SpeechBackend()


def _build_copilot(feed: SuggestionFeed | None = None, *, force_suggestions: bool = False) -> TTSCopilot:
    try:
        config = settings.to_app_config()
    except InvalidParameterError as exc:
        print({"error": f"Invalid voice settings: {exc}"})
        raise typer.Exit(code=1)

    if force_suggestions:
        config = replace(config, suggestion_source=replace(config.suggestion_source, enabled=True))

    try:
        backend = _build_backend()
    except RuntimeError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)

    return TTSCopilot(backend, feed or HttpSuggestionFeed(), config)


def _load_replay(path: Path) -> list[Suggestion]:
    if not path.exists():
        raise typer.BadParameter(f"Replay file not found: {path}")
    records = json.loads(path.read_text(encoding="utf-8"))
    return [Suggestion.from_payload(record) for record in records]


@app.command("show-config")
def show_config() -> None:
    """Show the effective configuration resolved from the environment."""
    try:
        config = settings.to_app_config()
    except InvalidParameterError as exc:
        print({"error": f"Invalid voice settings: {exc}"})
        raise typer.Exit(code=1)

    payload = asdict(config)
    if payload["suggestion_source"]["api_key"]:
        payload["suggestion_source"]["api_key"] = "***"
    print({"app_name": settings.app_name, "config": payload})


@app.command()
def voices() -> None:
    """List the voices installed on this system."""
    copilot = _build_copilot()
    names = asyncio.run(copilot.list_voices())
    print({"voices": names or ["Default system voice"]})


@app.command()
def speak(text: str) -> None:
    """Normalize TEXT and speak it once."""
    copilot = _build_copilot()
    try:
        asyncio.run(copilot.speak_text(text))
    except (UnspeakableTextError, SynthesisError) as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print({"spoken": True})


@app.command()
def suggestions(
    replay: Path = typer.Option(None, help="JSON file of suggestion records to use instead of the HTTP feed"),
) -> None:
    """Print a one-shot pull of the current suggestions."""
    feed = InMemorySuggestionFeed(_load_replay(replay)) if replay else None
    copilot = _build_copilot(feed, force_suggestions=replay is not None)

    async def _run() -> list[Suggestion]:
        await copilot.initialize()
        try:
            return await copilot.get_current_suggestions()
        finally:
            await copilot.close()

    try:
        current = asyncio.run(_run())
    except InitializationError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print({"suggestions": [asdict(item) for item in current]})


@app.command()
def run(
    duration: float = typer.Option(None, help="Stop after this many seconds; runs until Ctrl+C by default"),
    replay: Path = typer.Option(None, help="JSON file of suggestion records to speak instead of polling the HTTP feed"),
) -> None:
    """Speak suggestions as they arrive until interrupted."""
    feed = (
        InMemorySuggestionFeed(_load_replay(replay), interval_seconds=settings.suggestions_poll_interval_seconds)
        if replay
        else None
    )
    copilot = _build_copilot(feed, force_suggestions=replay is not None)

    async def _run() -> None:
        await copilot.initialize()
        await copilot.start()
        print(
            {
                "tts_copilot": "running",
                "suggestions_connected": copilot.is_suggestion_source_connected(),
                "hint": "Press Ctrl+C to stop." if duration is None else f"Stopping after {duration}s.",
            }
        )
        try:
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)
        finally:
            await copilot.close()

    try:
        asyncio.run(_run())
    except InitializationError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        pass
    print({"tts_copilot": "stopped"})


if __name__ == "__main__":
    app()
