from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import InvalidParameterError

VOICE_PARAMETER_RANGES: dict[str, tuple[float, float]] = {
    "pitch": (0.0, 2.0),
    "speed": (0.1, 10.0),
    "volume": (0.0, 1.0),
}


@dataclass(frozen=True, slots=True)
class VoiceConfig:
    """Voice parameters handed to the speech backend."""

    pitch: float = 1.0
    speed: float = 1.0
    volume: float = 1.0
    voice: str | None = None

    def __post_init__(self) -> None:
        for name, (low, high) in VOICE_PARAMETER_RANGES.items():
            value = getattr(self, name)
            if not low <= value <= high:
                raise InvalidParameterError(name, low, high)

    @property
    def rate(self) -> int:
        """Speech rate in words per minute."""
        return round(self.speed * 200)


@dataclass(frozen=True, slots=True)
class SuggestionSourceConfig:
    api_url: str | None = None
    api_key: str | None = None
    enabled: bool = False
    poll_interval_seconds: float = 5.0
    coalesce_duplicates: bool = False


@dataclass(frozen=True, slots=True)
class AppConfig:
    voice: VoiceConfig = field(default_factory=VoiceConfig)
    real_time_enabled: bool = True
    suggestion_source: SuggestionSourceConfig = field(default_factory=SuggestionSourceConfig)


@dataclass(frozen=True, slots=True)
class SuggestionContext:
    file_name: str
    line_number: int
    column_number: int


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A unit of text proposed by a suggestion feed for speech output."""

    text: str
    confidence: float
    language: str | None = None
    context: SuggestionContext | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Suggestion confidence must be between 0 and 1, got {self.confidence}")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Suggestion:
        """Build a suggestion from a JSON record using snake_case or camelCase keys."""
        raw_context = payload.get("context")
        context = None
        if raw_context:
            context = SuggestionContext(
                file_name=str(_pick(raw_context, "file_name", "fileName", default="")),
                line_number=int(_pick(raw_context, "line_number", "lineNumber", default=0)),
                column_number=int(_pick(raw_context, "column_number", "columnNumber", default=0)),
            )
        return cls(
            text=str(payload["text"]),
            confidence=float(payload.get("confidence", 0.0)),
            language=payload.get("language"),
            context=context,
        )


class OrchestratorState(str, Enum):
    """Lifecycle states for the orchestrator."""

    IDLE = "idle"
    RUNNING = "running"


def _pick(payload: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return default
