"""Runtime configuration for TTS Copilot."""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import InvalidParameterError
from .models import AppConfig, SuggestionSourceConfig, VoiceConfig


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="TTS_COPILOT_", env_file=".env", extra="ignore")

    app_name: str = "tts-copilot"
    log_level: str = "INFO"
    voice_pitch: float = 1.0
    voice_speed: float = 1.0
    voice_volume: float = 1.0
    voice_name: str | None = Field(default=None, description="System voice name or id; unset uses the default voice.")
    real_time_enabled: bool = True
    suggestions_enabled: bool = False
    suggestions_api_url: str | None = Field(default=None, description="Base URL of the suggestion feed service.")
    suggestions_api_key: str | None = None
    suggestions_poll_interval_seconds: float = 5.0
    suggestions_coalesce_duplicates: bool = False

    def to_app_config(self) -> AppConfig:
        return AppConfig(
            voice=VoiceConfig(
                pitch=self.voice_pitch,
                speed=self.voice_speed,
                volume=self.voice_volume,
                voice=self.voice_name,
            ),
            real_time_enabled=self.real_time_enabled,
            suggestion_source=SuggestionSourceConfig(
                api_url=self.suggestions_api_url,
                api_key=self.suggestions_api_key,
                enabled=self.suggestions_enabled,
                poll_interval_seconds=self.suggestions_poll_interval_seconds,
                coalesce_duplicates=self.suggestions_coalesce_duplicates,
            ),
        )


settings = Settings()


class ConfigStore:
    """Sole owner of the application configuration.

    Every stored value is a frozen dataclass, so snapshots handed out by
    :meth:`get_config` can never alias mutable state. Updates build a new value
    and only swap it in once it has been validated.
    """

    def __init__(self, initial: AppConfig | None = None) -> None:
        self._config = initial or AppConfig()

    def get_config(self) -> AppConfig:
        return self._config

    def update_voice(self, **partial: Any) -> VoiceConfig:
        """Merge ``partial`` over the current voice config, rejecting the whole update on any bad value."""
        _reject_unknown(VoiceConfig, partial)
        voice = replace(self._config.voice, **partial)
        self._config = replace(self._config, voice=voice)
        return voice

    def update_suggestion_source(self, **partial: Any) -> SuggestionSourceConfig:
        _reject_unknown(SuggestionSourceConfig, partial)
        source = replace(self._config.suggestion_source, **partial)
        self._config = replace(self._config, suggestion_source=source)
        return source

    def set_real_time_enabled(self, enabled: bool) -> None:
        self._config = replace(self._config, real_time_enabled=enabled)


def _reject_unknown(model: type, partial: dict[str, Any]) -> None:
    known = {item.name for item in fields(model)}
    for key in partial:
        if key not in known:
            raise InvalidParameterError(key)
