"""Suggestion feed that polls a JSON-over-HTTP suggestion service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import httpx

from tts_copilot.models import Suggestion, SuggestionSourceConfig


class HttpSuggestionFeed:
    """Polls ``{api_url}/suggestions`` with an ``httpx.AsyncClient``.

    The handshake is a ``GET {api_url}/health`` that must answer with a 2xx
    status. The suggestions endpoint may return either a JSON list of
    suggestion records or an object with a ``suggestions`` list.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._logger = logger or logging.getLogger("tts_copilot.suggestions.http")
        self._client: httpx.AsyncClient | None = None
        self._poll_interval_seconds = 5.0

    async def connect(self, config: SuggestionSourceConfig) -> None:
        if not config.api_url:
            raise ValueError("Suggestion feed api_url is not configured")

        await self.close()

        headers = {"Accept": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"

        client = httpx.AsyncClient(
            base_url=config.api_url,
            headers=headers,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        try:
            response = await client.get("/health")
            response.raise_for_status()
        except Exception:
            await client.aclose()
            raise

        self._client = client
        self._poll_interval_seconds = config.poll_interval_seconds
        self._logger.info("suggestion_feed_connected", extra={"api_url": config.api_url})

    async def fetch(self) -> list[Suggestion]:
        if self._client is None:
            return []

        response = await self._client.get("/suggestions")
        response.raise_for_status()

        suggestions: list[Suggestion] = []
        for record in _records(response.json()):
            try:
                suggestions.append(Suggestion.from_payload(record))
            except (KeyError, TypeError, ValueError) as exc:
                self._logger.warning(
                    "suggestion_record_skipped",
                    extra={"error": f"{type(exc).__name__}: {exc}", "record": record},
                )
        return suggestions

    async def stream(self) -> AsyncIterator[Suggestion]:
        while True:
            try:
                suggestions = await self.fetch()
            except (httpx.HTTPError, ValueError, TypeError) as exc:
                self._logger.warning("suggestion_poll_failed", extra={"error": f"{type(exc).__name__}: {exc}"})
                suggestions = []

            for suggestion in suggestions:
                yield suggestion
            await asyncio.sleep(self._poll_interval_seconds)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()


def _records(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get("suggestions", [])
    if not isinstance(payload, list):
        raise ValueError(f"Unexpected suggestions payload: {type(payload).__name__}")
    return [record for record in payload if isinstance(record, dict)]
