"""Text normalization and suitability checks applied before speech."""

from __future__ import annotations

import re

MAX_SPEAKABLE_CHARS = 1000

_CODE_FENCE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE = re.compile(r"`[^`]*`")
_WHITESPACE = re.compile(r"\s+")
_UNSPEAKABLE_CHARS = re.compile(r"[^\w\s.,!?;:()-]")


def normalize(raw: str | None) -> str:
    """Strip code and symbols from ``raw`` so a speech engine reads only prose.

    Fenced blocks are removed before inline spans, and both before the
    character filter, so fence delimiters never leave partial artifacts.
    Whitespace is collapsed before symbols are dropped; a symbol between two
    spaces therefore leaves a double space behind.
    """
    if not raw:
        return ""

    text = _CODE_FENCE.sub("", raw)
    text = _INLINE_CODE.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return _UNSPEAKABLE_CHARS.sub("", text)


def is_speakable(text: str | None) -> bool:
    """Return True when ``text`` is non-blank, at most 1000 characters, and has a token."""
    if not text or not text.strip():
        return False

    if len(text) > MAX_SPEAKABLE_CHARS:
        return False

    return len(text.split()) > 0


def preview(text: str, limit: int = 50) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
