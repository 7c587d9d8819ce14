"""Suggestion feeds and the observer-based suggestion source."""

from .http_feed import HttpSuggestionFeed
from .interfaces import SuggestionFeed
from .memory import InMemorySuggestionFeed
from .source import SuggestionObserver, SuggestionSource

__all__ = [
    "HttpSuggestionFeed",
    "InMemorySuggestionFeed",
    "SuggestionFeed",
    "SuggestionObserver",
    "SuggestionSource",
]
