"""Console logging sink for TTS Copilot."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    """Route ``tts_copilot`` loggers to stderr through rich at ``level``."""
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger("tts_copilot")
    root.handlers = [handler]
    root.setLevel(level.upper())
    root.propagate = False
