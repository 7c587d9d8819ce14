"""Logging setup for the command-line entrypoint."""

from .logging import configure_logging

__all__ = ["configure_logging"]
