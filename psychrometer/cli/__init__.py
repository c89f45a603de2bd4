"""Command line interface for the psychrometer engine."""

from psychrometer.cli.main import app, main

__all__ = ["app", "main"]
