"""Command line entry point."""

from .main import main

__all__ = ["main"]
