"""Output renderers."""

from .console import render_spans

__all__ = ["render_spans"]
