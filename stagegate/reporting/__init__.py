"""Terminal rendering of cycle results."""

from .console import Reporter

__all__ = ["Reporter"]
