"""Matcher engine and message rendering."""

from .matcher import FileMatch, MatcherEngine
from .messages import render_message, uses_placeholder

__all__ = ["FileMatch", "MatcherEngine", "render_message", "uses_placeholder"]
