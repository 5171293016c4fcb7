"""Nearby map widget: a static map of nearby Wikipedia articles, served over HTTP."""

__version__ = "1.0.0"
