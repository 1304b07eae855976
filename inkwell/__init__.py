"""Inkwell blog engine: comment moderation, approval and threaded replies."""

__version__ = "0.1.0"
