"""Inkwell: a personal blog backend with session-gated administration."""

__version__ = "0.1.0"
