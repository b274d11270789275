"""Deterministic simulation core for a turn-based battle game."""

__version__ = "0.1.0"
