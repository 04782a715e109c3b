"""Résonance: AI-generated conversation topics and debate partner."""

__version__ = "0.1.0"
