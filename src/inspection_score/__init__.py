"""Condition scoring for property inspection cases."""

__version__ = "0.3.0"
