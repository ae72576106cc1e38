"""Persistence of the administrator-edited score configuration."""

from inspection_score.storage.score_config import ScoreConfigStore

__all__ = ["ScoreConfigStore"]
