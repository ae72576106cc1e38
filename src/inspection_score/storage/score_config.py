"""JSON file persistence for the score configuration."""

import json
from pathlib import Path
from typing import Any

from inspection_score.logging import get_logger
from inspection_score.models import ScoreConfig
from inspection_score.scoring.score_config import (
    default_score_config,
    normalize_score_config,
    parse_score_config,
)

logger = get_logger(__name__)


class ScoreConfigStore:
    """Load and save the score configuration as a JSON document.

    The store holds no config in memory: every ``load`` reads the file, and
    callers pass the returned value into the scoring functions.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> ScoreConfig:
        """Read the persisted config, falling back to defaults.

        A missing file, an unreadable file or malformed JSON all yield the
        default configuration.
        """
        if not self.path.exists():
            logger.info("score_config_default", reason="missing", path=str(self.path))
            return default_score_config()
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("score_config_unreadable", path=str(self.path), error=str(e))
            return default_score_config()
        return parse_score_config(text)

    def save(self, raw: Any) -> ScoreConfig:
        """Normalize ``raw`` and write it, returning what was stored.

        Accepts either the config itself or an ``{"config": {...}}`` envelope.
        Write errors propagate.
        """
        if isinstance(raw, dict) and isinstance(raw.get("config"), dict):
            raw = raw["config"]
        config = normalize_score_config(raw)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(config.to_json_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info("score_config_saved", path=str(self.path), kpis=len(config.kpis))
        return config
