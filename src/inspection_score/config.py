"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process settings loaded from environment variables.

    These only locate and tune the collaborators around the scoring engine.
    The weighting table itself is a separate persisted value, see
    :mod:`inspection_score.storage.score_config`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INSPECTION_SCORE_",
        extra="ignore",
    )

    # Score config persistence
    data_dir: str = Field(
        default="data",
        description="Directory holding persisted application data",
    )
    score_config_file: str = Field(
        default="score-config.json",
        description="File name of the persisted score configuration, relative to data_dir",
    )

    # Report format
    badge_severity_override: bool = Field(
        default=False,
        description="Force RED on any high finding and at most YELLOW on any medium finding",
    )

    # Logging
    log_json: bool = Field(default=False, description="Emit JSON log lines instead of console output")
    debug: bool = Field(default=False, description="Enable debug-level logging")

    @property
    def score_config_path(self) -> Path:
        """Full path of the persisted score configuration."""
        return Path(self.data_dir) / self.score_config_file
