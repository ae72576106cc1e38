"""Tests for application configuration."""

from pathlib import Path

import pytest

from inspection_score.config import Settings


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.data_dir == "data"
        assert s.score_config_path == Path("data") / "score-config.json"
        assert s.badge_severity_override is False
        assert s.log_json is False

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("INSPECTION_SCORE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("INSPECTION_SCORE_SCORE_CONFIG_FILE", "weights.json")
        monkeypatch.setenv("INSPECTION_SCORE_BADGE_SEVERITY_OVERRIDE", "true")
        s = Settings()
        assert s.score_config_path == tmp_path / "weights.json"
        assert s.badge_severity_override is True

    def test_unprefixed_variables_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATA_DIR", "/elsewhere")
        assert Settings().data_dir == "data"

    def test_explicit_values(self) -> None:
        s = Settings(data_dir="/srv/inspections", debug=True)
        assert s.score_config_path == Path("/srv/inspections/score-config.json")
        assert s.debug is True
