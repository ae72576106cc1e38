"""Tests for score config persistence."""

import json
from pathlib import Path

import pytest

from inspection_score.models import ScoreConfig
from inspection_score.storage import ScoreConfigStore


@pytest.fixture
def store(tmp_path: Path) -> ScoreConfigStore:
    return ScoreConfigStore(tmp_path / "data" / "score-config.json")


class TestLoad:
    def test_missing_file_gives_default(
        self, store: ScoreConfigStore, default_config: ScoreConfig
    ) -> None:
        assert store.load() == default_config
        assert not store.path.exists()

    def test_malformed_file_gives_default(
        self, store: ScoreConfigStore, default_config: ScoreConfig
    ) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{oops", encoding="utf-8")
        assert store.load() == default_config

    def test_non_utf8_file_gives_default(
        self, store: ScoreConfigStore, default_config: ScoreConfig
    ) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b'{"badge": "\xff"}')
        assert store.load() == default_config

    def test_directory_in_place_of_file_gives_default(
        self, store: ScoreConfigStore, default_config: ScoreConfig
    ) -> None:
        store.path.mkdir(parents=True)
        assert store.load() == default_config

    def test_partial_file_is_normalized(self, store: ScoreConfigStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"kpis": {"PISOS": {"high": 45}}}), encoding="utf-8")
        config = store.load()
        assert config.kpis["PISOS"].high == 45
        assert config.kpis["HUMEDAD"].high == 30


class TestSave:
    def test_round_trip(self, store: ScoreConfigStore) -> None:
        saved = store.save({"badge": {"yellowFrom": 50, "greenFrom": 80}})
        assert saved.badge.yellow_from == 50
        assert store.load() == saved

    def test_creates_parent_directories(self, store: ScoreConfigStore) -> None:
        store.save({})
        assert store.path.is_file()

    def test_writes_normalized_camel_case_json(self, store: ScoreConfigStore) -> None:
        store.save({"kpis": {"HUMEDAD": {"low": "bad"}}, "version": 2})
        on_disk = json.loads(store.path.read_text(encoding="utf-8"))
        assert on_disk["kpis"]["HUMEDAD"] == {"low": 5, "medium": 15, "high": 30}
        assert on_disk["badge"] == {"yellowFrom": 60, "greenFrom": 85}
        assert on_disk["version"] == 2
        assert "slotKpiMap" in on_disk

    def test_keeps_accents_readable(self, store: ScoreConfigStore) -> None:
        store.save({"recommendations": {"RED": "Revisión técnica"}})
        assert "Revisión técnica" in store.path.read_text(encoding="utf-8")

    def test_unwraps_envelope(self, store: ScoreConfigStore) -> None:
        saved = store.save({"config": {"kpis": {"PISOS": {"low": 2}}}})
        assert saved.kpis["PISOS"].low == 2

    def test_overwrites_previous(self, store: ScoreConfigStore) -> None:
        store.save({"kpis": {"PISOS": {"low": 2}}})
        store.save({"kpis": {"PISOS": {"low": 3}}})
        assert store.load().kpis["PISOS"].low == 3

    def test_write_error_propagates(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(OSError):
            ScoreConfigStore(blocker / "score-config.json").save({})
