"""Tests for case summary assembly."""

import json
from collections.abc import Callable

import pytest

from inspection_score.models import Badge, CaptureSlot, ScoreConfig, ScoringStrategy
from inspection_score.summary import build_case_summary, compute_progress

SlotFactory = Callable[..., CaptureSlot]


class TestComputeProgress:
    def test_case_progress(self, analyzed_case: list[CaptureSlot]) -> None:
        progress = compute_progress(analyzed_case)
        assert progress.model_dump() == {
            "uploaded": 3,
            "analyzed": 3,
            "rejected": 0,
            "total": 4,
            "pct": 75,
        }

    def test_empty_case(self) -> None:
        progress = compute_progress([])
        assert (progress.total, progress.pct) == (0, 0)

    def test_rejected_counts_as_uploaded(self, make_slot: SlotFactory) -> None:
        slots = [
            make_slot("LIVING_WALLS", status="REJECTED"),
            make_slot("LIVING_FLOOR", status="UPLOADED"),
            make_slot("LIVING_CEILING", status="NOT_CAPTURABLE"),
        ]
        progress = compute_progress(slots)
        assert (progress.uploaded, progress.analyzed, progress.rejected) == (2, 0, 1)
        assert progress.pct == 67

    def test_pct_rounds_half_up(self, make_slot: SlotFactory) -> None:
        slots = [make_slot("LIVING_WALLS", status="ANALYZED")] + [
            make_slot(f"EXTRA_{n}") for n in range(7)
        ]
        # 1 of 8 is 12.5%
        assert compute_progress(slots).pct == 13


class TestBuildCaseSummary:
    def test_kpi_summary(
        self, analyzed_case: list[CaptureSlot], default_config: ScoreConfig
    ) -> None:
        summary = build_case_summary(analyzed_case, default_config)
        assert summary.score == 55
        assert summary.badge == Badge.RED
        assert summary.scoring.score_version == "SCORING_V2_2_KPI"
        assert summary.recommendation == default_config.recommendations[Badge.RED]
        assert len(summary.findings) == 2

    def test_slots_tagged_with_kpi_and_observation(
        self, analyzed_case: list[CaptureSlot], default_config: ScoreConfig
    ) -> None:
        summary = build_case_summary(analyzed_case, default_config)
        assert [(s.slot.slot_code, s.kpi_key) for s in summary.slots] == [
            ("BATHROOM_1_CEILING", "HUMEDAD"),
            ("ELECTRICAL_PANEL", "ELECTRICIDAD"),
            ("LIVING_FLOOR", "PISOS"),
            ("KITCHEN_WINDOW", "VENTANAS_CERRAMIENTOS"),
        ]
        observations = [s.observation for s in summary.slots]
        assert observations == [
            default_config.messages["HUMEDAD"].medium,
            default_config.messages["ELECTRICIDAD"].high,
            None,
            None,
        ]

    def test_without_config_uses_problem_types(self, analyzed_case: list[CaptureSlot]) -> None:
        summary = build_case_summary(analyzed_case, None)
        assert summary.scoring.score_version == "SCORING_V2_2"
        assert summary.score == 21
        assert summary.slots[0].observation is not None

    def test_custom_texts(self, analyzed_case: list[CaptureSlot]) -> None:
        config = {
            "kpis": {"HUMEDAD": {"medium": 1}},
            "messages": {"HUMEDAD": {"medium": "Mancha en cielo."}},
            "recommendations": {"YELLOW": "Revisar pronto."},
        }
        summary = build_case_summary(analyzed_case, config)
        # 1 + 30 points
        assert summary.score == 69
        assert summary.recommendation == "Revisar pronto."
        assert summary.slots[0].observation == "Mancha en cielo."

    def test_group_multiplier_takes_unmapped_findings(self, make_slot: SlotFactory) -> None:
        slots = [make_slot("LIVING_FLOOR", status="ANALYZED", finding_code="OK", severity="low")]
        summary = build_case_summary(slots, None, strategy=ScoringStrategy.GROUP_MULTIPLIER)
        assert summary.scoring.score_version == "SCORING_V1"
        assert [f.finding_code for f in summary.findings] == ["OK"]
        assert summary.score == 95
        assert summary.badge == Badge.GREEN

    def test_problem_type_drops_unmapped_findings(self, make_slot: SlotFactory) -> None:
        slots = [make_slot("LIVING_FLOOR", status="ANALYZED", finding_code="OK", severity="low")]
        summary = build_case_summary(slots, None)
        assert summary.findings == ()
        assert summary.score == 100

    @pytest.mark.parametrize(("override", "badge"), [(False, Badge.YELLOW), (True, Badge.RED)])
    def test_severity_override(
        self,
        make_slot: SlotFactory,
        default_config: ScoreConfig,
        override: bool,
        badge: Badge,
    ) -> None:
        slots = [make_slot("LIVING_FLOOR", finding_code="COSMETIC_WEAR", severity="high")]
        summary = build_case_summary(slots, default_config, severity_override=override)
        assert summary.badge == badge

    def test_json_payload(
        self, analyzed_case: list[CaptureSlot], default_config: ScoreConfig
    ) -> None:
        payload = build_case_summary(analyzed_case, default_config).to_json_dict()
        assert set(payload) == {
            "slots",
            "findings",
            "progress",
            "scoreVersion",
            "score",
            "badge",
            "totalImpact",
            "byGroup",
            "recommendation",
        }
        first = payload["slots"][0]
        assert first["slotCode"] == "BATHROOM_1_CEILING"
        assert first["groupKey"] == "BATH_MAIN"
        assert first["kpiKey"] == "HUMEDAD"
        assert payload["findings"][0]["problemType"] == "HUMIDITY_FILTRATION"
        assert payload["progress"]["pct"] == 75
        assert (payload["score"], payload["badge"]) == (55, "RED")
        assert [g["groupKey"] for g in payload["byGroup"]] == ["HUMEDAD", "ELECTRICIDAD"]
        json.dumps(payload)
