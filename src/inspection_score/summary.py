"""Case summary assembly for the report view."""

from collections.abc import Mapping, Sequence
from typing import Any

from inspection_score.logging import get_logger
from inspection_score.models import (
    CaptureProgress,
    CaptureSlot,
    CaseSummary,
    ScoreConfig,
    ScoringStrategy,
    SlotStatus,
    SummarySlot,
)
from inspection_score.scoring.engine import (
    compute_scoring,
    findings_from_slots,
    round_half_up,
    select_strategy,
)
from inspection_score.scoring.kpi import classify_kpi_from_slot
from inspection_score.scoring.score_config import normalize_score_config

logger = get_logger(__name__)

_UPLOADED_STATUSES = frozenset({SlotStatus.UPLOADED, SlotStatus.ANALYZED, SlotStatus.REJECTED})


def compute_progress(slots: Sequence[CaptureSlot]) -> CaptureProgress:
    """Capture progress; a slot counts as uploaded once a photo exists for it."""
    total = len(slots)
    uploaded = sum(1 for s in slots if s.status in _UPLOADED_STATUSES)
    analyzed = sum(1 for s in slots if s.status == SlotStatus.ANALYZED)
    rejected = sum(1 for s in slots if s.status == SlotStatus.REJECTED)
    pct = round_half_up(uploaded / total * 100) if total else 0
    return CaptureProgress(
        uploaded=uploaded,
        analyzed=analyzed,
        rejected=rejected,
        total=total,
        pct=pct,
    )


def _observation(slot: CaptureSlot, kpi: str | None, config: ScoreConfig) -> str | None:
    if not slot.is_scorable or kpi is None:
        return None
    messages = config.messages.get(kpi)
    return messages.for_severity(slot.severity) if messages else None


def build_case_summary(
    slots: Sequence[CaptureSlot],
    config: ScoreConfig | Mapping[str, Any] | None,
    *,
    strategy: ScoringStrategy | None = None,
    severity_override: bool = False,
) -> CaseSummary:
    """Assemble the report payload for a case.

    Args:
        slots: All slots of the case, in checklist order.
        config: Score config. Its shape selects the strategy (see
            :func:`~inspection_score.scoring.engine.select_strategy`) unless
            ``strategy`` is given. Report texts always come from the
            normalized config.
        strategy: Explicit scoring strategy.
        severity_override: Use the severity-override badge rule.
    """
    strategy = strategy or select_strategy(config)
    normalized = normalize_score_config(config)

    tagged = []
    for slot in slots:
        kpi = classify_kpi_from_slot(slot, normalized.slot_kpi_map)
        tagged.append(
            SummarySlot(
                slot=slot,
                kpi_key=str(kpi) if kpi else None,
                observation=_observation(slot, kpi, normalized),
            )
        )

    findings = findings_from_slots(
        slots, mapped_only=strategy != ScoringStrategy.GROUP_MULTIPLIER
    )
    scoring = compute_scoring(
        findings,
        slots,
        config,
        strategy=strategy,
        severity_override=severity_override,
    )
    logger.info(
        "case_scored",
        strategy=strategy.value,
        score_version=scoring.score_version,
        score=scoring.score,
        badge=scoring.badge.value,
        slots=len(slots),
        findings=len(findings),
    )

    return CaseSummary(
        slots=tuple(tagged),
        findings=tuple(findings),
        progress=compute_progress(slots),
        scoring=scoring,
        recommendation=normalized.recommendations[scoring.badge],
    )
