"""Pure scoring strategies for inspection cases.

Three generations of the score coexist in stored reports:

- ``SCORING_V2_2_KPI``: penalties per KPI and severity from the score config.
- ``SCORING_V2_2``: problem-type base points, severity factors and two
  contextual surcharges, aggregated by room group.
- ``SCORING_V1``: severity points times a room-group multiplier, with the
  severity-override badge.

Each strategy is a standalone function; :func:`compute_scoring` picks one from
the shape of the config (or an explicit strategy). All of them start from 100,
subtract impacts and clamp to [0, 100]. None of them raise for unknown codes,
KPIs, severities or slots; those simply contribute nothing.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Final

from inspection_score.logging import get_logger
from inspection_score.models import (
    BadgeThresholds,
    CaptureSlot,
    Finding,
    GroupBreakdown,
    Points,
    ProblemType,
    ScoreConfig,
    ScoringResult,
    ScoringStrategy,
    Severity,
    kpi_title,
)
from inspection_score.rooms import OTHER_GROUP, is_electrical_context, is_wet_area
from inspection_score.scoring.badge import badge_from_score
from inspection_score.scoring.kpi import classify_kpi_from_slot
from inspection_score.scoring.score_config import normalize_score_config
from inspection_score.scoring.taxonomy import map_finding_to_problem_type

logger = get_logger(__name__)

SCORING_V1: Final = "SCORING_V1"
SCORING_V2_2: Final = "SCORING_V2_2"
SCORING_V2_2_KPI: Final = "SCORING_V2_2_KPI"

SCORE_VERSIONS: Final[dict[ScoringStrategy, str]] = {
    ScoringStrategy.KPI: SCORING_V2_2_KPI,
    ScoringStrategy.PROBLEM_TYPE: SCORING_V2_2,
    ScoringStrategy.GROUP_MULTIPLIER: SCORING_V1,
}

MAX_SCORE: Final = 100

# ── Problem-type strategy ──────────────────────────────────────────────────────

SEVERITY_FACTOR: Final[dict[str, float]] = {
    Severity.LOW: 1.0,
    Severity.MEDIUM: 1.3,
    Severity.HIGH: 1.5,
}

PROBLEM_BASE: Final[dict[ProblemType, int]] = {
    ProblemType.HUMIDITY_FILTRATION: 20,
    ProblemType.PIPE_LEAK_CORROSION: 25,
    ProblemType.ELECTRICAL_RISK: 35,
    ProblemType.STRUCTURAL_CRACK: 40,
    ProblemType.MATERIAL_DETACHMENT: 30,
    ProblemType.SANITARY_RISK: 25,
    ProblemType.COSMETIC: 5,
}

CONTEXT_SURCHARGE: Final = 15

# ── Group-multiplier strategy ──────────────────────────────────────────────────

SEVERITY_POINTS: Final[dict[str, int]] = {
    Severity.LOW: 5,
    Severity.MEDIUM: 15,
    Severity.HIGH: 35,
}

GROUP_MULTIPLIER: Final[dict[str, float]] = {
    "BATH_MAIN": 1.5,
    "BATH_SECONDARY": 1.5,
    "KITCHEN": 1.3,
    "LAUNDRY": 1.3,
    "ELECTRICAL": 1.7,
    "STRUCTURE": 1.4,
    "EXTERIOR": 1.2,
    "ATTIC": 1.2,
    "OTHER": 1.0,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (67.5 -> 68, 32.5 -> 33).

    Python's ``round`` rounds half to even, which would turn 32.5 into 32.
    """
    return math.floor(value + 0.5)


def clamp_score(value: Points) -> Points:
    return max(0, min(MAX_SCORE, value))


def _final_score(total_impact: Points) -> int:
    return round_half_up(clamp_score(MAX_SCORE - total_impact))


@dataclass
class _GroupAccumulator:
    """Running impact of one KPI or room group."""

    group_key: str
    title: str
    impact: Points = 0
    has_high: bool = False
    has_medium: bool = False

    def add(self, impact: Points, severity: str | None) -> None:
        self.impact += impact
        self.has_high = self.has_high or severity == Severity.HIGH
        self.has_medium = self.has_medium or severity == Severity.MEDIUM


@dataclass
class _Tally:
    """Per-group accumulators in first-seen order plus the running total."""

    groups: dict[str, _GroupAccumulator] = field(default_factory=dict)
    total: Points = 0

    def add(self, group_key: str, title: str, impact: Points, severity: str | None) -> None:
        group = self.groups.get(group_key)
        if group is None:
            group = self.groups[group_key] = _GroupAccumulator(group_key, title)
        group.add(impact, severity)
        self.total += impact

    @property
    def has_high(self) -> bool:
        return any(g.has_high for g in self.groups.values())

    @property
    def has_medium(self) -> bool:
        return any(g.has_medium for g in self.groups.values())

    def rows(self) -> tuple[GroupBreakdown, ...]:
        return tuple(
            GroupBreakdown(
                group_key=g.group_key,
                title=g.title,
                impact=g.impact,
                score_if_only_group=clamp_score(MAX_SCORE - g.impact),
            )
            for g in self.groups.values()
        )


def _thresholds_from(config: ScoreConfig | Mapping[str, Any] | None) -> BadgeThresholds:
    if isinstance(config, ScoreConfig):
        return config.badge
    if config is None:
        return BadgeThresholds()
    return normalize_score_config(config).badge


def findings_from_slots(
    slots: Iterable[CaptureSlot], *, mapped_only: bool = True
) -> list[Finding]:
    """Build the findings list for a case from its analyzed slots.

    Args:
        slots: Case slots.
        mapped_only: Drop findings whose code has no problem type (what the
            problem-type strategy expects). The group-multiplier strategy
            predates the taxonomy and takes every finding.
    """
    findings = []
    for slot in slots:
        if not slot.is_scorable:
            continue
        problem_type = map_finding_to_problem_type(slot.finding_code)
        if mapped_only and problem_type is None:
            continue
        findings.append(
            Finding(
                slot_id=slot.id,
                severity=slot.severity,
                finding_code=slot.finding_code,
                confidence=slot.confidence or 0.0,
                message=slot.message,
                problem_type=problem_type,
            )
        )
    return findings


# ── Strategy A: KPI-weighted ───────────────────────────────────────────────────


def compute_kpi_scoring(
    slots: Iterable[CaptureSlot],
    config: ScoreConfig | Mapping[str, Any] | None,
    *,
    severity_override: bool = False,
) -> ScoringResult:
    """Score a case by KPI penalties.

    Each slot with a finding code and severity is classified into a KPI; its
    penalty is ``config.kpis[kpi][severity]``. Slots without a KPI, or whose
    KPI has no penalty table, contribute nothing.
    """
    cfg = normalize_score_config(config)
    tally = _Tally()

    for slot in slots:
        if not slot.is_scorable:
            continue
        kpi = classify_kpi_from_slot(slot, cfg.slot_kpi_map)
        penalties = cfg.kpis.get(kpi) if kpi else None
        if kpi is None or penalties is None:
            logger.debug("slot_not_scored", slot_code=slot.slot_code, kpi=kpi)
            continue
        key = str(kpi)
        tally.add(key, kpi_title(key), penalties.for_severity(slot.severity), slot.severity)

    score = _final_score(tally.total)
    return ScoringResult(
        score_version=SCORING_V2_2_KPI,
        score=score,
        badge=badge_from_score(
            score,
            cfg,
            has_high=tally.has_high,
            has_medium=tally.has_medium,
            severity_override=severity_override,
        ),
        total_impact=tally.total,
        by_group=tally.rows(),
    )


# ── Strategy B: problem-type/group-weighted ────────────────────────────────────


def context_surcharge(problem_type: ProblemType | None, slot: CaptureSlot) -> int:
    """Extra points for a risk made worse by where it was found.

    Only two combinations are penalized: electrical risk in a wet area and
    humidity in an electrical context.
    """
    if problem_type == ProblemType.ELECTRICAL_RISK and is_wet_area(slot.group_key):
        return CONTEXT_SURCHARGE
    if problem_type == ProblemType.HUMIDITY_FILTRATION and is_electrical_context(
        slot.group_key, slot.slot_code
    ):
        return CONTEXT_SURCHARGE
    return 0


def finding_impact(finding: Finding, slot: CaptureSlot) -> int:
    """``round_half_up(base * severity factor + surcharge)``; 0 without a base."""
    base = PROBLEM_BASE.get(finding.problem_type, 0) if finding.problem_type else 0
    if not base:
        return 0
    factor = SEVERITY_FACTOR.get(finding.severity or "", 1.0)
    return round_half_up(base * factor + context_surcharge(finding.problem_type, slot))


def compute_problem_type_scoring(
    findings: Iterable[Finding],
    slots: Sequence[CaptureSlot],
    config: ScoreConfig | Mapping[str, Any] | None = None,
    *,
    severity_override: bool = False,
) -> ScoringResult:
    """Score a case by problem type, aggregated per room group.

    Findings pointing at a slot that is not in ``slots`` are skipped, as are
    findings without a problem type (or with a zero base).
    """
    slot_by_id = {s.id: s for s in slots}
    tally = _Tally()

    for finding in findings:
        slot = slot_by_id.get(finding.slot_id)
        if slot is None:
            logger.debug("finding_skipped", reason="unknown_slot", slot_id=finding.slot_id)
            continue
        impact = finding_impact(finding, slot)
        if not impact:
            continue
        tally.add(
            (slot.group_key or OTHER_GROUP.group_key).upper(),
            slot.group_title or OTHER_GROUP.group_title,
            impact,
            finding.severity,
        )

    score = _final_score(tally.total)
    return ScoringResult(
        score_version=SCORING_V2_2,
        score=score,
        badge=badge_from_score(
            score,
            _thresholds_from(config),
            has_high=tally.has_high,
            has_medium=tally.has_medium,
            severity_override=severity_override,
        ),
        total_impact=tally.total,
        by_group=tally.rows(),
    )


# ── Group-multiplier strategy (oldest reports) ─────────────────────────────────


def compute_group_multiplier_scoring(
    findings: Iterable[Finding],
    slots: Sequence[CaptureSlot],
    config: ScoreConfig | Mapping[str, Any] | None = None,
) -> ScoringResult:
    """Score a case the way the first report format did.

    Severity points times the room-group multiplier. Findings on unknown slots
    are counted under OTHER. The badge always applies the severity override,
    for the case and for every group row. Rows are sorted by title.
    """
    slot_by_id = {s.id: s for s in slots}
    thresholds = _thresholds_from(config)
    tally = _Tally()

    for finding in findings:
        slot = slot_by_id.get(finding.slot_id)
        group_key = (slot.group_key if slot else None) or OTHER_GROUP.group_key
        group_title = (slot.group_title if slot else None) or OTHER_GROUP.group_title
        base = SEVERITY_POINTS.get(finding.severity or "", 0)
        impact = round_half_up(base * GROUP_MULTIPLIER.get(group_key, 1.0))
        tally.add(group_key, group_title, impact, finding.severity)

    score = _final_score(tally.total)
    rows = sorted(
        (
            row.model_copy(
                update={
                    "badge": badge_from_score(
                        _final_score(group.impact),
                        thresholds,
                        has_high=group.has_high,
                        has_medium=group.has_medium,
                        severity_override=True,
                    )
                }
            )
            for row, group in zip(tally.rows(), tally.groups.values(), strict=True)
        ),
        key=lambda r: r.title,
    )
    return ScoringResult(
        score_version=SCORING_V1,
        score=score,
        badge=badge_from_score(
            score,
            thresholds,
            has_high=tally.has_high,
            has_medium=tally.has_medium,
            severity_override=True,
        ),
        total_impact=tally.total,
        by_group=tuple(rows),
    )


# ── Dispatch ───────────────────────────────────────────────────────────────────


def select_strategy(config: ScoreConfig | Mapping[str, Any] | None) -> ScoringStrategy:
    """KPI scoring whenever a KPI-shaped config is supplied, problem-type otherwise.

    Any ``kpis`` container counts, even an empty one: normalization fills in
    the default penalties. Scalars count only when truthy.
    """
    if isinstance(config, ScoreConfig):
        return ScoringStrategy.KPI
    if isinstance(config, Mapping):
        kpis = config.get("kpis")
        if isinstance(kpis, Mapping | list | tuple) or (kpis is not None and bool(kpis)):
            return ScoringStrategy.KPI
    return ScoringStrategy.PROBLEM_TYPE


def compute_scoring(
    findings: Iterable[Finding],
    slots: Sequence[CaptureSlot],
    config: ScoreConfig | Mapping[str, Any] | None = None,
    *,
    strategy: ScoringStrategy | None = None,
    severity_override: bool = False,
) -> ScoringResult:
    """Score a case with the selected strategy.

    Args:
        findings: Normalized findings (used by the problem-type and
            group-multiplier strategies).
        slots: All slots of the case.
        config: Score config, raw or normalized. Its shape selects the
            strategy unless ``strategy`` is given.
        strategy: Explicit strategy, overriding the config shape.
        severity_override: Apply the severity-override badge rule (always on
            for the group-multiplier strategy).
    """
    strategy = strategy or select_strategy(config)
    if strategy == ScoringStrategy.KPI:
        return compute_kpi_scoring(slots, config, severity_override=severity_override)
    if strategy == ScoringStrategy.GROUP_MULTIPLIER:
        return compute_group_multiplier_scoring(findings, slots, config)
    return compute_problem_type_scoring(
        findings, slots, config, severity_override=severity_override
    )
