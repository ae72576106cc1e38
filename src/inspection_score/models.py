"""Pydantic models for inspection slots, findings, score configuration and results.

Python attributes are snake_case; the serialized form uses the camelCase names
stored in report payloads (``slotCode``, ``scoreIfOnlyGroup``...).
"""

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.functional_validators import BeforeValidator

from inspection_score.rooms import slot_group_from_code

# Penalty points are kept as given: 30 stays 30, 7.5 stays 7.5
Points = int | float


def _coerce_severity(v: Any) -> Any:
    """Lower-case severity text; blank means "no severity"."""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip().lower()
        return v or None
    return v


def _coerce_upper(v: Any) -> Any:
    return v.strip().upper() if isinstance(v, str) else v


def _coerce_blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


SeverityText = Annotated[str | None, BeforeValidator(_coerce_severity)]
OptionalCode = Annotated[str | None, BeforeValidator(_coerce_blank_to_none)]


class Severity(StrEnum):
    """Finding severity reported by the image analyzer."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SlotStatus(StrEnum):
    """Capture status of a checklist slot."""

    PENDING = "PENDING"
    UPLOADED = "UPLOADED"
    ANALYZED = "ANALYZED"
    REJECTED = "REJECTED"
    NOT_CAPTURABLE = "NOT_CAPTURABLE"


class KpiKey(StrEnum):
    """Thematic inspection categories used by the KPI-weighted score."""

    HUMEDAD = "HUMEDAD"
    MUROS_PINTURA = "MUROS_PINTURA"
    PISOS = "PISOS"
    SANITARIOS = "SANITARIOS"
    ELECTRICIDAD = "ELECTRICIDAD"
    VENTANAS_CERRAMIENTOS = "VENTANAS_CERRAMIENTOS"
    PUERTAS_HERRAJES = "PUERTAS_HERRAJES"
    MOBILIARIO_FIJO = "MOBILIARIO_FIJO"


class ProblemType(StrEnum):
    """Canonical risk categories used by the problem-type score."""

    HUMIDITY_FILTRATION = "HUMIDITY_FILTRATION"
    PIPE_LEAK_CORROSION = "PIPE_LEAK_CORROSION"
    ELECTRICAL_RISK = "ELECTRICAL_RISK"
    STRUCTURAL_CRACK = "STRUCTURAL_CRACK"
    MATERIAL_DETACHMENT = "MATERIAL_DETACHMENT"
    SANITARY_RISK = "SANITARY_RISK"
    COSMETIC = "COSMETIC"


class Badge(StrEnum):
    """Traffic-light summary of a score."""

    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"


class ScoringStrategy(StrEnum):
    """Selectable scoring algorithm generations."""

    KPI = "KPI"
    PROBLEM_TYPE = "PROBLEM_TYPE"
    GROUP_MULTIPLIER = "GROUP_MULTIPLIER"


def kpi_title(key: str) -> str:
    """``MUROS_PINTURA`` -> ``Muros_pintura``; works for caller-defined KPI keys too."""
    if not key:
        return key
    return key[0] + key[1:].lower()


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Slots and findings
# ---------------------------------------------------------------------------


class PlannedSlot(_Record):
    """A checklist slot generated when a case is created, before any capture."""

    slot_code: str
    title: str
    instructions: str = ""
    required: bool = True
    kpi_key: str | None = None


class CaptureSlot(_Record):
    """One checklist item of a case, with the analyzer output once captured."""

    id: str
    slot_code: Annotated[str, BeforeValidator(_coerce_upper)]
    title: str = ""
    instructions: str = ""
    status: Annotated[SlotStatus, BeforeValidator(_coerce_upper)] = SlotStatus.PENDING
    finding_code: OptionalCode = None
    severity: SeverityText = None
    confidence: float | None = Field(default=None, ge=0, le=1)
    message: str | None = None
    group_key: OptionalCode = None
    group_title: OptionalCode = None
    kpi_key: str | None = None

    @model_validator(mode="before")
    @classmethod
    def derive_group(cls, data: Any) -> Any:
        """Fill groupKey/groupTitle from the slot-code prefix when absent."""
        if not isinstance(data, dict):
            return data
        code = data.get("slot_code", data.get("slotCode"))
        if not isinstance(code, str):
            return data
        group = slot_group_from_code(code)
        data = dict(data)
        for snake, camel, value in (
            ("group_key", "groupKey", group.group_key),
            ("group_title", "groupTitle", group.group_title),
        ):
            given = (data.get(snake), data.get(camel))
            if any(isinstance(v, str) and v.strip() for v in given):
                continue
            data.pop(snake, None)
            data[camel] = value
        return data

    @property
    def is_scorable(self) -> bool:
        """Has both a finding code and a severity."""
        return bool(self.finding_code and self.severity)


class Finding(_Record):
    """A normalized analyzer finding attached to a slot."""

    slot_id: str
    severity: SeverityText = None
    finding_code: str
    confidence: float = 0.0
    message: str | None = None
    problem_type: ProblemType | None = None


# ---------------------------------------------------------------------------
# Score configuration
# ---------------------------------------------------------------------------


class KpiPenalties(_Record):
    """Penalty points per severity for one KPI."""

    low: Points
    medium: Points
    high: Points

    def for_severity(self, severity: str | None) -> Points:
        """Penalty for a severity string; unknown severities cost nothing."""
        if severity in (Severity.LOW, Severity.MEDIUM, Severity.HIGH):
            points: Points = getattr(self, str(severity))
            return points
        return 0


class KpiMessages(_Record):
    """Report text per severity for one KPI."""

    low: str
    medium: str
    high: str

    def for_severity(self, severity: str | None) -> str | None:
        if severity in (Severity.LOW, Severity.MEDIUM, Severity.HIGH):
            text: str = getattr(self, str(severity))
            return text
        return None


class BadgeThresholds(_Record):
    """Score < yellow_from is RED, score < green_from is YELLOW, else GREEN."""

    yellow_from: Points = 60
    green_from: Points = 85


class ScoreConfig(_Record):
    """User-editable weighting table.

    Build it with :func:`inspection_score.scoring.score_config.normalize_score_config`
    rather than directly, so every default KPI is guaranteed to be present.
    Unknown top-level keys are kept so persisted configs round-trip.
    """

    model_config = ConfigDict(extra="allow")

    kpis: dict[str, KpiPenalties]
    slot_kpi_map: dict[str, str]
    messages: dict[str, KpiMessages]
    recommendations: dict[Badge, str]
    badge: BadgeThresholds

    def to_json_dict(self) -> dict[str, Any]:
        """Serializable form used for persistence and API payloads."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class GroupBreakdown(_Record):
    """Accumulated impact of one KPI or room group."""

    group_key: str
    title: str
    impact: Points
    score_if_only_group: Points
    badge: Badge | None = None


class ScoringResult(_Record):
    score_version: str
    score: int = Field(ge=0, le=100)
    badge: Badge
    total_impact: Points
    by_group: tuple[GroupBreakdown, ...] = ()

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CaptureProgress(_Record):
    uploaded: int
    analyzed: int
    rejected: int
    total: int
    pct: int


class SummarySlot(_Record):
    """A slot as shown in the case report."""

    slot: CaptureSlot
    kpi_key: str | None = None
    observation: str | None = None


class CaseSummary(_Record):
    """Report payload for one case."""

    slots: tuple[SummarySlot, ...]
    findings: tuple[Finding, ...]
    progress: CaptureProgress
    scoring: ScoringResult
    recommendation: str

    @property
    def score(self) -> int:
        return self.scoring.score

    @property
    def badge(self) -> Badge:
        return self.scoring.badge

    def to_json_dict(self) -> dict[str, Any]:
        """Flat payload: slot fields inline, ``score``/``badge``/``byGroup`` at the top."""
        scoring = self.scoring.to_json_dict()
        return {
            "slots": [
                {
                    **s.slot.model_dump(mode="json", by_alias=True),
                    "kpiKey": s.kpi_key,
                    "observation": s.observation,
                }
                for s in self.slots
            ],
            "findings": [f.model_dump(mode="json", by_alias=True) for f in self.findings],
            "progress": self.progress.model_dump(mode="json", by_alias=True),
            "scoreVersion": scoring["scoreVersion"],
            "score": scoring["score"],
            "badge": scoring["badge"],
            "totalImpact": scoring["totalImpact"],
            "byGroup": scoring["byGroup"],
            "recommendation": self.recommendation,
        }
