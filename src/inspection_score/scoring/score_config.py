"""Score configuration defaults and normalization.

The configuration is edited by administrators and persisted as JSON, so it can
arrive in any shape. :func:`normalize_score_config` turns whatever it gets into
a complete :class:`ScoreConfig`: every built-in KPI has three numeric penalties
and three messages, the badge thresholds are ordered, and the slot-code
override map always contains the built-in entries.
"""

import copy
import json
import math
from collections.abc import Mapping
from typing import Any, Final

from inspection_score.logging import get_logger
from inspection_score.models import Badge, KpiKey, Points, ScoreConfig
from inspection_score.scoring.kpi import DEFAULT_SLOT_KPI_MAP

logger = get_logger(__name__)

_SEVERITIES: Final = ("low", "medium", "high")


def _kpi_messages(subject: str) -> dict[str, str]:
    return {
        "low": f"Se observan condiciones visibles menores en {subject} del área inspeccionada.",
        "medium": f"Se observan condiciones visibles en {subject} del área inspeccionada.",
        "high": f"Se observan condiciones visibles relevantes en {subject} del área inspeccionada.",
    }


DEFAULT_SCORE_CONFIG: Final[dict[str, Any]] = {
    "kpis": {key.value: {"low": 5, "medium": 15, "high": 30} for key in KpiKey},
    "slotKpiMap": {code: str(kpi) for code, kpi in DEFAULT_SLOT_KPI_MAP.items()},
    "messages": {
        KpiKey.HUMEDAD.value: {
            "low": "Se observan indicios leves de humedad superficial en el área inspeccionada.",
            "medium": "Se observan señales visibles de humedad en el área inspeccionada.",
            "high": "Se observan evidencias visibles de humedad extendida en el área inspeccionada.",
        },
        KpiKey.MUROS_PINTURA.value: {
            "low": "Se observan imperfecciones menores en muros o pintura del área inspeccionada.",
            "medium": "Se observan deterioros visibles en muros o pintura del área inspeccionada.",
            "high": "Se observan deterioros relevantes en muros o pintura del área inspeccionada.",
        },
        KpiKey.PISOS.value: {
            "low": "Se observan marcas o desgaste leve en el piso del área inspeccionada.",
            "medium": "Se observan desgaste o daños visibles en el piso del área inspeccionada.",
            "high": "Se observan daños visibles relevantes en el piso del área inspeccionada.",
        },
        KpiKey.SANITARIOS.value: _kpi_messages("artefactos sanitarios"),
        KpiKey.ELECTRICIDAD.value: _kpi_messages("elementos eléctricos"),
        KpiKey.VENTANAS_CERRAMIENTOS.value: _kpi_messages("ventanas, marcos o cerramientos"),
        KpiKey.PUERTAS_HERRAJES.value: _kpi_messages("puertas o herrajes"),
        KpiKey.MOBILIARIO_FIJO.value: _kpi_messages("mobiliario fijo"),
    },
    "recommendations": {
        Badge.GREEN.value: "Se recomienda mantener seguimiento y control preventivo.",
        Badge.YELLOW.value: "Se recomienda revisar y monitorear el estado observado.",
        Badge.RED.value: "Se recomienda una revisión técnica detallada del hallazgo.",
    },
    "badge": {"yellowFrom": 60, "greenFrom": 85},
}

# Top-level keys rebuilt by normalization, in either spelling
_SECTION_KEYS: Final = frozenset(
    {"kpis", "messages", "recommendations", "badge", "slotKpiMap", "slot_kpi_map"}
)


def _coerce_points(value: Any, default: Points, *, maximum: float | None = None) -> Points:
    """Non-negative finite number, or ``default``. Numeric strings are accepted."""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, int | float):
        return default
    if (isinstance(value, float) and not math.isfinite(value)) or value < 0:
        return default
    if maximum is not None and value > maximum:
        return default
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _coerce_text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _section(raw: Mapping[str, Any], *names: str) -> Mapping[str, Any]:
    for name in names:
        value = raw.get(name)
        if isinstance(value, Mapping):
            return value
    return {}


def _pick(raw: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in raw:
            return raw[name]
    return None


def _normalize_kpis(src: Mapping[str, Any], base: dict[str, Any]) -> dict[str, Any]:
    kpis: dict[str, Any] = {}
    for key, defaults in base.items():
        entry = src.get(key)
        entry = entry if isinstance(entry, Mapping) else {}
        kpis[key] = {sev: _coerce_points(entry.get(sev), defaults[sev]) for sev in _SEVERITIES}
    # Caller-defined KPIs survive, with zero cost for anything unusable
    for key, entry in src.items():
        if key in kpis or not isinstance(key, str) or not isinstance(entry, Mapping):
            continue
        kpis[key] = {sev: _coerce_points(entry.get(sev), 0) for sev in _SEVERITIES}
    return kpis


def _normalize_messages(src: Mapping[str, Any], base: dict[str, Any]) -> dict[str, Any]:
    messages: dict[str, Any] = {}
    for key, defaults in base.items():
        entry = src.get(key)
        entry = entry if isinstance(entry, Mapping) else {}
        messages[key] = {sev: _coerce_text(entry.get(sev), defaults[sev]) for sev in _SEVERITIES}
    for key, entry in src.items():
        if key in messages or not isinstance(key, str) or not isinstance(entry, Mapping):
            continue
        messages[key] = {sev: _coerce_text(entry.get(sev), "") for sev in _SEVERITIES}
    return messages


def _normalize_slot_kpi_map(src: Mapping[str, Any], base: dict[str, str]) -> dict[str, str]:
    merged = {code.upper(): kpi for code, kpi in base.items()}
    for code, kpi in src.items():
        if not isinstance(code, str) or not isinstance(kpi, str):
            continue
        code, kpi = code.strip().upper(), kpi.strip().upper()
        if code and kpi:
            merged[code] = kpi
    return merged


def _normalize_badge(src: Mapping[str, Any], base: dict[str, Any]) -> dict[str, Points]:
    yellow = _coerce_points(_pick(src, "yellowFrom", "yellow_from"), base["yellowFrom"], maximum=100)
    green = _coerce_points(_pick(src, "greenFrom", "green_from"), base["greenFrom"], maximum=100)
    if yellow > green:
        return {"yellowFrom": base["yellowFrom"], "greenFrom": base["greenFrom"]}
    return {"yellowFrom": yellow, "greenFrom": green}


def normalize_score_config(raw: Any) -> ScoreConfig:
    """Build a complete score configuration from arbitrary input.

    Never raises. ``None`` and non-mapping input give the default
    configuration; otherwise top-level keys are merged over the defaults and
    each section is repaired field by field. Normalizing an already
    normalized config returns an equal config.
    """
    base = copy.deepcopy(DEFAULT_SCORE_CONFIG)
    if isinstance(raw, ScoreConfig):
        # Python mode keeps caller extras as they are (tuples, non-str keys)
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return ScoreConfig.model_validate(base)

    extras = {k: v for k, v in raw.items() if isinstance(k, str) and k not in _SECTION_KEYS}
    recommendations = _section(raw, "recommendations")
    normalized = {
        **extras,
        "kpis": _normalize_kpis(_section(raw, "kpis"), base["kpis"]),
        "slotKpiMap": _normalize_slot_kpi_map(
            _section(raw, "slotKpiMap", "slot_kpi_map"), base["slotKpiMap"]
        ),
        "messages": _normalize_messages(_section(raw, "messages"), base["messages"]),
        "recommendations": {
            badge: _coerce_text(recommendations.get(badge), text)
            for badge, text in base["recommendations"].items()
        },
        "badge": _normalize_badge(_section(raw, "badge"), base["badge"]),
    }
    return ScoreConfig.model_validate(normalized)


def default_score_config() -> ScoreConfig:
    return normalize_score_config(None)


def parse_score_config(text: str | bytes | None) -> ScoreConfig:
    """Parse persisted JSON; anything unparseable yields the default config."""
    if not text:
        return default_score_config()
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("score_config_parse_failed", error=str(e))
        return default_score_config()
    return normalize_score_config(raw)
