"""KPI classification of capture slots.

A slot is assigned to a KPI either through the explicit slot-code override
map or, failing that, by keywords found in its code, title and analyzer
message. The same rule runs when the checklist is built (pre-tagging) and when
a case is scored (with live analyzer text).
"""

from collections.abc import Mapping
from typing import Final, Protocol

from inspection_score.models import KpiKey


class ClassifiableSlot(Protocol):
    slot_code: str
    title: str


def _bathroom_slots(n: int) -> dict[str, KpiKey]:
    return {
        f"BATHROOM_{n}_SHOWER": KpiKey.SANITARIOS,
        f"BATHROOM_{n}_SINK": KpiKey.SANITARIOS,
        f"BATHROOM_{n}_SINK_PIPES": KpiKey.SANITARIOS,
        f"BATHROOM_{n}_WC": KpiKey.SANITARIOS,
        f"BATHROOM_{n}_WC_PIPES": KpiKey.SANITARIOS,
        f"BATHROOM_{n}_CEILING": KpiKey.HUMEDAD,
        f"BATHROOM_{n}_OUTLETS": KpiKey.ELECTRICIDAD,
    }


def _bedroom_slots(n: int) -> dict[str, KpiKey]:
    return {
        f"BEDROOM_{n}_WALLS": KpiKey.MUROS_PINTURA,
        f"BEDROOM_{n}_FLOOR": KpiKey.PISOS,
        f"BEDROOM_{n}_WINDOWS": KpiKey.VENTANAS_CERRAMIENTOS,
        f"BEDROOM_{n}_CLOSET": KpiKey.MOBILIARIO_FIJO,
    }


# Built-in slot-code overrides for every slot the checklist builder plans.
DEFAULT_SLOT_KPI_MAP: Final[dict[str, str]] = {
    **_bathroom_slots(1),
    **_bathroom_slots(2),
    "KITCHEN_UNDER_SINK": KpiKey.SANITARIOS,
    "KITCHEN_SINK_WALL": KpiKey.HUMEDAD,
    "KITCHEN_OUTLETS": KpiKey.ELECTRICIDAD,
    "KITCHEN_WINDOW": KpiKey.VENTANAS_CERRAMIENTOS,
    "KITCHEN_CABINETS": KpiKey.MOBILIARIO_FIJO,
    "LIVING_WALLS": KpiKey.MUROS_PINTURA,
    "LIVING_CEILING": KpiKey.MUROS_PINTURA,
    "LIVING_FLOOR": KpiKey.PISOS,
    "LIVING_WINDOWS": KpiKey.VENTANAS_CERRAMIENTOS,
    "LIVING_SWITCHES": KpiKey.ELECTRICIDAD,
    "ENTRANCE_DOOR": KpiKey.PUERTAS_HERRAJES,
    **_bedroom_slots(1),
    **_bedroom_slots(2),
    **_bedroom_slots(3),
    "LAUNDRY_WALLS_FLOOR": KpiKey.HUMEDAD,
    "ELECTRICAL_PANEL": KpiKey.ELECTRICIDAD,
}

# Checked in order, first group with a hit wins.
KPI_KEYWORDS: Final[tuple[tuple[KpiKey, tuple[str, ...]], ...]] = (
    (KpiKey.HUMEDAD, ("humedad", "moho", "filtr", "mold", "humid", "damp", "water")),
    (KpiKey.MUROS_PINTURA, ("pintura", "muro", "cielo", "paint", "wall", "ceiling")),
    (KpiKey.PISOS, ("piso", "floor", "suelo", "parquet", "baldosa")),
    (
        KpiKey.SANITARIOS,
        (
            "wc",
            "lavamanos",
            "lavaplatos",
            "grifer",
            "ducha",
            "tina",
            "sanitario",
            "sifon",
            "sifón",
            "cañer",
            "baño",
            "shower",
            "sink",
            "toilet",
        ),
    ),
    (
        KpiKey.ELECTRICIDAD,
        ("electric", "eléctric", "tablero", "enchufe", "interruptor", "outlet", "switch"),
    ),
    (KpiKey.VENTANAS_CERRAMIENTOS, ("ventana", "vidrio", "marco", "cerramiento", "window")),
    (
        KpiKey.PUERTAS_HERRAJES,
        ("puerta", "bisagra", "cerradura", "manilla", "herraje", "door", "hinge"),
    ),
    (
        KpiKey.MOBILIARIO_FIJO,
        ("mueble", "mobiliario", "closet", "clóset", "cabinet", "estante", "furniture"),
    ),
)


def as_kpi_key(value: str) -> str:
    """Return the KpiKey member for built-in keys, the plain string otherwise."""
    try:
        return KpiKey(value)
    except ValueError:
        return value


def _override_for(code: str, slot_kpi_map: Mapping[str, str] | None) -> str | None:
    if slot_kpi_map:
        hit = slot_kpi_map.get(code)
        if isinstance(hit, str) and hit:
            return hit
    return DEFAULT_SLOT_KPI_MAP.get(code)


def classify_kpi_from_text(text: str) -> KpiKey | None:
    """Keyword fallback over already lower-cased slot text."""
    for kpi, keywords in KPI_KEYWORDS:
        if any(word in text for word in keywords):
            return kpi
    return None


def classify_kpi_from_slot(
    slot: ClassifiableSlot,
    slot_kpi_map: Mapping[str, str] | None = None,
) -> str | None:
    """Assign a slot to a KPI key.

    Args:
        slot: Any slot record with ``slot_code`` and ``title`` (and optionally
            ``message``).
        slot_kpi_map: Slot-code overrides with upper-case keys, as produced by
            score config normalization. Built-in overrides apply underneath.

    Returns:
        The KPI key, or None when neither an override nor a keyword matches.
    """
    code = str(getattr(slot, "slot_code", "") or "")
    override = _override_for(code.upper(), slot_kpi_map)
    if override:
        return as_kpi_key(override)

    title = str(getattr(slot, "title", "") or "")
    message = str(getattr(slot, "message", "") or "")
    return classify_kpi_from_text(" ".join((code, title, message)).lower())
