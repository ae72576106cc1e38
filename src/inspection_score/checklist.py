"""Photo checklist generation for new inspection cases.

The plan depends only on the property layout. Every planned slot is tagged
with its KPI up front, using the same classifier the score uses later.
"""

from collections.abc import Mapping, Sequence
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from inspection_score.models import CaptureSlot, PlannedSlot, SlotStatus
from inspection_score.scoring.kpi import classify_kpi_from_slot
from inspection_score.scoring.taxonomy import RETAKE_CODES

MAX_PLANNED_BATHROOMS: Final = 2
MAX_PLANNED_BEDROOMS: Final = 3


class CaseLayout(BaseModel):
    """Rooms declared when the case is created."""

    model_config = ConfigDict(frozen=True)

    bathrooms_count: int = Field(default=1, ge=0)
    bedrooms_count: int = Field(default=0, ge=0)
    has_laundry: bool = False


def build_instruction(where: str, what: str) -> str:
    return "\n".join(
        [
            "Indicaciones:",
            f"Dónde sacar la foto: {where}",
            f"Qué buscar: {what}",
        ]
    )


def _slot(slot_code: str, title: str, where: str, what: str) -> PlannedSlot:
    return PlannedSlot(
        slot_code=slot_code,
        title=title,
        instructions=build_instruction(where, what),
    )


def _bathroom(n: int) -> list[PlannedSlot]:
    label = "Baño principal" if n == 1 else "Baño secundario"
    prefix = f"BATHROOM_{n}"
    return [
        _slot(
            f"{prefix}_SHOWER",
            f"{label} – Interior tina / ducha",
            "Zona de ducha/tina y muro cercano.",
            "Sellos, juntas, humedad o manchas alrededor de la tina/ducha.",
        ),
        _slot(
            f"{prefix}_SINK",
            f"{label} – Lavamanos",
            "Lavamanos y cubierta, vista frontal.",
            "Grifería, sellos, manchas en cubierta.",
        ),
        _slot(
            f"{prefix}_SINK_PIPES",
            f"{label} – Cañerías lavamanos",
            "Bajo lavamanos mostrando sifón y conexiones.",
            "Fugas, óxido, humedad en sifón y conexiones.",
        ),
        _slot(
            f"{prefix}_WC",
            f"{label} – WC",
            "WC y base, vista frontal.",
            "Base, sellos y manchas alrededor del WC.",
        ),
        _slot(
            f"{prefix}_WC_PIPES",
            f"{label} – Cañerías WC",
            "Conexión de agua y base del WC.",
            "Conexión de agua y posibles fugas.",
        ),
        _slot(
            f"{prefix}_CEILING",
            f"{label} – Cielo",
            "Cielo del baño con buena iluminación.",
            "Humedad, moho o manchas en cielo.",
        ),
        _slot(
            f"{prefix}_OUTLETS",
            f"{label} – Enchufes",
            "Enchufes y entorno cercano.",
            "Estado de enchufes/placas y fijación.",
        ),
    ]


def _kitchen() -> list[PlannedSlot]:
    return [
        _slot(
            "KITCHEN_UNDER_SINK",
            "Cocina – Bajo lavaplatos",
            "Bajo lavaplatos mostrando conexiones y sifón.",
            "Fugas, humedad y estado de conexiones.",
        ),
        _slot(
            "KITCHEN_SINK_WALL",
            "Cocina – Muro lavaplatos",
            "Muro/encuentro lavaplatos.",
            "Manchas, sellos o humedad en muro.",
        ),
        _slot(
            "KITCHEN_OUTLETS",
            "Cocina – Enchufes",
            "Enchufes y entorno.",
            "Estado de enchufes/placas.",
        ),
        _slot(
            "KITCHEN_WINDOW",
            "Cocina – Ventana",
            "Ventana completa, marcos y sello.",
            "Sellos, marcos y humedad en ventana.",
        ),
        _slot(
            "KITCHEN_CABINETS",
            "Cocina – Muebles",
            "Muebles altos y bajos con puertas abiertas.",
            "Bisagras, cubiertas y estado de los muebles.",
        ),
    ]


def _living() -> list[PlannedSlot]:
    return [
        _slot(
            "LIVING_WALLS",
            "Living – Muros",
            "Muros del living con pintura visible.",
            "Pintura, fisuras o manchas.",
        ),
        _slot(
            "LIVING_CEILING",
            "Living – Cielo",
            "Cielo del living y terminaciones.",
            "Terminaciones y humedad en cielo.",
        ),
        _slot(
            "LIVING_FLOOR",
            "Living – Piso",
            "Piso del living, terminaciones visibles.",
            "Estado de piso/terminación.",
        ),
        _slot(
            "LIVING_WINDOWS",
            "Living – Ventanas",
            "Ventanas completas, marcos y sello.",
            "Sellos, marcos o filtraciones.",
        ),
        _slot(
            "LIVING_SWITCHES",
            "Living – Interruptores",
            "Interruptores y placas.",
            "Estado de interruptores/placas.",
        ),
        _slot(
            "ENTRANCE_DOOR",
            "Acceso – Puerta principal",
            "Puerta de acceso completa, por dentro.",
            "Cerradura, bisagras y ajuste de la puerta.",
        ),
    ]


def _bedroom(n: int) -> list[PlannedSlot]:
    label = f"Dormitorio {n}"
    prefix = f"BEDROOM_{n}"
    return [
        _slot(
            f"{prefix}_WALLS",
            f"{label} – Muros",
            "Muros del dormitorio con pintura visible.",
            "Pintura, fisuras o manchas.",
        ),
        _slot(
            f"{prefix}_FLOOR",
            f"{label} – Piso",
            "Piso del dormitorio, terminaciones visibles.",
            "Estado de piso/terminación.",
        ),
        _slot(
            f"{prefix}_WINDOWS",
            f"{label} – Ventanas",
            "Ventanas completas, marcos y sello.",
            "Sellos, marcos o filtraciones.",
        ),
        _slot(
            f"{prefix}_CLOSET",
            f"{label} – Closet",
            "Closet con puertas abiertas.",
            "Puertas, rieles y repisas del closet.",
        ),
    ]


def build_photo_plan(
    layout: CaseLayout,
    slot_kpi_map: Mapping[str, str] | None = None,
) -> list[PlannedSlot]:
    """Build the ordered capture checklist for a case.

    At least one and at most two bathrooms, and at most three bedrooms, are
    planned regardless of the declared counts.

    Args:
        layout: Declared rooms.
        slot_kpi_map: Slot-code KPI overrides (normally the score config's),
            applied when pre-tagging each slot.
    """
    plan: list[PlannedSlot] = []
    bathrooms = min(max(1, layout.bathrooms_count), MAX_PLANNED_BATHROOMS)
    for n in range(1, bathrooms + 1):
        plan.extend(_bathroom(n))
    plan.extend(_kitchen())
    plan.extend(_living())
    for n in range(1, min(layout.bedrooms_count, MAX_PLANNED_BEDROOMS) + 1):
        plan.extend(_bedroom(n))
    if layout.has_laundry:
        plan.append(
            _slot(
                "LAUNDRY_WALLS_FLOOR",
                "Loggia – Muros y piso",
                "Muros y piso de la loggia.",
                "Humedad, fisuras o daños.",
            )
        )
    plan.append(
        _slot(
            "ELECTRICAL_PANEL",
            "Tablero eléctrico",
            "Tablero frontal, sin manipular.",
            "Estado visual del tablero.",
        )
    )

    tagged = []
    for slot in plan:
        kpi = classify_kpi_from_slot(slot, slot_kpi_map)
        tagged.append(slot.model_copy(update={"kpi_key": str(kpi) if kpi else None}))
    return tagged


def status_after_analysis(finding_code: str | None) -> SlotStatus:
    """REJECTED when the photo must be retaken, ANALYZED otherwise."""
    if finding_code and finding_code.upper() in RETAKE_CODES:
        return SlotStatus.REJECTED
    return SlotStatus.ANALYZED


def pick_next_slot(slots: Sequence[CaptureSlot]) -> CaptureSlot | None:
    """Next slot to capture: the first pending one, then the first rejected one."""
    for status in (SlotStatus.PENDING, SlotStatus.REJECTED):
        for slot in slots:
            if slot.status == status:
                return slot
    return None
