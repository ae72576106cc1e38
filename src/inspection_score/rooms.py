"""Room groups derived from slot-code prefixes."""

from typing import Final, NamedTuple


class RoomGroup(NamedTuple):
    group_key: str
    group_title: str


OTHER_GROUP: Final = RoomGroup("OTHER", "Otros")

# First matching prefix wins.
_PREFIX_GROUPS: Final[tuple[tuple[str, RoomGroup], ...]] = (
    ("BATHROOM_1_", RoomGroup("BATH_MAIN", "Baño principal")),
    ("BATHROOM_2_", RoomGroup("BATH_SECONDARY", "Baño secundario")),
    ("KITCHEN_", RoomGroup("KITCHEN", "Cocina")),
    ("LAUNDRY_", RoomGroup("LAUNDRY", "Loggia")),
    ("LIVING_", RoomGroup("LIVING", "Living")),
    ("BEDROOM_1_", RoomGroup("BEDROOM_1", "Dormitorio 1")),
    ("BEDROOM_2_", RoomGroup("BEDROOM_2", "Dormitorio 2")),
    ("BEDROOM_3_", RoomGroup("BEDROOM_3", "Dormitorio 3")),
    ("ELECTRICAL_", RoomGroup("ELECTRICAL", "Electricidad")),
    ("ENTRANCE_", RoomGroup("ENTRANCE", "Acceso")),
)

WET_AREA_GROUPS: Final = frozenset({"KITCHEN", "LAUNDRY"})


def slot_group_from_code(slot_code: str | None) -> RoomGroup:
    """Resolve the room group for a slot code, e.g. ``BATHROOM_1_SINK`` -> BATH_MAIN."""
    code = (slot_code or "").upper()
    for prefix, group in _PREFIX_GROUPS:
        if code.startswith(prefix):
            return group
    return OTHER_GROUP


def is_wet_area(group_key: str | None) -> bool:
    """Bathrooms, kitchen and laundry."""
    key = (group_key or "").upper()
    return key.startswith("BATH") or key in WET_AREA_GROUPS


def is_electrical_context(group_key: str | None, slot_code: str | None) -> bool:
    key = (group_key or "").upper()
    code = (slot_code or "").upper()
    return key == "ELECTRICAL" or "ELECTRICAL" in code or "PANEL" in code
