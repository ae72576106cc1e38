"""Finding-code to problem-type taxonomy.

Finding codes come from the image analyzer (e.g. ``POSSIBLE_HUMIDITY_STAIN``).
The problem type is the risk category the problem-type score is weighted by.
"""

from typing import Final

from inspection_score.models import ProblemType

FINDING_TO_PROBLEM: Final[dict[str, ProblemType]] = {
    # Humidity / filtration
    "POSSIBLE_HUMIDITY_STAIN": ProblemType.HUMIDITY_FILTRATION,
    "ACTIVE_LEAK_SUSPECTED": ProblemType.HUMIDITY_FILTRATION,
    "SEAL_FAILURE": ProblemType.HUMIDITY_FILTRATION,
    "HUMIDITY_SIGNS": ProblemType.HUMIDITY_FILTRATION,
    "WATER_STAIN_PATTERN": ProblemType.HUMIDITY_FILTRATION,
    # Pipes
    "POSSIBLE_PIPE_LEAK": ProblemType.PIPE_LEAK_CORROSION,
    "PIPE_CORROSION": ProblemType.PIPE_LEAK_CORROSION,
    # Electrical
    "ELECTRICAL_EXPOSED_WIRING": ProblemType.ELECTRICAL_RISK,
    "ELECTRICAL_OVERHEAT_MARKS": ProblemType.ELECTRICAL_RISK,
    "ELECTRICAL_PANEL_RISK": ProblemType.ELECTRICAL_RISK,
    # Structure
    "STRUCTURAL_CRACK_SUSPECTED": ProblemType.STRUCTURAL_CRACK,
    # Detachment
    "MATERIAL_DETACHMENT": ProblemType.MATERIAL_DETACHMENT,
    # Sanitary
    "MOLD_SUSPECTED": ProblemType.SANITARY_RISK,
    "MOLD_POSSIBLE": ProblemType.SANITARY_RISK,
    # Cosmetic
    "COSMETIC_WEAR": ProblemType.COSMETIC,
    # Photo QA rejections still cost a small penalty
    "NOT_PROPERTY_IMAGE": ProblemType.COSMETIC,
    "NOT_BATHROOM_IMAGE": ProblemType.COSMETIC,
    "PHOTO_TOO_DARK": ProblemType.COSMETIC,
    "PHOTO_TOO_SMALL": ProblemType.COSMETIC,
    "PHOTO_TOO_BLURRY": ProblemType.COSMETIC,
}

# Photo QA codes that send the slot back to the field agent for a new capture
RETAKE_CODES: Final = frozenset(
    {
        "NOT_PROPERTY_IMAGE",
        "PHOTO_TOO_DARK",
        "PHOTO_TOO_SMALL",
        "PHOTO_TOO_BLURRY",
    }
)


def map_finding_to_problem_type(finding_code: str | None) -> ProblemType | None:
    """Look up the problem type for a finding code.

    Matching is verbatim and case-sensitive. Returns None for empty or
    unmapped codes (including the analyzer's ``OK``).
    """
    if not finding_code or not isinstance(finding_code, str):
        return None
    return FINDING_TO_PROBLEM.get(finding_code)
