"""Scoring and classification engine for inspection cases."""

import importlib
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from inspection_score.scoring.badge import badge_from_score  # noqa: F401
    from inspection_score.scoring.engine import (  # noqa: F401
        compute_group_multiplier_scoring,
        compute_kpi_scoring,
        compute_problem_type_scoring,
        compute_scoring,
        findings_from_slots,
        select_strategy,
    )
    from inspection_score.scoring.kpi import classify_kpi_from_slot  # noqa: F401
    from inspection_score.scoring.score_config import (  # noqa: F401
        DEFAULT_SCORE_CONFIG,
        normalize_score_config,
        parse_score_config,
    )
    from inspection_score.scoring.taxonomy import map_finding_to_problem_type  # noqa: F401

__all__ = [
    "DEFAULT_SCORE_CONFIG",
    "badge_from_score",
    "classify_kpi_from_slot",
    "compute_group_multiplier_scoring",
    "compute_kpi_scoring",
    "compute_problem_type_scoring",
    "compute_scoring",
    "findings_from_slots",
    "map_finding_to_problem_type",
    "normalize_score_config",
    "parse_score_config",
    "select_strategy",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "DEFAULT_SCORE_CONFIG": (".score_config", "DEFAULT_SCORE_CONFIG"),
    "badge_from_score": (".badge", "badge_from_score"),
    "classify_kpi_from_slot": (".kpi", "classify_kpi_from_slot"),
    "compute_group_multiplier_scoring": (".engine", "compute_group_multiplier_scoring"),
    "compute_kpi_scoring": (".engine", "compute_kpi_scoring"),
    "compute_problem_type_scoring": (".engine", "compute_problem_type_scoring"),
    "compute_scoring": (".engine", "compute_scoring"),
    "findings_from_slots": (".engine", "findings_from_slots"),
    "map_finding_to_problem_type": (".taxonomy", "map_finding_to_problem_type"),
    "normalize_score_config": (".score_config", "normalize_score_config"),
    "parse_score_config": (".score_config", "parse_score_config"),
    "select_strategy": (".engine", "select_strategy"),
}


def __getattr__(name: str) -> Any:
    if name in _LAZY_IMPORTS:
        module_path, attr = _LAZY_IMPORTS[name]
        mod = importlib.import_module(module_path, __name__)
        val = getattr(mod, attr)
        globals()[name] = val  # Cache so __getattr__ is only called once
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
