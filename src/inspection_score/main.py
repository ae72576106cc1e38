"""Command-line entry point: score a case snapshot, manage the score config, print a checklist."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from inspection_score.checklist import CaseLayout, build_photo_plan
from inspection_score.config import Settings
from inspection_score.logging import configure_logging, get_logger
from inspection_score.models import CaptureSlot, ScoringStrategy
from inspection_score.storage import ScoreConfigStore
from inspection_score.summary import build_case_summary

logger = get_logger(__name__)

_SLOTS_ADAPTER = TypeAdapter(list[CaptureSlot])


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def load_slots(path: Path) -> list[CaptureSlot]:
    """Read a slot snapshot: a JSON list of slots or ``{"slots": [...]}``."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("slots", [])
    return _SLOTS_ADAPTER.validate_python(data)


def run_score(args: argparse.Namespace, settings: Settings) -> int:
    try:
        slots = load_slots(args.slots)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("slot_snapshot_invalid", path=str(args.slots), error=str(e))
        return 1

    config = None if args.no_config else ScoreConfigStore(settings.score_config_path).load()
    summary = build_case_summary(
        slots,
        config,
        strategy=ScoringStrategy(args.strategy) if args.strategy else None,
        severity_override=args.severity_override or settings.badge_severity_override,
    )
    _print_json(summary.to_json_dict())
    return 0


def run_config(args: argparse.Namespace, settings: Settings) -> int:
    store = ScoreConfigStore(settings.score_config_path)
    if args.config_command == "show":
        _print_json({"ok": True, "config": store.load().to_json_dict()})
        return 0

    try:
        incoming = _read_json(args.file)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("score_config_file_invalid", path=str(args.file), error=str(e))
        return 1
    try:
        config = store.save(incoming)
    except OSError as e:
        logger.error("score_config_save_failed", path=str(store.path), error=str(e))
        return 1
    _print_json({"ok": True, "config": config.to_json_dict()})
    return 0


def run_plan(args: argparse.Namespace, settings: Settings) -> int:
    try:
        layout = CaseLayout(
            bathrooms_count=args.bathrooms,
            bedrooms_count=args.bedrooms,
            has_laundry=args.laundry,
        )
    except ValidationError as e:
        logger.error("case_layout_invalid", error=str(e))
        return 1
    config = ScoreConfigStore(settings.score_config_path).load()
    plan = build_photo_plan(layout, config.slot_kpi_map)
    logger.info("photo_plan_built", slots=len(plan))
    _print_json([slot.model_dump(mode="json", by_alias=True) for slot in plan])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inspection-score",
        description="Condition scoring for property inspection cases",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Score a case from a JSON slot snapshot")
    score.add_argument("slots", type=Path, help="JSON file with the case slots")
    score.add_argument(
        "--strategy",
        choices=[s.value for s in ScoringStrategy],
        default=None,
        help="Force a scoring strategy instead of selecting it from the config",
    )
    score.add_argument(
        "--severity-override",
        action="store_true",
        help="Force RED on any high finding and at most YELLOW on any medium finding",
    )
    score.add_argument(
        "--no-config",
        action="store_true",
        help="Ignore the persisted score config (selects problem-type scoring)",
    )

    config = sub.add_parser("config", help="Show or replace the persisted score config")
    config_sub = config.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show", help="Print the normalized score config")
    config_set = config_sub.add_parser("set", help="Normalize and persist a score config")
    config_set.add_argument("file", type=Path, help="JSON file with the new config")

    plan = sub.add_parser("plan", help="Print the photo checklist for a property layout")
    plan.add_argument("--bathrooms", type=int, default=1, help="Number of bathrooms")
    plan.add_argument("--bedrooms", type=int, default=0, help="Number of bedrooms")
    plan.add_argument("--laundry", action="store_true", help="Property has a laundry area")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error: Failed to load settings. {e}", file=sys.stderr)
        return 1

    configure_logging(
        json_output=settings.log_json,
        level=logging.DEBUG if args.debug or settings.debug else logging.INFO,
    )

    handlers = {"score": run_score, "config": run_config, "plan": run_plan}
    return handlers[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
