"""Shared pytest fixtures."""

import logging
import os
from collections.abc import Callable
from typing import Any

import pytest
import structlog
from hypothesis import HealthCheck, settings

from inspection_score.config import Settings
from inspection_score.models import CaptureSlot, ScoreConfig
from inspection_score.scoring.score_config import default_score_config

# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=10)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging() -> None:
    """Warnings and above only, written to whatever stdout is current."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


@pytest.fixture
def default_config() -> ScoreConfig:
    return default_score_config()


@pytest.fixture
def make_slot() -> Callable[..., CaptureSlot]:
    """Factory for capture slots; ``id`` defaults to the slot code."""

    def _make(slot_code: str, **overrides: Any) -> CaptureSlot:
        data: dict[str, Any] = {"id": overrides.pop("id", slot_code), "slot_code": slot_code}
        data.update(overrides)
        return CaptureSlot(**data)

    return _make


@pytest.fixture
def analyzed_case(make_slot: Callable[..., CaptureSlot]) -> list[CaptureSlot]:
    """A small case: two findings, one clean photo, one pending slot."""
    return [
        make_slot(
            "BATHROOM_1_CEILING",
            title="Baño principal – Cielo",
            status="ANALYZED",
            finding_code="POSSIBLE_HUMIDITY_STAIN",
            severity="medium",
            confidence=0.7,
            message="Mancha de humedad en cielo.",
        ),
        make_slot(
            "ELECTRICAL_PANEL",
            title="Tablero eléctrico",
            status="ANALYZED",
            finding_code="ELECTRICAL_PANEL_RISK",
            severity="high",
            confidence=0.8,
        ),
        make_slot(
            "LIVING_FLOOR",
            title="Living – Piso",
            status="ANALYZED",
            finding_code=None,
        ),
        make_slot("KITCHEN_WINDOW", title="Cocina – Ventana"),
    ]
