"""Badge resolution from a numeric score."""

from inspection_score.models import Badge, BadgeThresholds, ScoreConfig

DEFAULT_THRESHOLDS = BadgeThresholds()


def _thresholds(config: ScoreConfig | BadgeThresholds | None) -> BadgeThresholds:
    if isinstance(config, ScoreConfig):
        return config.badge
    if isinstance(config, BadgeThresholds):
        return config
    return DEFAULT_THRESHOLDS


def badge_from_score(
    score: float,
    config: ScoreConfig | BadgeThresholds | None = None,
    *,
    has_high: bool = False,
    has_medium: bool = False,
    severity_override: bool = False,
) -> Badge:
    """Map a score to RED/YELLOW/GREEN.

    Args:
        score: Score in [0, 100].
        config: Score config or thresholds; defaults to 60/85.
        has_high: A contributing finding was high severity.
        has_medium: A contributing finding was medium severity.
        severity_override: Oldest report format. A high finding forces RED and
            a medium finding caps the badge at YELLOW, whatever the score.
    """
    thresholds = _thresholds(config)
    if score < thresholds.yellow_from or (severity_override and has_high):
        return Badge.RED
    if score < thresholds.green_from or (severity_override and has_medium):
        return Badge.YELLOW
    return Badge.GREEN
