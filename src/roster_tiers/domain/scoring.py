import math
from dataclasses import dataclass

from roster_tiers.exceptions import ScoringConfigError

MAIN_POSITION_WEIGHT = 1.0
MAX_SUB_POSITION_WEIGHT = 0.8
MIN_SUB_POSITION_WEIGHT = 0.5
SUB_POSITION_WEIGHT_DECAY = 0.1
NEUTRAL_WIN_RATE = 0.5


@dataclass(frozen=True)
class ScoringConfig:
    """Constants shared by the rank ladder and the tier score calculator.

    Divisioned ranks are spaced ``division_step`` apart starting at
    ``base_offset``. The first apex rank sits ``apex_gap`` above the top
    divisioned rank and further apex ranks are ``apex_step`` apart.
    """

    division_step: int = 100
    base_offset: int = 400
    apex_gap: int = 300
    apex_step: int = 200
    adjustment_scale: float = 50.0

    @property
    def max_adjustment_magnitude(self) -> float:
        """Largest absolute weighted win-rate deviation, before scaling."""
        deviation = 1.0 - NEUTRAL_WIN_RATE
        return deviation * MAIN_POSITION_WEIGHT + deviation * MAX_SUB_POSITION_WEIGHT

    @property
    def max_adjustment(self) -> float:
        return self.adjustment_scale * self.max_adjustment_magnitude


def validate_scoring_config(config: ScoringConfig) -> None:
    """Check that no performance adjustment can reorder two ranks.

    The full swing between the worst and the best possible record must fit
    strictly inside one division step, and apex spacing may not be tighter
    than division spacing.
    """
    if config.division_step <= 0:
        raise ScoringConfigError(f"division_step must be > 0, got {config.division_step}")
    if not math.isfinite(config.adjustment_scale):
        raise ScoringConfigError(f"adjustment_scale must be finite, got {config.adjustment_scale}")
    if config.adjustment_scale < 0:
        raise ScoringConfigError(f"adjustment_scale must be >= 0, got {config.adjustment_scale}")
    if 2 * config.max_adjustment >= config.division_step:
        raise ScoringConfigError(
            f"adjustment_scale {config.adjustment_scale} allows a swing of "
            f"{2 * config.max_adjustment:.2f}, which must be < division_step {config.division_step}"
        )
    if config.apex_gap < config.division_step:
        raise ScoringConfigError(
            f"apex_gap must be >= division_step ({config.division_step}), got {config.apex_gap}"
        )
    if config.apex_step < config.division_step:
        raise ScoringConfigError(
            f"apex_step must be >= division_step ({config.division_step}), got {config.apex_step}"
        )
