"""Tier score calculation.

A tier score is the rank's base value plus a bounded performance
adjustment::

    adjustment = scale * ((main_rate - 0.5) * 1.0 + (sub_rate - 0.5) * sub_weight)

where ``sub_weight`` shrinks from 0.8 toward 0.5 as a member declares more
secondary positions. Rates default to 0.5 when no games were played, so a
member without history scores exactly the base value.
"""

import math
from dataclasses import dataclass

from roster_tiers.domain.member import MemberRecord, PerformanceStats
from roster_tiers.domain.rank import Rank, rank_from_str
from roster_tiers.domain.scoring import (
    MAIN_POSITION_WEIGHT,
    MAX_SUB_POSITION_WEIGHT,
    MIN_SUB_POSITION_WEIGHT,
    NEUTRAL_WIN_RATE,
    SUB_POSITION_WEIGHT_DECAY,
    ScoringConfig,
)
from roster_tiers.services.rank_ladder import RankLadder


@dataclass(frozen=True)
class TierScoreBreakdown:
    rank: Rank
    base: int
    overall_win_rate: float
    main_win_rate: float
    sub_win_rate: float
    sub_weight: float
    adjustment: float
    score: int


def win_rate(wins: int, games: int) -> float:
    """Fraction of games won, clamped to [0, 1]; neutral when there are no games."""
    games = max(games, 0)
    if games == 0:
        return NEUTRAL_WIN_RATE
    return min(max(max(wins, 0) / games, 0.0), 1.0)


def sub_position_weight(sub_position_count: int) -> float:
    count = max(sub_position_count, 1)
    weight = MAX_SUB_POSITION_WEIGHT - SUB_POSITION_WEIGHT_DECAY * (count - 1)
    # Rounded so that 0.8 - 0.1 gives 0.7 rather than 0.7000000000000001.
    return max(MIN_SUB_POSITION_WEIGHT, round(weight, 10))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class TierScoreCalculator:
    """Stateless tier score function bound to one scoring configuration."""

    def __init__(self, config: ScoringConfig | None = None, *, ladder: RankLadder | None = None) -> None:
        if ladder is None:
            ladder = RankLadder(config)
        elif config is not None and config != ladder.config:
            raise ValueError("config does not match the ladder's scoring config")
        self._ladder = ladder

    @property
    def ladder(self) -> RankLadder:
        return self._ladder

    @property
    def config(self) -> ScoringConfig:
        return self._ladder.config

    def breakdown(self, rank: Rank, stats: PerformanceStats) -> TierScoreBreakdown:
        base = self._ladder.base_value(rank)
        overall = win_rate(stats.total_wins, max(stats.total_wins, 0) + max(stats.total_losses, 0))
        main = win_rate(stats.main_position_wins, stats.main_position_games)
        sub = win_rate(stats.sub_position_wins, stats.sub_position_games)
        sub_weight = sub_position_weight(stats.sub_position_count)
        adjustment = self.config.adjustment_scale * (
            (main - NEUTRAL_WIN_RATE) * MAIN_POSITION_WEIGHT + (sub - NEUTRAL_WIN_RATE) * sub_weight
        )
        return TierScoreBreakdown(
            rank=rank,
            base=base,
            overall_win_rate=overall,
            main_win_rate=main,
            sub_win_rate=sub,
            sub_weight=sub_weight,
            adjustment=adjustment,
            score=base + round_half_up(adjustment),
        )

    def score(self, rank: Rank, stats: PerformanceStats | None = None) -> int:
        if stats is None:
            return self._ladder.base_value(rank)
        return self.breakdown(rank, stats).score

    def score_member(self, member: MemberRecord) -> int:
        """Score a stored member. Raises UnknownRankError for unrecognised tiers."""
        return self.score(rank_from_str(member.tier), member.stats)


_default_calculator: TierScoreCalculator | None = None


def calculate_tier_score(rank: Rank, stats: PerformanceStats | None = None) -> int:
    """Score with the default scoring configuration."""
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = TierScoreCalculator()
    return _default_calculator.score(rank, stats)
