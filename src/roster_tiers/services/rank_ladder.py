from roster_tiers.domain.rank import APEX_RANKS, DIVISIONED_RANKS, LADDER, RANK_ORDINALS, Rank
from roster_tiers.domain.scoring import ScoringConfig, validate_scoring_config


class RankLadder:
    """Maps each rank to its ordinal and its base tier score."""

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self._config = config or ScoringConfig()
        validate_scoring_config(self._config)
        self._base_values = self._build_base_values(self._config)

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def ranks(self) -> tuple[Rank, ...]:
        return LADDER

    def ordinal(self, rank: Rank) -> int:
        return RANK_ORDINALS[rank]

    def base_value(self, rank: Rank) -> int:
        return self._base_values[rank]

    @staticmethod
    def _build_base_values(config: ScoringConfig) -> dict[Rank, int]:
        values = {rank: config.base_offset + RANK_ORDINALS[rank] * config.division_step for rank in DIVISIONED_RANKS}
        top_divisioned = values[DIVISIONED_RANKS[-1]]
        apex = sorted(APEX_RANKS, key=RANK_ORDINALS.__getitem__)
        for i, rank in enumerate(apex):
            values[rank] = top_divisioned + config.apex_gap + i * config.apex_step
        return values
