from dataclasses import dataclass
from enum import StrEnum

from roster_tiers.domain.position import Position


class MemberStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    KICKED = "kicked"


@dataclass(frozen=True)
class PerformanceStats:
    """Aggregate match counters for one member.

    Counters are expected to be non-negative with wins never exceeding games,
    but scoring tolerates violations of either.
    """

    total_wins: int = 0
    total_losses: int = 0
    main_position_games: int = 0
    main_position_wins: int = 0
    sub_position_games: int = 0
    sub_position_wins: int = 0
    sub_position_count: int = 0

    @property
    def total_games(self) -> int:
        return self.total_wins + self.total_losses


@dataclass(frozen=True)
class MemberRecord:
    id: str
    name: str
    tier: str  # raw stored label, parsed with rank_from_str
    stats: PerformanceStats
    tier_score: int | None = None
    team_id: str = ""
    status: MemberStatus = MemberStatus.ACTIVE
    main_position: Position | None = None
    sub_positions: tuple[Position, ...] = ()
