from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RecomputationResult:
    id: str
    name: str
    rank: str
    wins: int
    losses: int
    old_score: int
    new_score: int
    difference: int
    updated: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "rank": self.rank,
            "wins": self.wins,
            "losses": self.losses,
            "oldScore": self.old_score,
            "newScore": self.new_score,
            "difference": self.difference,
            "updated": self.updated,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class RecomputationSummary:
    total_members: int
    updated_count: int
    unchanged_count: int
    results: tuple[RecomputationResult, ...]

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.error is not None)

    @property
    def failures(self) -> list[RecomputationResult]:
        return [r for r in self.results if r.error is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMembers": self.total_members,
            "updatedCount": self.updated_count,
            "unchangedCount": self.unchanged_count,
            "results": [r.to_dict() for r in self.results],
        }
