"""Batch recomputation of stored tier scores.

One sweep reads the full active population once, rescores every member and
writes back only the scores that changed. A failure on one member is recorded
on that member's result and never stops the sweep.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from roster_tiers.domain.errors import RecomputationError, StoreError
from roster_tiers.domain.member import MemberRecord
from roster_tiers.domain.recomputation import RecomputationResult, RecomputationSummary
from roster_tiers.domain.result import Err, Ok, Result
from roster_tiers.exceptions import UnknownRankError
from roster_tiers.repos.protocols import MemberRepo
from roster_tiers.services.tier_score import TierScoreCalculator

logger = logging.getLogger(__name__)


class TierScoreRecomputer:
    def __init__(
        self,
        member_repo: MemberRepo,
        calculator: TierScoreCalculator | None = None,
        *,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._member_repo = member_repo
        self._calculator = calculator or TierScoreCalculator()
        self._max_workers = max_workers

    def recompute_all(self) -> Result[RecomputationSummary, RecomputationError]:
        logger.info("Starting tier score recomputation")
        match self._member_repo.fetch_active_members():
            case Err(e):
                logger.error("Failed to fetch members: %s", e.message)
                return Err(RecomputationError(message=f"Failed to fetch members: {e.message}"))
            case Ok(members):
                pass

        logger.info("Recomputing tier scores for %d members", len(members))
        results = self._process_members(members)
        summary = summarize(results)
        logger.info(
            "Recomputation complete: %d updated, %d unchanged, %d failed, %d total",
            summary.updated_count,
            summary.unchanged_count,
            summary.failed_count,
            summary.total_members,
        )
        return Ok(summary)

    def _process_members(self, members: list[MemberRecord]) -> list[RecomputationResult]:
        if self._max_workers == 1 or len(members) <= 1:
            return [self._process_member(m) for m in members]
        # map() yields in submission order, so results keep the input order.
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            return list(pool.map(self._process_member, members))

    def _process_member(self, member: MemberRecord) -> RecomputationResult:
        old_score = member.tier_score or 0
        try:
            new_score = self._calculator.score_member(member)
        except UnknownRankError as e:
            logger.warning("Skipping %s: %s", member.name, e)
            return _result(member, old_score, old_score, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error scoring member %s", member.id)
            return _result(member, old_score, old_score, error=str(e) or type(e).__name__)

        if new_score == old_score:
            logger.debug("%s: %d (unchanged)", member.name, old_score)
            return _result(member, old_score, new_score)

        match self._write_score(member, new_score):
            case Err(e):
                logger.warning("Failed to update %s: %s", member.name, e.message)
                return _result(member, old_score, new_score, error=e.message)
            case Ok():
                logger.debug("%s: %d -> %d (%+d)", member.name, old_score, new_score, new_score - old_score)
                return _result(member, old_score, new_score, updated=True)

    def _write_score(self, member: MemberRecord, score: int) -> Result[None, StoreError]:
        try:
            return self._member_repo.update_tier_score(member.id, score)
        except Exception as e:
            logger.exception("Unexpected error updating member %s", member.id)
            return Err(StoreError(message=str(e) or type(e).__name__, operation="update_tier_score"))


def _result(
    member: MemberRecord,
    old_score: int,
    new_score: int,
    *,
    updated: bool = False,
    error: str | None = None,
) -> RecomputationResult:
    return RecomputationResult(
        id=member.id,
        name=member.name,
        rank=member.tier,
        wins=member.stats.total_wins,
        losses=member.stats.total_losses,
        old_score=old_score,
        new_score=new_score,
        difference=new_score - old_score,
        updated=updated,
        error=error,
    )


def summarize(results: list[RecomputationResult]) -> RecomputationSummary:
    updated = sum(1 for r in results if r.updated)
    unchanged = sum(1 for r in results if r.error is None and not r.updated)
    return RecomputationSummary(
        total_members=len(results),
        updated_count=updated,
        unchanged_count=unchanged,
        results=tuple(results),
    )
