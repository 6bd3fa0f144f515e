import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from config import ConfigurationSet

from roster_tiers.config import load_db_path, load_max_workers, load_scoring_config
from roster_tiers.db.connection import create_connection
from roster_tiers.domain.errors import ConfigError
from roster_tiers.domain.result import Err, Ok, Result
from roster_tiers.domain.scoring import ScoringConfig
from roster_tiers.exceptions import ConfigurationError
from roster_tiers.repos.member_repo import SqliteMemberRepo
from roster_tiers.services.recomputation import TierScoreRecomputer
from roster_tiers.services.tier_score import TierScoreCalculator


@dataclass(frozen=True)
class RecomputeSettings:
    db_path: Path
    scoring: ScoringConfig
    max_workers: int


def load_recompute_settings(cfg: ConfigurationSet) -> Result[RecomputeSettings, ConfigError]:
    try:
        return Ok(
            RecomputeSettings(
                db_path=load_db_path(cfg),
                scoring=load_scoring_config(cfg),
                max_workers=load_max_workers(cfg),
            )
        )
    except ConfigurationError as e:
        return Err(ConfigError(message=str(e)))


def build_calculator(cfg: ConfigurationSet) -> Result[TierScoreCalculator, ConfigError]:
    try:
        return Ok(TierScoreCalculator(load_scoring_config(cfg)))
    except ConfigurationError as e:
        return Err(ConfigError(message=str(e)))


@dataclass(frozen=True)
class RecomputeContext:
    conn: sqlite3.Connection
    member_repo: SqliteMemberRepo
    recomputer: TierScoreRecomputer


@contextmanager
def build_recompute_context(settings: RecomputeSettings) -> Iterator[RecomputeContext]:
    """Composition-root context manager: opens DB, wires repo + recomputer, yields context, closes DB."""
    if str(settings.db_path) != ":memory:":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = create_connection(settings.db_path, check_same_thread=settings.max_workers == 1)
    try:
        member_repo = SqliteMemberRepo(conn)
        recomputer = TierScoreRecomputer(
            member_repo,
            TierScoreCalculator(settings.scoring),
            max_workers=settings.max_workers,
        )
        yield RecomputeContext(conn=conn, member_repo=member_repo, recomputer=recomputer)
    finally:
        conn.close()
