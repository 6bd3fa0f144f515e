import sqlite3
import threading

from roster_tiers.domain.errors import StoreError
from roster_tiers.domain.member import MemberRecord, MemberStatus, PerformanceStats
from roster_tiers.domain.position import Position
from roster_tiers.domain.result import Err, Ok, Result


class SqliteMemberRepo:
    """Team member store backed by the ``team_member`` table.

    Writes are serialised on an internal lock so one repo can be shared by a
    parallel recomputation sweep (open the connection with
    ``check_same_thread=False`` in that case).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.Lock()

    def upsert(self, member: MemberRecord) -> str:
        with self._lock:
            self._conn.execute(
                """INSERT INTO team_member (id, team_id, nickname, tier, tier_score, status,
                                            main_position, sub_positions, total_wins, total_losses,
                                            main_position_games, main_position_wins,
                                            sub_position_games, sub_position_wins)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       team_id=excluded.team_id, nickname=excluded.nickname, tier=excluded.tier,
                       tier_score=excluded.tier_score, status=excluded.status,
                       main_position=excluded.main_position, sub_positions=excluded.sub_positions,
                       total_wins=excluded.total_wins, total_losses=excluded.total_losses,
                       main_position_games=excluded.main_position_games,
                       main_position_wins=excluded.main_position_wins,
                       sub_position_games=excluded.sub_position_games,
                       sub_position_wins=excluded.sub_position_wins""",
                (
                    member.id,
                    member.team_id,
                    member.name,
                    member.tier,
                    member.tier_score,
                    member.status,
                    member.main_position,
                    ",".join(member.sub_positions),
                    member.stats.total_wins,
                    member.stats.total_losses,
                    member.stats.main_position_games,
                    member.stats.main_position_wins,
                    member.stats.sub_position_games,
                    member.stats.sub_position_wins,
                ),
            )
            self._conn.commit()
        return member.id

    def get_by_id(self, member_id: str) -> MemberRecord | None:
        row = self._conn.execute("SELECT * FROM team_member WHERE id = ?", (member_id,)).fetchone()
        return self._row_to_member(row) if row else None

    def all(self) -> list[MemberRecord]:
        rows = self._conn.execute("SELECT * FROM team_member ORDER BY rowid").fetchall()
        return [self._row_to_member(row) for row in rows]

    def fetch_active_members(self) -> Result[list[MemberRecord], StoreError]:
        try:
            rows = self._conn.execute(
                "SELECT * FROM team_member WHERE status = ? ORDER BY rowid",
                (MemberStatus.ACTIVE.value,),
            ).fetchall()
            return Ok([self._row_to_member(row) for row in rows])
        except (sqlite3.Error, ValueError) as e:
            return Err(StoreError(message=str(e), operation="fetch_active_members"))

    def update_tier_score(self, member_id: str, score: int) -> Result[None, StoreError]:
        with self._lock:
            try:
                cursor = self._conn.execute("UPDATE team_member SET tier_score = ? WHERE id = ?", (score, member_id))
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                return Err(StoreError(message=str(e), operation="update_tier_score"))
        if cursor.rowcount == 0:
            return Err(StoreError(message=f"No member with id {member_id!r}", operation="update_tier_score"))
        return Ok(None)

    @staticmethod
    def _row_to_member(row: sqlite3.Row) -> MemberRecord:
        sub_positions = _parse_positions(row["sub_positions"])
        main_positions = _parse_positions(row["main_position"])
        return MemberRecord(
            id=row["id"],
            name=row["nickname"],
            tier=row["tier"],
            tier_score=_optional_int(row["tier_score"]),
            team_id=row["team_id"],
            status=MemberStatus(row["status"]),
            main_position=main_positions[0] if main_positions else None,
            sub_positions=sub_positions,
            stats=PerformanceStats(
                total_wins=_count(row["total_wins"]),
                total_losses=_count(row["total_losses"]),
                main_position_games=_count(row["main_position_games"]),
                main_position_wins=_count(row["main_position_wins"]),
                sub_position_games=_count(row["sub_position_games"]),
                sub_position_wins=_count(row["sub_position_wins"]),
                sub_position_count=len(sub_positions),
            ),
        )


_POSITIONS = {p.value: p for p in Position}


def _parse_positions(raw: str | None) -> tuple[Position, ...]:
    """Comma-separated position labels, case and spacing ignored.

    Labels that are not a known ``Position`` are dropped.
    """
    if not raw:
        return ()
    labels = (label.strip().lower() for label in raw.split(","))
    return tuple(_POSITIONS[label] for label in labels if label in _POSITIONS)


def _count(value: object) -> int:
    """NULL or non-numeric stored counters read as 0."""
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return 0


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None
