import json
import logging
import os
import sqlite3
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from roster_tiers.cli.app import app
from roster_tiers.db.connection import create_connection
from roster_tiers.domain.member import MemberRecord, MemberStatus, PerformanceStats
from roster_tiers.domain.position import Position
from roster_tiers.repos.member_repo import SqliteMemberRepo

runner = CliRunner()


def _json_payload(output: str) -> dict[str, Any]:
    # Log lines on stderr precede the report when the runner mixes streams.
    return json.loads(output[output.index("{") :])


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("ROSTER__"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None]:
    yield
    logging.getLogger().handlers.clear()


def _seed_members(db_path: Path) -> None:
    conn = create_connection(db_path)
    repo = SqliteMemberRepo(conn)
    repo.upsert(
        MemberRecord(
            id="m1",
            name="Faker",
            tier="gold_iii",
            tier_score=1050,
            main_position=Position.MID,
            sub_positions=(Position.TOP,),
            stats=PerformanceStats(
                total_wins=50,
                total_losses=50,
                main_position_games=30,
                main_position_wins=15,
                sub_position_games=20,
                sub_position_wins=8,
            ),
        )
    )
    repo.upsert(MemberRecord(id="m2", name="Keria", tier="challenger", tier_score=3800, stats=PerformanceStats()))
    repo.upsert(
        MemberRecord(
            id="m3",
            name="Benched",
            tier="iron_iv",
            tier_score=0,
            status=MemberStatus.KICKED,
            stats=PerformanceStats(),
        )
    )
    conn.close()


def _stored_score(db_path: Path, member_id: str) -> int | None:
    conn = sqlite3.connect(str(db_path))
    try:
        return conn.execute("SELECT tier_score FROM team_member WHERE id = ?", (member_id,)).fetchone()[0]
    finally:
        conn.close()


class TestRecomputeCommand:
    def test_updates_changed_scores(self, tmp_path: Path) -> None:
        db_path = tmp_path / "roster.db"
        _seed_members(db_path)
        result = runner.invoke(app, ["recompute", "--db", str(db_path), "--config", str(tmp_path / "none.yaml")])
        assert result.exit_code == 0, result.output
        assert "Recomputation complete" in result.output
        assert "Updated: 1" in result.output
        assert "Unchanged: 1" in result.output
        assert _stored_score(db_path, "m1") == 1696
        assert _stored_score(db_path, "m3") == 0

    def test_json_report(self, tmp_path: Path) -> None:
        db_path = tmp_path / "roster.db"
        _seed_members(db_path)
        result = runner.invoke(
            app, ["recompute", "--db", str(db_path), "--json", "--config", str(tmp_path / "none.yaml")]
        )
        assert result.exit_code == 0, result.output
        payload = _json_payload(result.stdout)
        assert payload["success"] is True
        assert payload["summary"] == {"totalMembers": 2, "updatedCount": 1, "unchangedCount": 1}
        first = payload["results"][0]
        assert first["id"] == "m1"
        assert first["oldScore"] == 1050
        assert first["newScore"] == 1696
        assert first["difference"] == 646
        assert first["updated"] is True

    def test_second_run_is_noop(self, tmp_path: Path) -> None:
        db_path = tmp_path / "roster.db"
        _seed_members(db_path)
        args = ["recompute", "--db", str(db_path), "--json", "--config", str(tmp_path / "none.yaml")]
        runner.invoke(app, args)
        result = runner.invoke(app, args)
        payload = _json_payload(result.stdout)
        assert payload["summary"]["updatedCount"] == 0
        assert payload["summary"]["unchangedCount"] == 2

    def test_parallel_workers(self, tmp_path: Path) -> None:
        db_path = tmp_path / "roster.db"
        _seed_members(db_path)
        result = runner.invoke(
            app,
            ["recompute", "--db", str(db_path), "--workers", "4", "--json", "--config", str(tmp_path / "none.yaml")],
        )
        assert result.exit_code == 0, result.output
        assert _json_payload(result.stdout)["summary"]["updatedCount"] == 1

    def test_fetch_failure_reports_envelope(self, tmp_path: Path) -> None:
        db_path = tmp_path / "roster.db"
        _seed_members(db_path)
        conn = sqlite3.connect(str(db_path))
        conn.execute("DROP TABLE team_member")
        conn.commit()
        conn.close()
        result = runner.invoke(
            app, ["recompute", "--db", str(db_path), "--json", "--config", str(tmp_path / "none.yaml")]
        )
        assert result.exit_code == 1
        payload = _json_payload(result.stdout)
        assert payload["success"] is False
        assert payload["error"].startswith("Failed to fetch members")

    def test_invalid_scoring_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "roster.yaml"
        config_file.write_text("scoring:\n  adjustment_scale: 500\n")
        result = runner.invoke(
            app, ["recompute", "--db", str(tmp_path / "roster.db"), "--config", str(config_file)]
        )
        assert result.exit_code == 1

    def test_unusable_db_path_reports_envelope(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        db_path = blocker / "roster.db"
        result = runner.invoke(
            app, ["recompute", "--db", str(db_path), "--json", "--config", str(tmp_path / "none.yaml")]
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        payload = _json_payload(result.stdout)
        assert payload["success"] is False
        assert payload["error"].startswith("Could not open member store")

    def test_unusable_db_path_without_json(self, tmp_path: Path) -> None:
        (tmp_path / "blocker").write_text("")
        db_path = tmp_path / "blocker" / "roster.db"
        result = runner.invoke(app, ["recompute", "--db", str(db_path), "--config", str(tmp_path / "none.yaml")])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_quiet_drops_info_logs(self, tmp_path: Path) -> None:
        db_path = tmp_path / "roster.db"
        _seed_members(db_path)
        result = runner.invoke(
            app, ["--quiet", "recompute", "--db", str(db_path), "--config", str(tmp_path / "none.yaml")]
        )
        assert result.exit_code == 0, result.output
        assert "Starting tier score recomputation" not in result.output
        assert "Updated: 1" in result.output

    def test_empty_database(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["recompute", "--db", str(tmp_path / "empty.db"), "--config", str(tmp_path / "none.yaml")]
        )
        assert result.exit_code == 0, result.output
        assert "No active members found." in result.output


class TestScoreCommand:
    def test_breakdown(self) -> None:
        result = runner.invoke(
            app,
            [
                "score",
                "gold_iii",
                "--wins",
                "50",
                "--losses",
                "50",
                "--main-games",
                "30",
                "--main-wins",
                "15",
                "--sub-games",
                "20",
                "--sub-wins",
                "8",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Gold III" in result.output
        assert "1696" in result.output
        assert "Adjustment: -4.00" in result.output

    def test_display_form_rank(self) -> None:
        result = runner.invoke(app, ["score", "Gold III"])
        assert result.exit_code == 0, result.output
        assert "1700" in result.output

    def test_apex_without_games(self) -> None:
        result = runner.invoke(app, ["score", "challenger"])
        assert result.exit_code == 0, result.output
        assert "3800" in result.output

    def test_unknown_rank(self) -> None:
        result = runner.invoke(app, ["score", "wood_v"])
        assert result.exit_code == 1


class TestLadderCommand:
    def test_lists_all_ranks(self) -> None:
        result = runner.invoke(app, ["ladder"])
        assert result.exit_code == 0, result.output
        assert "Challenger" in result.output
        assert "Iron IV" in result.output
        assert "3800" in result.output
        assert "400" in result.output


def test_no_command_exits_cleanly() -> None:
    result = runner.invoke(app, [])
    assert result.exit_code == 0
