import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from roster_tiers.domain.errors import RecomputationError
from roster_tiers.domain.recomputation import RecomputationSummary
from roster_tiers.services.rank_ladder import RankLadder
from roster_tiers.services.tier_score import TierScoreBreakdown

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def recomputation_envelope(summary: RecomputationSummary) -> dict[str, Any]:
    data = summary.to_dict()
    return {
        "success": True,
        "message": "Tier score recomputation complete",
        "summary": {
            "totalMembers": data["totalMembers"],
            "updatedCount": data["updatedCount"],
            "unchangedCount": data["unchangedCount"],
        },
        "results": data["results"],
    }


def failure_envelope(error: RecomputationError) -> dict[str, Any]:
    return {"success": False, "error": error.message}


def print_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


def print_recomputation_summary(summary: RecomputationSummary) -> None:
    """Print per-member results followed by sweep totals."""
    if summary.total_members == 0:
        console.print("No active members found.")
        return

    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Member")
    table.add_column("Rank")
    table.add_column("W-L", justify="right")
    table.add_column("Old", justify="right")
    table.add_column("New", justify="right")
    table.add_column("Diff", justify="right")
    table.add_column("Status")
    for r in summary.results:
        if r.error is not None:
            status = f"[red]failed: {r.error}[/red]"
        elif r.updated:
            status = "[green]updated[/green]"
        else:
            status = "[dim]unchanged[/dim]"
        color = "green" if r.difference > 0 else "red" if r.difference < 0 else "dim"
        table.add_row(
            r.name,
            r.rank,
            f"{r.wins}-{r.losses}",
            str(r.old_score),
            str(r.new_score),
            f"[{color}]{r.difference:+d}[/{color}]",
            status,
        )
    console.print(table)
    console.print()
    console.print(f"[bold green]Recomputation complete:[/bold green] {summary.total_members} members processed")
    console.print(f"  Updated: {summary.updated_count}")
    console.print(f"  Unchanged: {summary.unchanged_count}")
    if summary.failed_count:
        console.print(f"  [red]Failed: {summary.failed_count}[/red]")


def print_score_breakdown(breakdown: TierScoreBreakdown) -> None:
    console.print(f"Tier score for [bold]{breakdown.rank.display_name}[/bold]: [bold]{breakdown.score}[/bold]")
    console.print(f"  Base: {breakdown.base}")
    console.print(f"  Overall win rate: {breakdown.overall_win_rate:.1%}")
    console.print(f"  Main position win rate: {breakdown.main_win_rate:.1%}")
    console.print(f"  Sub position win rate: {breakdown.sub_win_rate:.1%} (weight {breakdown.sub_weight:.1f})")
    console.print(f"  Adjustment: {breakdown.adjustment:+.2f}")


def print_ladder(ladder: RankLadder) -> None:
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("Rank")
    table.add_column("Label")
    table.add_column("Base", justify="right")
    for rank in reversed(ladder.ranks()):
        table.add_row(str(ladder.ordinal(rank)), rank.display_name, rank.value, str(ladder.base_value(rank)))
    console.print(table)
