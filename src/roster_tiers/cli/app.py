import logging
import sqlite3
from typing import Annotated

import typer

from roster_tiers.cli._logging import configure_logging
from roster_tiers.cli._output import (
    failure_envelope,
    print_error,
    print_json,
    print_ladder,
    print_recomputation_summary,
    print_score_breakdown,
    recomputation_envelope,
)
from roster_tiers.cli.factory import build_calculator, build_recompute_context, load_recompute_settings
from roster_tiers.config import create_config
from roster_tiers.domain.errors import RecomputationError
from roster_tiers.domain.member import PerformanceStats
from roster_tiers.domain.rank import rank_from_str
from roster_tiers.domain.recomputation import RecomputationSummary
from roster_tiers.domain.result import Err, Ok, Result
from roster_tiers.exceptions import MigrationError, UnknownRankError

logger = logging.getLogger(__name__)

app = typer.Typer(name="roster-tiers", help="Roster Tiers: tier score engine and recomputation CLI")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only log warnings and errors")] = False,
) -> None:
    """Roster Tiers: tier score engine and recomputation CLI."""
    configure_logging(verbose=verbose, quiet=quiet)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_ConfigOpt = Annotated[str, typer.Option("--config", help="Path to YAML config file")]
_CountOpt = Annotated[int, typer.Option(min=0)]


@app.command()
def recompute(
    db: Annotated[str | None, typer.Option("--db", help="Path to the member database")] = None,
    workers: Annotated[int | None, typer.Option("--workers", min=1, help="Parallel write workers")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print the machine-readable report")] = False,
    config: _ConfigOpt = "roster.yaml",
) -> None:
    """Recompute every active member's tier score and store the ones that changed."""
    cfg = create_config(yaml_path=config, db_path=db, max_workers=workers)
    match load_recompute_settings(cfg):
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)
        case Ok(settings):
            pass

    outcome: Result[RecomputationSummary, RecomputationError]
    try:
        with build_recompute_context(settings) as ctx:
            outcome = ctx.recomputer.recompute_all()
    except (sqlite3.Error, OSError, MigrationError) as e:
        logger.error("Could not open member store at %s: %s", settings.db_path, e)
        outcome = Err(RecomputationError(message=f"Could not open member store: {e}"))

    match outcome:
        case Ok(summary):
            if json_output:
                print_json(recomputation_envelope(summary))
            else:
                print_recomputation_summary(summary)
        case Err(e):
            if json_output:
                print_json(failure_envelope(e))
            else:
                print_error(e.message)
            raise typer.Exit(code=1)


@app.command()
def score(
    rank: Annotated[str, typer.Argument(help="Rank label, e.g. gold_iii or 'Gold III'")],
    wins: _CountOpt = 0,
    losses: _CountOpt = 0,
    main_games: _CountOpt = 0,
    main_wins: _CountOpt = 0,
    sub_games: _CountOpt = 0,
    sub_wins: _CountOpt = 0,
    sub_positions: Annotated[int, typer.Option(min=0, help="Number of declared secondary positions")] = 1,
    config: _ConfigOpt = "roster.yaml",
) -> None:
    """Compute a single tier score and show how it was derived."""
    try:
        parsed = rank_from_str(rank)
    except UnknownRankError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    match build_calculator(create_config(yaml_path=config)):
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)
        case Ok(calculator):
            stats = PerformanceStats(
                total_wins=wins,
                total_losses=losses,
                main_position_games=main_games,
                main_position_wins=main_wins,
                sub_position_games=sub_games,
                sub_position_wins=sub_wins,
                sub_position_count=sub_positions,
            )
            print_score_breakdown(calculator.breakdown(parsed, stats))


@app.command()
def ladder(config: _ConfigOpt = "roster.yaml") -> None:
    """List every rank with its base tier score, strongest first."""
    match build_calculator(create_config(yaml_path=config)):
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)
        case Ok(calculator):
            print_ladder(calculator.ladder)
