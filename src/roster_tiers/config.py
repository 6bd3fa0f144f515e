from __future__ import annotations

from pathlib import Path

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from roster_tiers.domain.scoring import ScoringConfig, validate_scoring_config
from roster_tiers.exceptions import ConfigurationError, ScoringConfigError

_DEFAULTS: dict[str, object] = {
    "db": {
        "path": "~/.config/roster-tiers/roster.db",
    },
    "scoring": {
        "division_step": 100,
        "base_offset": 400,
        "apex_gap": 300,
        "apex_step": 200,
        "adjustment_scale": 50.0,
    },
    "recompute": {
        "max_workers": 1,
    },
}


def create_config(
    yaml_path: str = "roster.yaml",
    env_prefix: str = "ROSTER",
    defaults: dict[str, object] | None = None,
    *,
    db_path: str | None = None,
    max_workers: int | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file.
        env_prefix: Prefix for environment variables (``ROSTER__SCORING__APEX_GAP``).
        defaults: Default configuration values.
        db_path: Override the member database path.
        max_workers: Override the recomputation worker count.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]

    overrides = _build_overrides(db_path, max_workers)
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def _build_overrides(db_path: str | None, max_workers: int | None) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if db_path is not None:
        overrides["db"] = {"path": db_path}
    if max_workers is not None:
        overrides["recompute"] = {"max_workers": max_workers}
    return overrides


def load_scoring_config(cfg: ConfigurationSet | None = None) -> ScoringConfig:
    """Build and validate the scoring constants.

    Raises ScoringConfigError when a value is not numeric or the constants
    would let a performance adjustment reorder ranks.
    """
    if cfg is None:
        cfg = create_config()
    try:
        scoring = ScoringConfig(
            division_step=int(str(cfg["scoring.division_step"])),
            base_offset=int(str(cfg["scoring.base_offset"])),
            apex_gap=int(str(cfg["scoring.apex_gap"])),
            apex_step=int(str(cfg["scoring.apex_step"])),
            adjustment_scale=float(str(cfg["scoring.adjustment_scale"])),
        )
    except ValueError as e:
        raise ScoringConfigError(f"Invalid scoring configuration: {e}") from e
    validate_scoring_config(scoring)
    return scoring


def load_db_path(cfg: ConfigurationSet | None = None) -> Path:
    if cfg is None:
        cfg = create_config()
    return Path(str(cfg["db.path"])).expanduser()


def load_max_workers(cfg: ConfigurationSet | None = None) -> int:
    if cfg is None:
        cfg = create_config()
    try:
        workers = int(str(cfg["recompute.max_workers"]))
    except ValueError as e:
        raise ConfigurationError(f"Invalid recompute.max_workers: {e}") from e
    if workers < 1:
        raise ConfigurationError(f"recompute.max_workers must be >= 1, got {workers}")
    return workers
