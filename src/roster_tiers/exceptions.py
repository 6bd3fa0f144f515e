class RosterException(Exception):
    """Base class for exceptions raised by roster_tiers."""


class ConfigurationError(RosterException):
    """Raised when a configuration value is missing or malformed."""


class ScoringConfigError(ConfigurationError):
    """Raised when scoring constants cannot preserve the rank ordering."""


class UnknownRankError(RosterException, ValueError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Unknown rank: {raw!r}")


class MigrationError(RosterException):
    """Raised when the migrations directory holds a misnamed or duplicate file."""
