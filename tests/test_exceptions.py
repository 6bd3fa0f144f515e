from roster_tiers.exceptions import (
    ConfigurationError,
    MigrationError,
    RosterException,
    ScoringConfigError,
    UnknownRankError,
)


class TestRosterException:
    def test_is_exception(self) -> None:
        assert issubclass(RosterException, Exception)

    def test_scoring_config_error_is_configuration_error(self) -> None:
        assert issubclass(ScoringConfigError, ConfigurationError)
        assert issubclass(ScoringConfigError, RosterException)

    def test_unknown_rank_error_message(self) -> None:
        err = UnknownRankError("wood_v")
        assert str(err) == "Unknown rank: 'wood_v'"
        assert isinstance(err, ValueError)

    def test_migration_error_is_roster_exception(self) -> None:
        assert issubclass(MigrationError, RosterException)
        assert not issubclass(MigrationError, ConfigurationError)
