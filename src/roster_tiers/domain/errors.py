from dataclasses import dataclass


@dataclass(frozen=True)
class RosterError:
    message: str


@dataclass(frozen=True)
class StoreError(RosterError):
    operation: str


@dataclass(frozen=True)
class RecomputationError(RosterError):
    pass


@dataclass(frozen=True)
class ConfigError(RosterError):
    pass
