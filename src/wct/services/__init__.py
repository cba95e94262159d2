"""Service layer exports."""

from .errors import (
    GameNotStartedError,
    GameSetupError,
    RosterError,
    SnapshotError,
    UnknownAbilityError,
)
from .game_service import GameService, GameSummary, GameView
from .roster_provider import RepositoryRosterProvider, RosterProvider, TemporaryRosterProvider
from .snapshot_service import SnapshotService
from .controllers import GameAction, GameController

__all__ = [
    "GameNotStartedError",
    "GameSetupError",
    "RosterError",
    "SnapshotError",
    "UnknownAbilityError",
    "GameService",
    "GameSummary",
    "GameView",
    "RepositoryRosterProvider",
    "RosterProvider",
    "TemporaryRosterProvider",
    "SnapshotService",
    "GameAction",
    "GameController",
]
