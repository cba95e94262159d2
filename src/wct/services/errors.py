"""Service-layer exceptions."""


class GameSetupError(Exception):
    """Raised when a game cannot be started from the selected warbands."""


class GameNotStartedError(Exception):
    """Raised when an action needs a game but none is running."""


class UnknownAbilityError(Exception):
    """Raised when strict ability checks reject an ability name."""


class RosterError(Exception):
    """Raised when a roster cannot supply or build the requested warband."""


class SnapshotError(Exception):
    """Raised when snapshot export or import fails."""
