"""Repository exports."""

from .warbands_repo import WarbandsRepository
from .fighters_repo import FightersRepository

__all__ = [
    "WarbandsRepository",
    "FightersRepository",
]
