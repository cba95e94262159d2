"""UI-agnostic controllers for game flow orchestration."""
from __future__ import annotations

from .game_controller import GameAction, GameController

__all__ = [
    "GameController",
    "GameAction",
]
