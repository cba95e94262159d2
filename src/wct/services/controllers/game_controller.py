"""UI-agnostic controller that owns the active game session."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from wct.core.rng import RNG
from wct.core.types import GameActionType, GameMode
from wct.domain.defs import FighterDef, WarbandDef
from wct.domain.game_models import GameSession
from wct.services.errors import GameNotStartedError
from wct.services.game_service import GameEvent, GameService, GameSummary, GameView
from wct.services.roster_provider import RosterProvider, build_selections

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameAction:
    """Represents a structured action decision from a player."""

    action_type: GameActionType
    fighter_id: str | None = None
    warband_id: str | None = None
    amount: int | None = None
    label: str | None = None
    ability: str | None = None
    dice_value: int | None = None


class GameController:
    """
    UI-agnostic controller for the active game tracker.

    Holds at most one GameSession. Before a game starts, and after it ends or
    is reset, the controller is in "setup" mode and every game action raises
    GameNotStartedError.

    Non-responsibilities (handled by presentation layer):
    - Rendering views or events
    - Prompting for input or confirming a reset
    """

    def __init__(self, game_service: GameService) -> None:
        self._service = game_service
        self._session: GameSession | None = None

    @property
    def mode(self) -> GameMode:
        return "active" if self._session is not None else "setup"

    @property
    def is_started(self) -> bool:
        return self._session is not None

    @property
    def rng(self) -> RNG:
        """Dice generator shared with the service, saved alongside snapshots."""
        return self._service.rng

    @property
    def session(self) -> GameSession:
        if self._session is None:
            raise GameNotStartedError("No game is in progress.")
        return self._session

    def start_game(self, selections: Sequence[Tuple[WarbandDef, Sequence[FighterDef]]]) -> List[GameEvent]:
        """Start a new game, replacing any game already running."""
        session, events = self._service.start_game(selections)
        if self._session is not None:
            logger.warning("Starting a new game discarded the one in progress")
        self._session = session
        return events

    def start_from_roster(self, provider: RosterProvider, warband_ids: Sequence[str]) -> List[GameEvent]:
        return self.start_game(build_selections(provider, warband_ids))

    def resume(self, session: GameSession) -> None:
        """Adopt a session restored from a snapshot."""
        self._session = session

    def get_game_view(self) -> GameView:
        return self._service.get_game_view(self.session)

    def apply_action(self, action: GameAction) -> List[GameEvent]:
        """
        Apply a player action and return the resulting events.

        This method does NOT print or format anything. It only executes game logic.
        """
        session = self.session
        action_type = action.action_type

        if action_type == "end_turn":
            return self._service.end_turn(session)

        if action_type == "roll_dice":
            warband_id = action.warband_id or session.active_warband.warband_id
            return self._service.roll_dice(session, warband_id)

        fighter_id = action.fighter_id
        if not fighter_id:
            raise ValueError(f"{action_type} action requires fighter_id.")

        if action_type == "damage":
            if action.amount is None:
                raise ValueError("Damage action requires amount.")
            return self._service.apply_damage(session, fighter_id, action.amount)

        if action_type == "heal":
            if action.amount is None:
                raise ValueError("Heal action requires amount.")
            return self._service.heal_fighter(session, fighter_id, action.amount)

        if action_type == "activation":
            return self._service.toggle_activation(session, fighter_id)

        if action_type == "treasure":
            return self._service.toggle_treasure(session, fighter_id)

        if action_type == "status":
            if not action.label:
                raise ValueError("Status action requires label.")
            return self._service.toggle_status_effect(session, fighter_id, action.label)

        if action_type == "clear_status":
            return self._service.clear_status_effects(session, fighter_id)

        if action_type == "ability_dice":
            if not action.ability:
                raise ValueError("Ability dice action requires ability.")
            if action.dice_value is None:
                return self._service.roll_ability_dice(session, fighter_id, action.ability)
            return self._service.set_ability_dice(session, fighter_id, action.ability, action.dice_value)

        if action_type == "clear_ability_dice":
            return self._service.clear_ability_dice(session, fighter_id)

        raise ValueError(f"Unknown action type: {action_type}")

    def end_game(self) -> GameSummary:
        """Report the final state, then discard the session."""
        summary = self._service.build_summary(self.session)
        self._session = None
        logger.info("Game ended at battle round %d", summary.battle_round)
        return summary

    def reset_game(self) -> None:
        """Discard the session without reporting anything. Irreversible."""
        if self._session is not None:
            logger.info("Game reset at battle round %d", self._session.battle_round)
        self._session = None
