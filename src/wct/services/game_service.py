"""Game service tracking a live battle between warbands."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from wct.core.rng import RNG
from wct.domain.defs import FighterDef, WarbandDef
from wct.domain.dice_pool import MAX_FACE, MIN_FACE, POOL_SIZE, DicePool, classify_dice
from wct.domain.game_models import AbilityDiceUse, ActiveFighter, ActiveWarband, GameSession
from wct.services.errors import GameSetupError, UnknownAbilityError
from wct.services.factories import create_active_warband

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FighterView:
    """Presentation view for one fighter."""

    fighter_id: str
    name: str
    fighter_type: str
    wounds_display: str
    current_wounds: int
    max_wounds: int
    activation_used: bool
    has_treasure: bool
    is_taken_down: bool
    abilities: Tuple[str, ...]
    status_effects: Tuple[str, ...]
    ability_dice: Dict[str, int]


@dataclass(slots=True)
class WarbandView:
    """Presentation view for one warband."""

    warband_id: str
    name: str
    faction: str
    is_active: bool
    total_treasures: int
    dice_pool: DicePool
    fighters: List[FighterView]


@dataclass(slots=True)
class GameView:
    """Presentation view for the current game state."""

    battle_round: int
    active_warband_id: str
    warbands: List[WarbandView]


@dataclass(slots=True)
class WarbandSummary:
    warband_id: str
    name: str
    total_treasures: int
    fighters_standing: int
    fighters_taken_down: Tuple[str, ...]


@dataclass(slots=True)
class GameSummary:
    """Final state reported when a game ends."""

    battle_round: int
    warbands: List[WarbandSummary]


@dataclass(slots=True)
class GameEvent:
    """Base game event."""


@dataclass(slots=True)
class GameStartedEvent(GameEvent):
    warband_names: List[str]
    fighter_count: int


@dataclass(slots=True)
class DiceRolledEvent(GameEvent):
    warband_id: str
    warband_name: str
    rolls: List[int]
    dice_pool: DicePool


@dataclass(slots=True)
class DamageAppliedEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    amount: int
    current_wounds: int


@dataclass(slots=True)
class FighterHealedEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    amount: int
    current_wounds: int


@dataclass(slots=True)
class FighterTakenDownEvent(GameEvent):
    fighter_id: str
    fighter_name: str


@dataclass(slots=True)
class ActivationToggledEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    activation_used: bool


@dataclass(slots=True)
class TreasureToggledEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    has_treasure: bool
    warband_treasures: int


@dataclass(slots=True)
class StatusEffectToggledEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    label: str
    active: bool


@dataclass(slots=True)
class StatusEffectsClearedEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    cleared: Tuple[str, ...]


@dataclass(slots=True)
class AbilityDiceSetEvent(GameEvent):
    fighter_id: str
    fighter_name: str
    ability: str
    dice_value: int


@dataclass(slots=True)
class AbilityDiceClearedEvent(GameEvent):
    fighter_id: str
    fighter_name: str


@dataclass(slots=True)
class TurnEndedEvent(GameEvent):
    previous_warband_id: str
    next_warband_id: str
    next_warband_name: str


@dataclass(slots=True)
class RoundStartedEvent(GameEvent):
    battle_round: int


class GameService:
    """
    Owns every transition of an active game.

    Sessions are passed in explicitly; the service keeps no game state of its
    own beyond the RNG used for dice.
    """

    def __init__(self, rng: RNG, *, strict_abilities: bool = False) -> None:
        self._rng = rng
        self._strict_abilities = strict_abilities

    @property
    def rng(self) -> RNG:
        return self._rng

    # -----------------------
    # Game Lifecycle
    # -----------------------
    def start_game(
        self, selections: Sequence[Tuple[WarbandDef, Sequence[FighterDef]]]
    ) -> tuple[GameSession, List[GameEvent]]:
        """Snapshot the selected rosters into a fresh session at round 1."""
        if not selections:
            raise GameSetupError("Select at least one warband to start a game.")

        seen_warbands: set[str] = set()
        seen_fighters: set[str] = set()
        for warband, fighters in selections:
            if warband.id in seen_warbands:
                raise GameSetupError(f"Warband '{warband.name}' was selected more than once.")
            seen_warbands.add(warband.id)
            for fighter in fighters:
                if fighter.id in seen_fighters:
                    raise GameSetupError(f"Fighter '{fighter.name}' ({fighter.id}) appears more than once.")
                seen_fighters.add(fighter.id)

        warbands = [create_active_warband(warband, fighters) for warband, fighters in selections]
        session = GameSession(active_warbands=warbands)
        logger.info(
            "Game started with %d warband(s), %d fighter(s)", len(warbands), len(seen_fighters)
        )
        return session, [
            GameStartedEvent(warband_names=[warband.name for warband in warbands], fighter_count=len(seen_fighters))
        ]

    def get_game_view(self, session: GameSession) -> GameView:
        """Return structured information for rendering."""
        return GameView(
            battle_round=session.battle_round,
            active_warband_id=session.active_warband.warband_id,
            warbands=[
                self._warband_view(warband, is_active=index == session.active_warband_index)
                for index, warband in enumerate(session.active_warbands)
            ],
        )

    def build_summary(self, session: GameSession) -> GameSummary:
        """Collect the final state worth reporting once a game ends."""
        warbands: List[WarbandSummary] = []
        for warband in session.active_warbands:
            taken_down = tuple(fighter.name for fighter in warband.fighters if fighter.is_taken_down)
            warbands.append(
                WarbandSummary(
                    warband_id=warband.warband_id,
                    name=warband.name,
                    total_treasures=warband.total_treasures,
                    fighters_standing=len(warband.fighters) - len(taken_down),
                    fighters_taken_down=taken_down,
                )
            )
        return GameSummary(battle_round=session.battle_round, warbands=warbands)

    # -----------------------
    # Dice
    # -----------------------
    def roll_dice(self, session: GameSession, warband_id: str) -> List[GameEvent]:
        """Replace the warband's pool with a fresh roll of six dice."""
        warband = session.get_warband(warband_id)
        rolls = self._rng.roll_dice(POOL_SIZE)
        warband.dice_pool = classify_dice(rolls)
        logger.debug("%s rolled %s", warband.name, rolls)
        return [
            DiceRolledEvent(
                warband_id=warband.warband_id,
                warband_name=warband.name,
                rolls=rolls,
                dice_pool=warband.dice_pool,
            )
        ]

    # -----------------------
    # Fighter Actions
    # -----------------------
    def apply_damage(self, session: GameSession, fighter_id: str, amount: int) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        self._require_amount(amount)
        was_standing = not fighter.is_taken_down
        fighter.current_wounds = max(0, fighter.current_wounds - amount)
        events: List[GameEvent] = [
            DamageAppliedEvent(
                fighter_id=fighter.fighter_id,
                fighter_name=fighter.name,
                amount=amount,
                current_wounds=fighter.current_wounds,
            )
        ]
        if was_standing and fighter.is_taken_down:
            logger.debug("%s reduced to 0 wounds", fighter.name)
            events.append(FighterTakenDownEvent(fighter_id=fighter.fighter_id, fighter_name=fighter.name))
        return events

    def heal_fighter(self, session: GameSession, fighter_id: str, amount: int) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        self._require_amount(amount)
        fighter.current_wounds = min(fighter.max_wounds, fighter.current_wounds + amount)
        return [
            FighterHealedEvent(
                fighter_id=fighter.fighter_id,
                fighter_name=fighter.name,
                amount=amount,
                current_wounds=fighter.current_wounds,
            )
        ]

    def toggle_activation(self, session: GameSession, fighter_id: str) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        fighter.activation_used = not fighter.activation_used
        return [
            ActivationToggledEvent(
                fighter_id=fighter.fighter_id,
                fighter_name=fighter.name,
                activation_used=fighter.activation_used,
            )
        ]

    def toggle_treasure(self, session: GameSession, fighter_id: str) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        warband = session.owner_of(fighter_id)
        fighter.has_treasure = not fighter.has_treasure
        warband.total_treasures += 1 if fighter.has_treasure else -1
        return [
            TreasureToggledEvent(
                fighter_id=fighter.fighter_id,
                fighter_name=fighter.name,
                has_treasure=fighter.has_treasure,
                warband_treasures=warband.total_treasures,
            )
        ]

    def toggle_status_effect(self, session: GameSession, fighter_id: str, label: str) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        label = label.strip()
        if not label:
            raise ValueError("Status effect label cannot be empty.")
        if label in fighter.status_effects:
            fighter.status_effects.discard(label)
            active = False
        else:
            fighter.status_effects.add(label)
            active = True
        return [
            StatusEffectToggledEvent(
                fighter_id=fighter.fighter_id,
                fighter_name=fighter.name,
                label=label,
                active=active,
            )
        ]

    def clear_status_effects(self, session: GameSession, fighter_id: str) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        cleared = tuple(sorted(fighter.status_effects))
        fighter.status_effects.clear()
        return [StatusEffectsClearedEvent(fighter_id=fighter.fighter_id, fighter_name=fighter.name, cleared=cleared)]

    def set_ability_dice(
        self, session: GameSession, fighter_id: str, ability: str, dice_value: int
    ) -> List[GameEvent]:
        """Mark an ability as paid for this round with the given face."""
        fighter = session.get_fighter(fighter_id)
        if isinstance(dice_value, bool) or not isinstance(dice_value, int) or not MIN_FACE <= dice_value <= MAX_FACE:
            raise ValueError(f"Ability dice value must be between {MIN_FACE} and {MAX_FACE}.")
        if self._strict_abilities and ability not in fighter.template.abilities:
            raise UnknownAbilityError(f"{fighter.name} has no ability named '{ability}'.")
        fighter.ability_dice[ability] = AbilityDiceUse(used=True, dice_value=dice_value)
        return [
            AbilityDiceSetEvent(
                fighter_id=fighter.fighter_id,
                fighter_name=fighter.name,
                ability=ability,
                dice_value=dice_value,
            )
        ]

    def roll_ability_dice(self, session: GameSession, fighter_id: str, ability: str) -> List[GameEvent]:
        """Roll one fresh die, independent of the warband pool, for an ability."""
        return self.set_ability_dice(session, fighter_id, ability, self._rng.roll_die())

    def clear_ability_dice(self, session: GameSession, fighter_id: str) -> List[GameEvent]:
        fighter = session.get_fighter(fighter_id)
        fighter.ability_dice.clear()
        return [AbilityDiceClearedEvent(fighter_id=fighter.fighter_id, fighter_name=fighter.name)]

    # -----------------------
    # Turn Flow
    # -----------------------
    def end_turn(self, session: GameSession) -> List[GameEvent]:
        """
        Pass play to the next warband.

        Wrapping back to the first warband starts a new battle round, which
        refreshes every fighter's activation and ability dice. Wounds, status
        effects, treasure and dice pools carry over.
        """
        previous = session.active_warband
        next_index = (session.active_warband_index + 1) % len(session.active_warbands)
        session.active_warband_index = next_index
        events: List[GameEvent] = [
            TurnEndedEvent(
                previous_warband_id=previous.warband_id,
                next_warband_id=session.active_warband.warband_id,
                next_warband_name=session.active_warband.name,
            )
        ]
        if next_index == 0:
            session.battle_round += 1
            for fighter in session.iter_fighters():
                fighter.activation_used = False
                fighter.ability_dice.clear()
            logger.info("Battle round %d begins", session.battle_round)
            events.append(RoundStartedEvent(battle_round=session.battle_round))
        return events

    # -----------------------
    # Helpers
    # -----------------------
    @staticmethod
    def _require_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError("Amount must be an integer.")
        if amount < 0:
            raise ValueError("Amount cannot be negative.")

    def _warband_view(self, warband: ActiveWarband, *, is_active: bool) -> WarbandView:
        return WarbandView(
            warband_id=warband.warband_id,
            name=warband.name,
            faction=warband.template.faction,
            is_active=is_active,
            total_treasures=warband.total_treasures,
            dice_pool=DicePool(
                singles=list(warband.dice_pool.singles),
                doubles=list(warband.dice_pool.doubles),
                triples=list(warband.dice_pool.triples),
                quads=list(warband.dice_pool.quads),
            ),
            fighters=[self._fighter_view(fighter) for fighter in warband.fighters],
        )

    @staticmethod
    def _fighter_view(fighter: ActiveFighter) -> FighterView:
        return FighterView(
            fighter_id=fighter.fighter_id,
            name=fighter.name,
            fighter_type=fighter.template.fighter_type,
            wounds_display=f"{fighter.current_wounds}/{fighter.max_wounds}",
            current_wounds=fighter.current_wounds,
            max_wounds=fighter.max_wounds,
            activation_used=fighter.activation_used,
            has_treasure=fighter.has_treasure,
            is_taken_down=fighter.is_taken_down,
            abilities=fighter.template.abilities,
            status_effects=tuple(sorted(fighter.status_effects)),
            ability_dice={ability: use.dice_value for ability, use in fighter.ability_dice.items()},
        )
