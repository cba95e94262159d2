"""Active game domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from wct.domain.defs import FighterDef, WarbandDef
from wct.domain.dice_pool import DicePool


@dataclass(slots=True)
class AbilityDiceUse:
    """Records the die spent on an ability this round."""

    used: bool
    dice_value: int


@dataclass(slots=True)
class ActiveFighter:
    """Mutable in-battle state wrapped around a fighter template."""

    template: FighterDef
    current_wounds: int
    activation_used: bool = False
    has_treasure: bool = False
    status_effects: Set[str] = field(default_factory=set)
    ability_dice: Dict[str, AbilityDiceUse] = field(default_factory=dict)

    @property
    def fighter_id(self) -> str:
        return self.template.id

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def max_wounds(self) -> int:
        return self.template.wounds

    @property
    def is_taken_down(self) -> bool:
        # Informational only; a fighter on zero wounds stays in play.
        return self.current_wounds == 0


@dataclass(slots=True)
class ActiveWarband:
    """A warband taking part in the current game."""

    template: WarbandDef
    fighters: List[ActiveFighter] = field(default_factory=list)
    dice_pool: DicePool = field(default_factory=DicePool)
    total_treasures: int = 0

    @property
    def warband_id(self) -> str:
        return self.template.id

    @property
    def name(self) -> str:
        return self.template.name


@dataclass(slots=True)
class GameSession:
    """Tracks the state of an ongoing game."""

    active_warbands: List[ActiveWarband]
    battle_round: int = 1
    active_warband_index: int = 0
    _warband_lookup: Dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _fighter_lookup: Dict[str, tuple[int, int]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._reindex()

    def _reindex(self) -> None:
        """Rebuild the id lookup tables from the current warband order."""
        self._warband_lookup = {}
        self._fighter_lookup = {}
        for warband_index, warband in enumerate(self.active_warbands):
            self._warband_lookup[warband.warband_id] = warband_index
            for fighter_index, fighter in enumerate(warband.fighters):
                self._fighter_lookup[fighter.fighter_id] = (warband_index, fighter_index)

    @property
    def active_warband(self) -> ActiveWarband:
        return self.active_warbands[self.active_warband_index]

    def get_warband(self, warband_id: str) -> ActiveWarband:
        return self.active_warbands[self._warband_lookup[warband_id]]

    def get_fighter(self, fighter_id: str) -> ActiveFighter:
        warband_index, fighter_index = self._fighter_lookup[fighter_id]
        return self.fighter_at(warband_index, fighter_index)

    def owner_of(self, fighter_id: str) -> ActiveWarband:
        warband_index, _ = self._fighter_lookup[fighter_id]
        return self.active_warbands[warband_index]

    def fighter_at(self, warband_index: int, fighter_index: int) -> ActiveFighter:
        if warband_index < 0 or fighter_index < 0:
            raise IndexError("Warband and fighter indexes must be non-negative.")
        return self.active_warbands[warband_index].fighters[fighter_index]

    def iter_fighters(self) -> List[ActiveFighter]:
        return [fighter for warband in self.active_warbands for fighter in warband.fighters]
