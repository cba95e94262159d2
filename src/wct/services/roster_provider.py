"""Roster providers that feed warband templates into a game."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Sequence, Tuple

from wct.core.rng import RNG
from wct.data.repositories import FightersRepository, WarbandsRepository
from wct.domain.defs import FighterDef, WarbandDef
from wct.services.errors import RosterError
from wct.services.factories import create_temp_fighter, create_temp_warband

logger = logging.getLogger(__name__)

RosterSelection = Tuple[WarbandDef, Sequence[FighterDef]]


class RosterProvider(Protocol):
    """Read-only source of warbands and their fighters."""

    def list_warbands(self) -> List[WarbandDef]:
        ...

    def get_warband(self, warband_id: str) -> WarbandDef:
        ...

    def list_fighters(self, warband_id: str) -> List[FighterDef]:
        ...


def build_selections(provider: RosterProvider, warband_ids: Sequence[str]) -> List[RosterSelection]:
    """Resolve warband ids into (warband, fighters) pairs in the given order."""
    selections: List[RosterSelection] = []
    for warband_id in warband_ids:
        try:
            warband = provider.get_warband(warband_id)
        except KeyError as exc:
            raise RosterError(f"Warband '{warband_id}' not found.") from exc
        selections.append((warband, provider.list_fighters(warband_id)))
    return selections


class RepositoryRosterProvider:
    """Roster backed by the JSON definition repositories."""

    def __init__(self, warbands_repo: WarbandsRepository, fighters_repo: FightersRepository) -> None:
        self._warbands_repo = warbands_repo
        self._fighters_repo = fighters_repo

    def list_warbands(self) -> List[WarbandDef]:
        return self._warbands_repo.all()

    def get_warband(self, warband_id: str) -> WarbandDef:
        return self._warbands_repo.get(warband_id)

    def list_fighters(self, warband_id: str) -> List[FighterDef]:
        return self._fighters_repo.list_by_warband(warband_id)


class TemporaryRosterProvider:
    """
    In-memory roster for one-off warbands built during quick setup.

    Nothing here is written to disk; the roster lives as long as the object.
    """

    def __init__(self, rng: RNG) -> None:
        self._rng = rng
        self._warbands: Dict[str, WarbandDef] = {}
        self._fighters: Dict[str, List[FighterDef]] = {}

    def create_warband(self, name: str, faction: str) -> WarbandDef:
        warband = create_temp_warband(name, faction, self._rng)
        while warband.id in self._warbands:
            warband = create_temp_warband(name, faction, self._rng)
        self._warbands[warband.id] = warband
        self._fighters[warband.id] = []
        logger.info("Created temporary warband %s (%s)", warband.name, warband.id)
        return warband

    def add_fighter(self, warband_id: str, name: str, wounds: int, **overrides: Any) -> FighterDef:
        warband = self.get_warband(warband_id)
        taken = {fighter.id for roster in self._fighters.values() for fighter in roster}
        fighter = create_temp_fighter(warband, name, wounds, self._rng, **overrides)
        while fighter.id in taken:
            fighter = create_temp_fighter(warband, name, wounds, self._rng, **overrides)
        self._fighters[warband_id].append(fighter)
        logger.debug("Added %s to temporary warband %s", fighter.name, warband.name)
        return fighter

    def remove_fighter(self, warband_id: str, index: int) -> FighterDef:
        roster = self._fighters[warband_id]
        if not 0 <= index < len(roster):
            raise RosterError(f"No fighter at position {index + 1}.")
        return roster.pop(index)

    def list_warbands(self) -> List[WarbandDef]:
        return list(self._warbands.values())

    def get_warband(self, warband_id: str) -> WarbandDef:
        return self._warbands[warband_id]

    def list_fighters(self, warband_id: str) -> List[FighterDef]:
        if warband_id not in self._warbands:
            raise KeyError(warband_id)
        return list(self._fighters[warband_id])
