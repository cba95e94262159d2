"""Factories for quick-setup warbands that are never saved."""
from __future__ import annotations

from typing import Any, Dict, Sequence

from wct.core.rng import RNG
from wct.domain.defs import FighterDef, WarbandDef
from wct.services.errors import RosterError

from .id_factory import make_instance_id

TEMP_FIGHTER_DEFAULTS: Dict[str, Any] = {
    "fighter_type": "Warrior",
    "points_cost": 0,
    "move": 4,
    "toughness": 3,
    "strength": 3,
    "attacks": 2,
    "damage": "1",
    "critical_damage": "2",
    "range": 1,
    "abilities": (),
}


def create_temp_warband(name: str, faction: str, rng: RNG) -> WarbandDef:
    """Build a throwaway warband header with a generated id."""
    name = name.strip()
    faction = faction.strip()
    if not name:
        raise RosterError("Temporary warband needs a name.")
    if not faction:
        raise RosterError("Temporary warband needs a faction.")
    return WarbandDef(
        id=make_instance_id("temp_warband", rng),
        name=name,
        faction=faction,
        description="Temporary warband",
    )


def create_temp_fighter(
    warband: WarbandDef,
    name: str,
    wounds: int,
    rng: RNG,
    **overrides: Any,
) -> FighterDef:
    """
    Build a fighter where only name and wounds are required.

    Any profile field may be overridden by keyword; everything else takes
    the quick-setup defaults.
    """
    name = name.strip()
    if not name:
        raise RosterError("Temporary fighter needs a name.")
    if isinstance(wounds, bool) or not isinstance(wounds, int) or wounds < 1:
        raise RosterError("Temporary fighter needs at least 1 wound.")
    unknown = set(overrides) - set(TEMP_FIGHTER_DEFAULTS)
    if unknown:
        raise RosterError(f"Unknown fighter fields: {sorted(unknown)}")

    profile = dict(TEMP_FIGHTER_DEFAULTS)
    profile.update(overrides)
    abilities: Sequence[str] = profile.pop("abilities")
    return FighterDef(
        id=make_instance_id("temp_fighter", rng),
        warband_id=warband.id,
        name=name,
        wounds=wounds,
        abilities=tuple(abilities),
        **profile,
    )
