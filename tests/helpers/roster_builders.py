"""Small builders for roster templates used across tests."""
from __future__ import annotations

from typing import List, Sequence, Tuple

from wct.domain.defs import FighterDef, WarbandDef


def make_warband(warband_id: str, name: str | None = None, faction: str = "Chaos") -> WarbandDef:
    return WarbandDef(id=warband_id, name=name or warband_id.replace("_", " ").title(), faction=faction)


def make_fighter(
    fighter_id: str,
    warband_id: str,
    *,
    wounds: int = 10,
    abilities: Sequence[str] = (),
    name: str | None = None,
) -> FighterDef:
    return FighterDef(
        id=fighter_id,
        warband_id=warband_id,
        name=name or fighter_id,
        fighter_type="Warrior",
        points_cost=100,
        move=4,
        toughness=4,
        wounds=wounds,
        strength=4,
        attacks=2,
        damage="1",
        critical_damage="3",
        abilities=tuple(abilities),
    )


def make_selections(
    warband_count: int = 2, fighters_per_warband: int = 2, *, wounds: int = 10
) -> List[Tuple[WarbandDef, List[FighterDef]]]:
    """Build warbands 'wb0', 'wb1', ... each with fighters 'wb0_f0', 'wb0_f1', ..."""
    selections: List[Tuple[WarbandDef, List[FighterDef]]] = []
    for w in range(warband_count):
        warband = make_warband(f"wb{w}")
        fighters = [
            make_fighter(f"wb{w}_f{f}", warband.id, wounds=wounds, abilities=("Onslaught", "Rampage"))
            for f in range(fighters_per_warband)
        ]
        selections.append((warband, fighters))
    return selections
