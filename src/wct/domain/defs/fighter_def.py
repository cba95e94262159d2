"""Fighter template structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class FighterDef:
    """Defines a fighter's fixed profile as recorded on its warband roster."""

    id: str
    warband_id: str
    name: str
    fighter_type: str
    points_cost: int
    move: int
    toughness: int
    wounds: int
    strength: int
    attacks: int
    damage: str
    critical_damage: str
    range: int = 1
    abilities: Tuple[str, ...] = ()
