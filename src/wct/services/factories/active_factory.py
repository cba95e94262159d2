"""Factories that wrap roster templates in fresh in-game state."""
from __future__ import annotations

from typing import Sequence

from wct.domain.defs import FighterDef, WarbandDef
from wct.domain.dice_pool import DicePool
from wct.domain.game_models import ActiveFighter, ActiveWarband


def create_active_fighter(template: FighterDef) -> ActiveFighter:
    """Return a fighter at full wounds with nothing spent or carried."""
    return ActiveFighter(template=template, current_wounds=template.wounds)


def create_active_warband(template: WarbandDef, fighters: Sequence[FighterDef]) -> ActiveWarband:
    return ActiveWarband(
        template=template,
        fighters=[create_active_fighter(fighter) for fighter in fighters],
        dice_pool=DicePool(),
        total_treasures=0,
    )
