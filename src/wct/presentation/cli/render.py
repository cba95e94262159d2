"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, List, Sequence

from wct.core.types import DICE_BUCKETS
from wct.domain.dice_pool import DicePool
from wct.services.game_service import FighterView, GameView, WarbandView


def debug_enabled() -> bool:
    """Return True only when WCT_DEBUG is explicitly set to '1'."""
    return os.getenv("WCT_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def format_dice_pool(pool: DicePool) -> str:
    """Summarize a pool on one line, e.g. 'singles: 2 5 | doubles: 3 | triples: - | quads: -'."""
    if pool.is_empty:
        return "not rolled"
    parts: List[str] = []
    for name in DICE_BUCKETS:
        faces = pool.bucket(name)
        parts.append(f"{name}: {' '.join(str(face) for face in faces) if faces else '-'}")
    return " | ".join(parts)


def format_fighter_line(fighter: FighterView) -> str:
    marker = "x" if fighter.activation_used else " "
    line = f"[{marker}] {fighter.name} ({fighter.fighter_type}) {fighter.wounds_display}"
    if fighter.is_taken_down:
        line += " DOWN"
    if fighter.has_treasure:
        line += " +treasure"
    if fighter.status_effects:
        line += f" [{', '.join(fighter.status_effects)}]"
    if fighter.ability_dice:
        spent = ", ".join(f"{ability}={value}" for ability, value in sorted(fighter.ability_dice.items()))
        line += f" dice({spent})"
    if debug_enabled():
        line += f" <{fighter.fighter_id}>"
    return line


def format_warband_lines(warband: WarbandView) -> List[str]:
    turn = " <- turn" if warband.is_active else ""
    lines = [
        f"{warband.name} ({warband.faction}) treasure: {warband.total_treasures}{turn}",
        f"  dice: {format_dice_pool(warband.dice_pool)}",
    ]
    lines.extend(f"  {format_fighter_line(fighter)}" for fighter in warband.fighters)
    return lines


def render_game_view(view: GameView) -> None:
    """Print the whole tracker board."""
    render_heading(f"Battle Round {view.battle_round}")
    for warband in view.warbands:
        for line in format_warband_lines(warband):
            print(line)
