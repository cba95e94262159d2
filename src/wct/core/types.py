"""Shared type aliases for the core and domain layers."""
from typing import Literal

GameMode = Literal["setup", "active"]
DiceBucket = Literal["singles", "doubles", "triples", "quads"]
GameActionType = Literal[
    "damage",
    "heal",
    "activation",
    "treasure",
    "status",
    "clear_status",
    "ability_dice",
    "clear_ability_dice",
    "roll_dice",
    "end_turn",
]

DICE_BUCKETS: tuple[DiceBucket, ...] = ("singles", "doubles", "triples", "quads")

__all__ = ["DICE_BUCKETS", "DiceBucket", "GameActionType", "GameMode"]
