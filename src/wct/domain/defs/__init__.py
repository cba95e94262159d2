"""Domain definition exports."""

from .fighter_def import FighterDef
from .warband_def import WarbandDef

__all__ = [
    "FighterDef",
    "WarbandDef",
]
