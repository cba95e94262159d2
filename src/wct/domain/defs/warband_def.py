"""Warband template structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WarbandDef:
    """Defines a warband roster header."""

    id: str
    name: str
    faction: str
    points_limit: int = 1000
    current_points: int = 0
    description: str | None = None
