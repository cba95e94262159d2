"""Warband roster repository."""
from __future__ import annotations

from typing import Dict

from wct.data.errors import DataValidationError
from wct.data.repositories.base import RepositoryBase
from wct.domain.defs import WarbandDef


class WarbandsRepository(RepositoryBase[WarbandDef]):
    """Loads warband roster headers."""

    def __init__(self, base_path=None) -> None:
        super().__init__("warbands.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, WarbandDef]:
        warbands: Dict[str, WarbandDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str) or not raw_id:
                raise DataValidationError("Warband IDs must be non-empty strings.")
            data = self._require_mapping(payload, f"warband '{raw_id}'")
            self._assert_exact_fields(
                data,
                {"name", "faction"},
                f"warband '{raw_id}'",
                optional_fields={"points_limit", "current_points", "description"},
            )
            warbands[raw_id] = WarbandDef(
                id=raw_id,
                name=self._require_str(data["name"], f"warband '{raw_id}' name"),
                faction=self._require_str(data["faction"], f"warband '{raw_id}' faction"),
                points_limit=self._require_int(
                    data.get("points_limit", 1000), f"warband '{raw_id}' points_limit", minimum=0
                ),
                current_points=self._require_int(
                    data.get("current_points", 0), f"warband '{raw_id}' current_points", minimum=0
                ),
                description=self._require_optional_str(
                    data.get("description"), f"warband '{raw_id}' description"
                ),
            )
        return warbands
