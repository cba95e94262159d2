"""Fighter roster repository with warband reference validation."""
from __future__ import annotations

from typing import Dict, List

from wct.data.errors import DataReferenceError, DataValidationError
from wct.data.repositories.base import RepositoryBase
from wct.data.repositories.warbands_repo import WarbandsRepository
from wct.domain.defs import FighterDef

_REQUIRED_FIELDS = {
    "warband",
    "name",
    "type",
    "points_cost",
    "move",
    "toughness",
    "wounds",
    "strength",
    "attacks",
    "damage",
    "critical_damage",
}
_OPTIONAL_FIELDS = {"range", "abilities"}


class FightersRepository(RepositoryBase[FighterDef]):
    """Loads fighters and ensures each belongs to a known warband."""

    def __init__(self, warbands_repo: WarbandsRepository | None = None, base_path=None) -> None:
        super().__init__("fighters.json", base_path)
        self._warbands_repo = warbands_repo or WarbandsRepository(base_path=base_path)

    def list_by_warband(self, warband_id: str) -> List[FighterDef]:
        """Return the warband's fighters in roster order."""
        self._ensure_loaded()
        assert self._definitions is not None
        return [fighter for fighter in self._definitions.values() if fighter.warband_id == warband_id]

    def _build(self, raw: dict[str, object]) -> Dict[str, FighterDef]:
        warband_ids = {warband.id for warband in self._warbands_repo.all()}

        fighters: Dict[str, FighterDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str) or not raw_id:
                raise DataValidationError("Fighter IDs must be non-empty strings.")
            context = f"fighter '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, _REQUIRED_FIELDS, context, optional_fields=_OPTIONAL_FIELDS)

            warband_id = self._require_str(data["warband"], f"{context} warband")
            if warband_id not in warband_ids:
                raise DataReferenceError(f"{context} references missing warband '{warband_id}'.")

            abilities = self._require_str_list(data.get("abilities", []), f"{context} abilities")
            if len(set(abilities)) != len(abilities):
                raise DataValidationError(f"{context} abilities must not repeat.")

            fighters[raw_id] = FighterDef(
                id=raw_id,
                warband_id=warband_id,
                name=self._require_str(data["name"], f"{context} name"),
                fighter_type=self._require_str(data["type"], f"{context} type"),
                points_cost=self._require_int(data["points_cost"], f"{context} points_cost", minimum=0),
                move=self._require_int(data["move"], f"{context} move", minimum=0),
                toughness=self._require_int(data["toughness"], f"{context} toughness", minimum=1),
                wounds=self._require_int(data["wounds"], f"{context} wounds", minimum=1),
                strength=self._require_int(data["strength"], f"{context} strength", minimum=1),
                attacks=self._require_int(data["attacks"], f"{context} attacks", minimum=1),
                damage=self._require_str(data["damage"], f"{context} damage"),
                critical_damage=self._require_str(data["critical_damage"], f"{context} critical_damage"),
                range=self._require_int(data.get("range", 1), f"{context} range", minimum=1),
                abilities=tuple(abilities),
            )
        return fighters
