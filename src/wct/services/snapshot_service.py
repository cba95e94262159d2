"""Serialization helpers for exporting and importing a live game."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from wct.core.rng import RNG, RNGStatePayload
from wct.core.types import DICE_BUCKETS
from wct.domain.defs import FighterDef, WarbandDef
from wct.domain.dice_pool import MAX_FACE, MIN_FACE, POOL_SIZE, DicePool
from wct.domain.game_models import AbilityDiceUse, ActiveFighter, ActiveWarband, GameSession
from wct.services.errors import SnapshotError

logger = logging.getLogger(__name__)

SnapshotPayload = Dict[str, Any]


class SnapshotService:
    """Converts a game session to/from a validated, versioned payload."""

    SNAPSHOT_VERSION = 1

    def serialize(self, session: GameSession, rng: RNG | None = None) -> SnapshotPayload:
        """Return a JSON-serializable payload for disk persistence."""
        payload: SnapshotPayload = {
            "snapshot_version": self.SNAPSHOT_VERSION,
            "metadata": self._build_metadata(session),
            "session": {
                "battle_round": session.battle_round,
                "active_warband_index": session.active_warband_index,
                "warbands": [self._serialize_warband(warband) for warband in session.active_warbands],
            },
        }
        if rng is not None:
            payload["rng"] = rng.export_state()
        return payload

    def deserialize(self, payload: Mapping[str, Any], rng: RNG | None = None) -> GameSession:
        """
        Rehydrate a GameSession, rejecting anything that breaks its invariants.

        When ``rng`` is given and the payload carries dice state, the generator
        is rewound to it so the resumed game rolls the same dice it would have.
        The state is validated even when no generator is passed in.
        """
        if not isinstance(payload, Mapping):
            raise SnapshotError("Snapshot data must be a JSON object.")
        if payload.get("snapshot_version") != self.SNAPSHOT_VERSION:
            raise SnapshotError("Snapshot format is not supported by this version.")
        session_payload = payload.get("session")
        if not isinstance(session_payload, Mapping):
            raise SnapshotError("Snapshot data is missing the session section.")

        battle_round = self._require_int(session_payload.get("battle_round"), "session.battle_round", minimum=1)
        raw_warbands = self._require_list(session_payload.get("warbands"), "session.warbands")
        if not raw_warbands:
            raise SnapshotError("session.warbands must contain at least one warband.")
        warbands = [
            self._coerce_warband(raw, f"session.warbands[{index}]") for index, raw in enumerate(raw_warbands)
        ]
        active_index = self._require_int(
            session_payload.get("active_warband_index"), "session.active_warband_index", minimum=0
        )
        if active_index >= len(warbands):
            raise SnapshotError("session.active_warband_index is out of range.")

        self._assert_unique_ids(warbands)
        rng_state = self._coerce_rng_payload(payload["rng"]) if "rng" in payload else None
        session = GameSession(active_warbands=warbands, battle_round=battle_round, active_warband_index=active_index)
        if rng is not None and rng_state is not None:
            try:
                rng.restore_state(rng_state)
            except ValueError as exc:
                raise SnapshotError(f"Invalid dice state: {exc}") from exc
        logger.info("Restored game at round %d with %d warband(s)", battle_round, len(warbands))
        return session

    # -----------------------
    # Serialization
    # -----------------------
    @staticmethod
    def _build_metadata(session: GameSession) -> Dict[str, Any]:
        return {
            "saved_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "battle_round": session.battle_round,
            "warband_names": [warband.name for warband in session.active_warbands],
        }

    def _serialize_warband(self, warband: ActiveWarband) -> Dict[str, Any]:
        template = warband.template
        return {
            "template": {
                "id": template.id,
                "name": template.name,
                "faction": template.faction,
                "points_limit": template.points_limit,
                "current_points": template.current_points,
                "description": template.description,
            },
            "total_treasures": warband.total_treasures,
            "dice_pool": {name: list(warband.dice_pool.bucket(name)) for name in DICE_BUCKETS},
            "fighters": [self._serialize_fighter(fighter) for fighter in warband.fighters],
        }

    @staticmethod
    def _serialize_fighter(fighter: ActiveFighter) -> Dict[str, Any]:
        template = fighter.template
        return {
            "template": {
                "id": template.id,
                "warband_id": template.warband_id,
                "name": template.name,
                "fighter_type": template.fighter_type,
                "points_cost": template.points_cost,
                "move": template.move,
                "toughness": template.toughness,
                "wounds": template.wounds,
                "strength": template.strength,
                "attacks": template.attacks,
                "damage": template.damage,
                "critical_damage": template.critical_damage,
                "range": template.range,
                "abilities": list(template.abilities),
            },
            "current_wounds": fighter.current_wounds,
            "activation_used": fighter.activation_used,
            "has_treasure": fighter.has_treasure,
            "status_effects": sorted(fighter.status_effects),
            "ability_dice": {
                ability: {"used": use.used, "dice_value": use.dice_value}
                for ability, use in fighter.ability_dice.items()
            },
        }

    # -----------------------
    # Deserialization
    # -----------------------
    def _coerce_warband(self, raw: object, context: str) -> ActiveWarband:
        data = self._require_mapping(raw, context)
        template_data = self._require_mapping(data.get("template"), f"{context}.template")
        template = WarbandDef(
            id=self._require_str(template_data.get("id"), f"{context}.template.id"),
            name=self._require_str(template_data.get("name"), f"{context}.template.name"),
            faction=self._require_str(template_data.get("faction"), f"{context}.template.faction"),
            points_limit=self._require_int(
                template_data.get("points_limit", 1000), f"{context}.template.points_limit", minimum=0
            ),
            current_points=self._require_int(
                template_data.get("current_points", 0), f"{context}.template.current_points", minimum=0
            ),
            description=self._coerce_optional_str(template_data.get("description"), f"{context}.template.description"),
        )
        fighters = [
            self._coerce_fighter(raw_fighter, f"{context}.fighters[{index}]")
            for index, raw_fighter in enumerate(self._require_list(data.get("fighters"), f"{context}.fighters"))
        ]
        for index, fighter in enumerate(fighters):
            if fighter.template.warband_id != template.id:
                raise SnapshotError(
                    f"{context}.fighters[{index}] belongs to warband '{fighter.template.warband_id}', not '{template.id}'."
                )
        total_treasures = self._require_int(data.get("total_treasures"), f"{context}.total_treasures", minimum=0)
        carried = sum(1 for fighter in fighters if fighter.has_treasure)
        if total_treasures != carried:
            raise SnapshotError(
                f"{context}.total_treasures is {total_treasures} but {carried} fighter(s) carry treasure."
            )
        return ActiveWarband(
            template=template,
            fighters=fighters,
            dice_pool=self._coerce_dice_pool(data.get("dice_pool"), f"{context}.dice_pool"),
            total_treasures=total_treasures,
        )

    def _coerce_fighter(self, raw: object, context: str) -> ActiveFighter:
        data = self._require_mapping(raw, context)
        template_data = self._require_mapping(data.get("template"), f"{context}.template")
        abilities = self._require_str_list(template_data.get("abilities", []), f"{context}.template.abilities")
        template = FighterDef(
            id=self._require_str(template_data.get("id"), f"{context}.template.id"),
            warband_id=self._require_str(template_data.get("warband_id"), f"{context}.template.warband_id"),
            name=self._require_str(template_data.get("name"), f"{context}.template.name"),
            fighter_type=self._require_str(template_data.get("fighter_type"), f"{context}.template.fighter_type"),
            points_cost=self._require_int(template_data.get("points_cost"), f"{context}.template.points_cost", minimum=0),
            move=self._require_int(template_data.get("move"), f"{context}.template.move", minimum=0),
            toughness=self._require_int(template_data.get("toughness"), f"{context}.template.toughness", minimum=1),
            wounds=self._require_int(template_data.get("wounds"), f"{context}.template.wounds", minimum=1),
            strength=self._require_int(template_data.get("strength"), f"{context}.template.strength", minimum=1),
            attacks=self._require_int(template_data.get("attacks"), f"{context}.template.attacks", minimum=1),
            damage=self._require_str(template_data.get("damage"), f"{context}.template.damage"),
            critical_damage=self._require_str(template_data.get("critical_damage"), f"{context}.template.critical_damage"),
            range=self._require_int(template_data.get("range", 1), f"{context}.template.range", minimum=1),
            abilities=tuple(abilities),
        )
        current_wounds = self._require_int(data.get("current_wounds"), f"{context}.current_wounds", minimum=0)
        if current_wounds > template.wounds:
            raise SnapshotError(f"{context}.current_wounds exceeds the fighter's {template.wounds} wounds.")

        ability_dice: Dict[str, AbilityDiceUse] = {}
        raw_dice = self._require_mapping(data.get("ability_dice", {}), f"{context}.ability_dice")
        for ability, raw_use in raw_dice.items():
            use = self._require_mapping(raw_use, f"{context}.ability_dice.{ability}")
            ability_dice[str(ability)] = AbilityDiceUse(
                used=self._require_bool(use.get("used"), f"{context}.ability_dice.{ability}.used"),
                dice_value=self._require_face(use.get("dice_value"), f"{context}.ability_dice.{ability}.dice_value"),
            )

        return ActiveFighter(
            template=template,
            current_wounds=current_wounds,
            activation_used=self._require_bool(data.get("activation_used"), f"{context}.activation_used"),
            has_treasure=self._require_bool(data.get("has_treasure"), f"{context}.has_treasure"),
            status_effects=self._coerce_status_effects(data.get("status_effects", []), f"{context}.status_effects"),
            ability_dice=ability_dice,
        )

    def _coerce_dice_pool(self, raw: object, context: str) -> DicePool:
        data = self._require_mapping(raw, context)
        pool = DicePool()
        seen: set[int] = set()
        for name in DICE_BUCKETS:
            faces = self._require_list(data.get(name, []), f"{context}.{name}")
            for face in faces:
                value = self._require_face(face, f"{context}.{name}")
                if value in seen:
                    raise SnapshotError(f"{context} lists face {value} in more than one place.")
                seen.add(value)
                pool.bucket(name).append(value)
        if pool.dice_count() > POOL_SIZE:
            raise SnapshotError(f"{context} accounts for more than {POOL_SIZE} dice.")
        return pool

    @staticmethod
    def _assert_unique_ids(warbands: List[ActiveWarband]) -> None:
        warband_ids = [warband.warband_id for warband in warbands]
        if len(set(warband_ids)) != len(warband_ids):
            raise SnapshotError("Snapshot contains the same warband twice.")
        fighter_ids = [fighter.fighter_id for warband in warbands for fighter in warband.fighters]
        if len(set(fighter_ids)) != len(fighter_ids):
            raise SnapshotError("Snapshot contains the same fighter twice.")

    @staticmethod
    def _require_mapping(value: object, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SnapshotError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> List[Any]:
        if not isinstance(value, list):
            raise SnapshotError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str) or not value:
            raise SnapshotError(f"{context} must be a non-empty string.")
        return value

    @staticmethod
    def _coerce_optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise SnapshotError(f"{context} must be a string or null.")
        return value

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise SnapshotError(f"{context} must be a list of strings.")
        return list(value)

    @classmethod
    def _coerce_status_effects(cls, value: object, context: str) -> set[str]:
        labels = cls._require_str_list(value, context)
        for label in labels:
            if not label or label != label.strip():
                raise SnapshotError(f"{context} holds a blank or unstripped label: {label!r}.")
        return set(labels)

    def _coerce_rng_payload(self, value: object) -> RNGStatePayload:
        data = self._require_mapping(value, "rng")
        internal = self._require_list(data.get("internal"), "rng.internal")
        if not all(isinstance(item, int) and not isinstance(item, bool) for item in internal):
            raise SnapshotError("rng.internal must be a list of integers.")
        gauss_next = data.get("gauss_next")
        if gauss_next is not None and not isinstance(gauss_next, (int, float)):
            raise SnapshotError("rng.gauss_next must be a number or null.")
        return {
            "version": self._require_int(data.get("version"), "rng.version"),
            "internal": list(internal),
            "gauss_next": gauss_next,
        }

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise SnapshotError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_int(value: object, context: str, *, minimum: int | None = None) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SnapshotError(f"{context} must be an integer.")
        if minimum is not None and value < minimum:
            raise SnapshotError(f"{context} must be at least {minimum}.")
        return value

    @classmethod
    def _require_face(cls, value: object, context: str) -> int:
        face = cls._require_int(value, context)
        if not MIN_FACE <= face <= MAX_FACE:
            raise SnapshotError(f"{context} must be a die face between {MIN_FACE} and {MAX_FACE}.")
        return face
