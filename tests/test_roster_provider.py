from __future__ import annotations

import json
from pathlib import Path

import pytest

from wct.core.rng import RNG
from wct.data.errors import DataLoadError, DataReferenceError, DataValidationError
from wct.data.repositories import FightersRepository, WarbandsRepository
from wct.services.errors import RosterError
from wct.services.factories import TEMP_FIGHTER_DEFAULTS
from wct.services.roster_provider import (
    RepositoryRosterProvider,
    TemporaryRosterProvider,
    build_selections,
)


def _fighter_payload(warband: str, **overrides: object) -> dict:
    payload = {
        "warband": warband,
        "name": "Skirmisher",
        "type": "Scout",
        "points_cost": 90,
        "move": 6,
        "toughness": 3,
        "wounds": 9,
        "strength": 3,
        "attacks": 2,
        "damage": "1",
        "critical_damage": "3",
    }
    payload.update(overrides)
    return payload


def _write_roster(tmp_path: Path, warbands: dict, fighters: dict) -> Path:
    (tmp_path / "warbands.json").write_text(json.dumps(warbands), encoding="utf-8")
    (tmp_path / "fighters.json").write_text(json.dumps(fighters), encoding="utf-8")
    return tmp_path


def _provider(base_path: Path) -> RepositoryRosterProvider:
    warbands_repo = WarbandsRepository(base_path=base_path)
    return RepositoryRosterProvider(warbands_repo, FightersRepository(warbands_repo=warbands_repo, base_path=base_path))


def test_bundled_roster_loads() -> None:
    warbands_repo = WarbandsRepository()
    fighters_repo = FightersRepository(warbands_repo=warbands_repo)
    provider = RepositoryRosterProvider(warbands_repo, fighters_repo)

    warbands = provider.list_warbands()
    assert warbands
    for warband in warbands:
        for fighter in provider.list_fighters(warband.id):
            assert fighter.warband_id == warband.id
            assert fighter.wounds >= 1


def test_fighters_keep_roster_order(tmp_path: Path) -> None:
    base = _write_roster(
        tmp_path,
        {"crew": {"name": "Crew", "faction": "Order"}},
        {
            "zed": _fighter_payload("crew", name="Zed"),
            "amy": _fighter_payload("crew", name="Amy", abilities=["Skulk"], range=8),
        },
    )
    provider = _provider(base)

    fighters = provider.list_fighters("crew")

    assert [fighter.name for fighter in fighters] == ["Zed", "Amy"]
    assert fighters[1].abilities == ("Skulk",)
    assert fighters[1].range == 8
    assert fighters[0].range == 1
    assert provider.get_warband("crew").points_limit == 1000


def test_fighter_with_unknown_warband_is_rejected(tmp_path: Path) -> None:
    base = _write_roster(tmp_path, {"crew": {"name": "Crew", "faction": "Order"}}, {"x": _fighter_payload("ghosts")})
    with pytest.raises(DataReferenceError):
        _provider(base).list_fighters("crew")


@pytest.mark.parametrize(
    "overrides",
    [
        {"wounds": 0},
        {"wounds": "ten"},
        {"abilities": ["Skulk", "Skulk"]},
        {"armour": "plate"},
    ],
)
def test_invalid_fighter_payloads(tmp_path: Path, overrides: dict) -> None:
    base = _write_roster(
        tmp_path, {"crew": {"name": "Crew", "faction": "Order"}}, {"x": _fighter_payload("crew", **overrides)}
    )
    with pytest.raises(DataValidationError):
        _provider(base).list_fighters("crew")


def test_missing_roster_file(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        WarbandsRepository(base_path=tmp_path).all()


def test_definitions_path_env_override(monkeypatch, tmp_path: Path) -> None:
    _write_roster(tmp_path, {"solo": {"name": "Solo", "faction": "Chaos"}}, {})
    monkeypatch.setenv("WCT_DEFINITIONS_PATH", str(tmp_path))

    assert [warband.id for warband in WarbandsRepository().all()] == ["solo"]


def test_build_selections_preserves_order(tmp_path: Path) -> None:
    base = _write_roster(
        tmp_path,
        {"a": {"name": "A", "faction": "Order"}, "b": {"name": "B", "faction": "Chaos"}},
        {"b1": _fighter_payload("b")},
    )
    selections = build_selections(_provider(base), ["b", "a"])

    assert [warband.id for warband, _ in selections] == ["b", "a"]
    assert [fighter.id for fighter in selections[0][1]] == ["b1"]
    assert list(selections[1][1]) == []


def test_temporary_fighter_defaults() -> None:
    provider = TemporaryRosterProvider(RNG(3))
    warband = provider.create_warband("  Pickup Crew ", "Order")

    fighter = provider.add_fighter(warband.id, "Brawler", 12)

    assert warband.name == "Pickup Crew"
    assert warband.id.startswith("temp_warband_")
    assert fighter.id.startswith("temp_fighter_")
    assert fighter.warband_id == warband.id
    assert fighter.wounds == 12
    assert fighter.fighter_type == TEMP_FIGHTER_DEFAULTS["fighter_type"]
    assert (fighter.move, fighter.toughness, fighter.strength, fighter.attacks) == (4, 3, 3, 2)
    assert (fighter.damage, fighter.critical_damage, fighter.range) == ("1", "2", 1)
    assert fighter.abilities == ()


def test_temporary_fighter_overrides_and_validation() -> None:
    provider = TemporaryRosterProvider(RNG(3))
    warband = provider.create_warband("Crew", "Order")

    archer = provider.add_fighter(warband.id, "Archer", 8, range=12, abilities=["Steady Aim"])
    assert archer.range == 12
    assert archer.abilities == ("Steady Aim",)

    with pytest.raises(RosterError):
        provider.add_fighter(warband.id, "", 8)
    with pytest.raises(RosterError):
        provider.add_fighter(warband.id, "Ghost", 0)
    with pytest.raises(RosterError):
        provider.add_fighter(warband.id, "Knight", 8, armour=3)
    with pytest.raises(RosterError):
        provider.create_warband("", "Order")


def test_temporary_roster_remove_fighter() -> None:
    provider = TemporaryRosterProvider(RNG(3))
    warband = provider.create_warband("Crew", "Order")
    provider.add_fighter(warband.id, "One", 5)
    provider.add_fighter(warband.id, "Two", 5)

    removed = provider.remove_fighter(warband.id, 0)

    assert removed.name == "One"
    assert [fighter.name for fighter in provider.list_fighters(warband.id)] == ["Two"]
    with pytest.raises(RosterError):
        provider.remove_fighter(warband.id, 4)
