from __future__ import annotations

from pathlib import Path
from typing import Iterator

from wct.core.rng import RNG
from wct.domain.dice_pool import DicePool, classify_dice
from wct.presentation.cli import app
from wct.presentation.cli.app import (
    _build_action,
    _format_event,
    _game_menu_options,
    _main_menu_options,
)
from wct.presentation.cli.render import format_dice_pool, format_fighter_line
from wct.presentation.cli.snapshot_slots import SnapshotSlotStore
from wct.services import GameController, GameService, SnapshotService, TemporaryRosterProvider
from wct.services.game_service import RoundStartedEvent, StatusEffectToggledEvent

from tests.helpers.roster_builders import make_selections


def _feed(monkeypatch, answers: list[str]) -> None:
    iterator: Iterator[str] = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(iterator))


def test_main_menu_offers_temporary_warband_and_quit() -> None:
    labels = [label for label, _ in _main_menu_options()]
    assert "Quick Temporary Warband" in labels
    assert labels[-1] == "Quit"


def test_game_menu_shows_damage_step() -> None:
    labels = [label for label, _ in _game_menu_options(2)]
    assert labels[0] == "Damage Fighter (-2)"
    assert "Reset Game" in labels


def test_format_dice_pool() -> None:
    assert format_dice_pool(DicePool()) == "not rolled"
    assert (
        format_dice_pool(classify_dice([1, 1, 1, 1, 2, 3]))
        == "singles: 2 3 | doubles: - | triples: - | quads: 1"
    )


def test_format_fighter_line_hides_ids_without_debug(monkeypatch) -> None:
    monkeypatch.delenv("WCT_DEBUG", raising=False)
    service = GameService(RNG(1))
    session, _ = service.start_game(make_selections(1, 1))
    service.apply_damage(session, "wb0_f0", 10)
    service.toggle_treasure(session, "wb0_f0")

    line = format_fighter_line(service.get_game_view(session).warbands[0].fighters[0])

    assert line == "[ ] wb0_f0 (Warrior) 0/10 DOWN +treasure"


def test_format_event_messages() -> None:
    assert _format_event(RoundStartedEvent(battle_round=3)) == "Battle round 3 begins."
    event = StatusEffectToggledEvent(fighter_id="f", fighter_name="Vex", label="Stunned", active=False)
    assert _format_event(event) == "Vex loses Stunned."


def test_build_action_prompts_for_fighter(monkeypatch) -> None:
    service = GameService(RNG(1))
    session, _ = service.start_game(make_selections(2, 2))
    view = service.get_game_view(session)
    _feed(monkeypatch, ["3", "Flying"])

    action = _build_action("status", view, 1)

    assert action is not None
    assert action.fighter_id == "wb1_f0"
    assert action.label == "Flying"


def test_build_action_cancel_returns_none(monkeypatch) -> None:
    service = GameService(RNG(1))
    session, _ = service.start_game(make_selections(1, 1))
    _feed(monkeypatch, [""])

    assert _build_action("damage", service.get_game_view(session), 1) is None


def test_scripted_temporary_game(monkeypatch, capsys, tmp_path: Path) -> None:
    rng = RNG(5)
    controller = GameController(GameService(rng))
    _feed(monkeypatch, ["Pickup Crew", "Order", "Brawler", "12", ""])
    assert app._start_temp_game(controller, TemporaryRosterProvider(rng)) is True

    _feed(monkeypatch, ["1", "1", "10", "12"])
    app._run_game_loop(controller, SnapshotService(), SnapshotSlotStore(base_dir=tmp_path), damage_step=1)

    output = capsys.readouterr().out
    assert "Brawler takes 1 damage (11 wounds left)." in output
    assert "Battle round 2 begins." in output
    assert "Game Over after round 2" in output
    assert controller.is_started is False


def test_save_and_load_snapshot_through_slots(monkeypatch, tmp_path: Path) -> None:
    controller = GameController(GameService(RNG(4)))
    controller.start_game(make_selections(2, 1))
    controller.session.battle_round = 4
    store = SnapshotSlotStore(base_dir=tmp_path)
    snapshot_service = SnapshotService()

    _feed(monkeypatch, ["2"])
    app._save_snapshot(controller, snapshot_service, store)
    expected = controller.rng.roll_dice(6)
    controller.reset_game()

    _feed(monkeypatch, ["2"])
    assert app._load_snapshot(controller, snapshot_service, store) is True
    assert controller.session.battle_round == 4
    assert controller.rng.roll_dice(6) == expected
