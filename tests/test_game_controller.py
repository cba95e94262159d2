"""Test the game controller owns the session and stays UI-agnostic."""
from __future__ import annotations

import pytest

from wct.core.rng import RNG
from wct.services import GameAction, GameController, GameService, TemporaryRosterProvider
from wct.services.errors import GameNotStartedError, RosterError
from wct.services.game_service import (
    AbilityDiceSetEvent,
    DamageAppliedEvent,
    DiceRolledEvent,
    RoundStartedEvent,
    StatusEffectToggledEvent,
)

from tests.helpers.roster_builders import make_selections


def _build_controller(seed: int = 42) -> GameController:
    controller = GameController(GameService(RNG(seed)))
    controller.start_game(make_selections(2, 2))
    return controller


def test_controller_starts_in_setup_mode() -> None:
    controller = GameController(GameService(RNG(1)))

    assert controller.mode == "setup"
    assert controller.is_started is False
    with pytest.raises(GameNotStartedError):
        controller.get_game_view()
    with pytest.raises(GameNotStartedError):
        controller.apply_action(GameAction(action_type="end_turn"))


def test_controller_applies_actions_and_returns_events() -> None:
    controller = _build_controller()

    events = controller.apply_action(GameAction(action_type="damage", fighter_id="wb0_f0", amount=3))
    assert isinstance(events[0], DamageAppliedEvent)

    events = controller.apply_action(GameAction(action_type="status", fighter_id="wb0_f0", label="Flying"))
    assert isinstance(events[0], StatusEffectToggledEvent)

    controller.apply_action(GameAction(action_type="treasure", fighter_id="wb1_f1"))
    controller.apply_action(GameAction(action_type="activation", fighter_id="wb1_f1"))

    view = controller.get_game_view()
    assert view.warbands[0].fighters[0].wounds_display == "7/10"
    assert view.warbands[0].fighters[0].status_effects == ("Flying",)
    assert view.warbands[1].total_treasures == 1
    assert view.warbands[1].fighters[1].activation_used is True


def test_roll_dice_defaults_to_active_warband() -> None:
    controller = _build_controller()
    controller.apply_action(GameAction(action_type="end_turn"))

    events = controller.apply_action(GameAction(action_type="roll_dice"))

    assert isinstance(events[0], DiceRolledEvent)
    assert events[0].warband_id == "wb1"
    assert controller.session.active_warbands[0].dice_pool.is_empty


def test_ability_dice_action_rolls_when_no_value_given() -> None:
    controller = _build_controller()

    events = controller.apply_action(GameAction(action_type="ability_dice", fighter_id="wb0_f1", ability="Rampage"))
    assert isinstance(events[0], AbilityDiceSetEvent)
    assert 1 <= events[0].dice_value <= 6

    controller.apply_action(
        GameAction(action_type="ability_dice", fighter_id="wb0_f1", ability="Onslaught", dice_value=4)
    )
    assert controller.session.get_fighter("wb0_f1").ability_dice["Onslaught"].dice_value == 4

    controller.apply_action(GameAction(action_type="clear_ability_dice", fighter_id="wb0_f1"))
    assert controller.session.get_fighter("wb0_f1").ability_dice == {}


def test_end_turn_action_wraps_round() -> None:
    controller = _build_controller()
    controller.apply_action(GameAction(action_type="end_turn"))

    events = controller.apply_action(GameAction(action_type="end_turn"))

    assert any(isinstance(event, RoundStartedEvent) for event in events)
    assert controller.session.battle_round == 2


@pytest.mark.parametrize(
    "action",
    [
        GameAction(action_type="damage"),
        GameAction(action_type="damage", fighter_id="wb0_f0"),
        GameAction(action_type="heal", fighter_id="wb0_f0"),
        GameAction(action_type="status", fighter_id="wb0_f0"),
        GameAction(action_type="ability_dice", fighter_id="wb0_f0"),
        GameAction(action_type="explode", fighter_id="wb0_f0"),  # type: ignore[arg-type]
    ],
)
def test_controller_rejects_incomplete_actions(action: GameAction) -> None:
    controller = _build_controller()
    with pytest.raises(ValueError):
        controller.apply_action(action)


def test_end_game_reports_summary_and_discards_session() -> None:
    controller = _build_controller()
    controller.apply_action(GameAction(action_type="damage", fighter_id="wb1_f0", amount=10))
    controller.apply_action(GameAction(action_type="treasure", fighter_id="wb0_f1"))

    summary = controller.end_game()

    assert summary.warbands[0].total_treasures == 1
    assert summary.warbands[1].fighters_taken_down == ("wb1_f0",)
    assert controller.is_started is False


def test_reset_game_discards_everything() -> None:
    controller = _build_controller()
    controller.apply_action(GameAction(action_type="damage", fighter_id="wb0_f0", amount=2))

    controller.reset_game()

    assert controller.mode == "setup"
    with pytest.raises(GameNotStartedError):
        _ = controller.session
    controller.reset_game()


def test_start_game_replaces_running_game() -> None:
    controller = _build_controller()
    controller.apply_action(GameAction(action_type="end_turn"))

    controller.start_game(make_selections(3, 1))

    assert controller.session.battle_round == 1
    assert controller.session.active_warband_index == 0
    assert len(controller.session.active_warbands) == 3


def test_start_from_temporary_roster() -> None:
    rng = RNG(8)
    provider = TemporaryRosterProvider(rng)
    warband = provider.create_warband("Pickup Crew", "Order")
    provider.add_fighter(warband.id, "Brawler", 12)
    provider.add_fighter(warband.id, "Lookout", 8, move=6)
    controller = GameController(GameService(rng))

    controller.start_from_roster(provider, [warband.id])

    fighters = controller.session.active_warbands[0].fighters
    assert [fighter.name for fighter in fighters] == ["Brawler", "Lookout"]
    assert [fighter.current_wounds for fighter in fighters] == [12, 8]


def test_start_from_roster_unknown_warband() -> None:
    controller = GameController(GameService(RNG(1)))
    with pytest.raises(RosterError):
        controller.start_from_roster(TemporaryRosterProvider(RNG(1)), ["missing"])
