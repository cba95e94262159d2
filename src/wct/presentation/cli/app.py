"""Console-driven UI loops for the warband tracker."""
from __future__ import annotations

import logging
import secrets
from typing import List, Literal, Sequence, Tuple

from wct.core.rng import RNG
from wct.data.errors import DataError
from wct.data.repositories import FightersRepository, WarbandsRepository
from wct.presentation.cli import config
from wct.presentation.cli.render import (
    debug_enabled,
    format_dice_pool,
    render_bullet_lines,
    render_game_view,
    render_heading,
    render_menu,
)
from wct.presentation.cli.snapshot_slots import SnapshotSlotStore
from wct.services import (
    GameAction,
    GameController,
    GameService,
    GameSetupError,
    GameSummary,
    RepositoryRosterProvider,
    RosterError,
    RosterProvider,
    SnapshotError,
    SnapshotService,
    TemporaryRosterProvider,
    UnknownAbilityError,
)
from wct.services.game_service import (
    AbilityDiceClearedEvent,
    AbilityDiceSetEvent,
    ActivationToggledEvent,
    DamageAppliedEvent,
    DiceRolledEvent,
    FighterHealedEvent,
    FighterTakenDownEvent,
    GameEvent,
    GameStartedEvent,
    GameView,
    RoundStartedEvent,
    StatusEffectsClearedEvent,
    StatusEffectToggledEvent,
    TreasureToggledEvent,
    TurnEndedEvent,
)

logger = logging.getLogger(__name__)

MenuAction = Literal["roster_game", "temp_game", "load_snapshot", "quit"]
GameMenuAction = Literal[
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
    "save_snapshot",
    "end_game",
    "reset_game",
]
_MAX_RANDOM_SEED = 2**31 - 1
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str) -> None:
    """Configure logging for the console session."""
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=_LOG_FORMAT)


def main() -> None:
    """Start the interactive CLI session."""
    user_config = config.load_config()
    setup_logging("DEBUG" if debug_enabled() else user_config["log_level"])
    seed = _prompt_seed()
    rng = RNG(seed)
    controller = GameController(GameService(rng))
    snapshot_service = SnapshotService()
    slot_store = SnapshotSlotStore()
    logger.info("Session started with seed %d", seed)

    print("=== Warband Companion Tracker ===")
    while True:
        action = _main_menu_loop()
        if action == "quit":
            break
        try:
            if action == "roster_game":
                started = _start_roster_game(controller, _build_roster_provider())
            elif action == "temp_game":
                started = _start_temp_game(controller, TemporaryRosterProvider(rng))
            else:
                started = _load_snapshot(controller, snapshot_service, slot_store)
        except (DataError, RosterError, GameSetupError, SnapshotError) as exc:
            print(f"Could not start a game: {exc}")
            continue
        if started:
            _run_game_loop(controller, snapshot_service, slot_store, damage_step=user_config["damage_step"])
    print("Goodbye!")


def _main_menu_options() -> List[Tuple[str, MenuAction]]:
    return [
        ("Start Game From Roster", "roster_game"),
        ("Quick Temporary Warband", "temp_game"),
        ("Load Snapshot", "load_snapshot"),
        ("Quit", "quit"),
    ]


def _game_menu_options(damage_step: int) -> List[Tuple[str, GameMenuAction]]:
    return [
        (f"Damage Fighter (-{damage_step})", "damage"),
        (f"Heal Fighter (+{damage_step})", "heal"),
        ("Toggle Activation", "activation"),
        ("Toggle Treasure", "treasure"),
        ("Toggle Status Effect", "status"),
        ("Clear Status Effects", "clear_status"),
        ("Use Ability Dice", "ability_dice"),
        ("Clear Ability Dice", "clear_ability_dice"),
        ("Roll Dice", "roll_dice"),
        ("End Turn", "end_turn"),
        ("Save Snapshot", "save_snapshot"),
        ("End Game", "end_game"),
        ("Reset Game", "reset_game"),
    ]


def _main_menu_loop() -> MenuAction:
    options = _main_menu_options()
    render_menu("Main Menu", [label for label, _ in options])
    return options[_prompt_choice(len(options))][1]


def _build_roster_provider() -> RosterProvider:
    """Construct the repository-backed roster."""
    warbands_repo = WarbandsRepository()
    fighters_repo = FightersRepository(warbands_repo=warbands_repo)
    return RepositoryRosterProvider(warbands_repo, fighters_repo)


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter dice seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _prompt_choice(choice_count: int, *, allow_blank: bool = False) -> int | None:
    while True:
        raw = input("Select an option: ").strip()
        if not raw and allow_blank:
            return None
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < choice_count:
            return index
        print(f"Please enter a value between 1 and {choice_count}.")


def _prompt_positive_int(prompt: str, *, default: int | None = None) -> int:
    while True:
        raw = input(prompt).strip()
        if not raw and default is not None:
            return default
        try:
            value = int(raw)
        except ValueError:
            print("Please enter a number.")
            continue
        if value > 0:
            return value
        print("Please enter a value of at least 1.")


def _start_roster_game(controller: GameController, provider: RosterProvider) -> bool:
    warbands = provider.list_warbands()
    if not warbands:
        print("No warbands found. Add some to the roster first.")
        return False

    chosen: List[str] = []
    while True:
        remaining = [warband for warband in warbands if warband.id not in chosen]
        if not remaining:
            break
        title = "Select Warband 1" if not chosen else f"Select Warband {len(chosen) + 1} (blank to start)"
        render_menu(title, [f"{warband.name} ({warband.faction})" for warband in remaining])
        index = _prompt_choice(len(remaining), allow_blank=bool(chosen))
        if index is None:
            break
        chosen.append(remaining[index].id)

    _render_events(controller.start_from_roster(provider, chosen))
    return True


def _start_temp_game(controller: GameController, provider: TemporaryRosterProvider) -> bool:
    render_heading("Temporary Warband")
    print("This warband is only kept for the current game.")
    name = input("Warband name: ").strip()
    faction = input("Faction: ").strip()
    warband = provider.create_warband(name, faction)
    while True:
        fighter_name = input("Fighter name (blank to finish): ").strip()
        if not fighter_name:
            break
        wounds = _prompt_positive_int("Wounds (default 10): ", default=10)
        fighter = provider.add_fighter(warband.id, fighter_name, wounds)
        print(f"{fighter.name} added to {warband.name}.")
    _render_events(controller.start_from_roster(provider, [warband.id]))
    return True


def _load_snapshot(controller: GameController, snapshot_service: SnapshotService, store: SnapshotSlotStore) -> bool:
    slots = store.list_slots()
    render_menu("Load Snapshot", [_describe_slot(slot.slot, slot.exists, slot.metadata, slot.is_corrupt) for slot in slots])
    index = _prompt_choice(len(slots), allow_blank=True)
    if index is None:
        return False
    slot = slots[index]
    if not slot.exists:
        print("That slot is empty.")
        return False
    try:
        payload = store.read_slot(slot.slot)
    except (OSError, ValueError) as exc:
        raise SnapshotError(f"Slot {slot.slot} could not be read: {exc}") from exc
    controller.resume(snapshot_service.deserialize(payload, controller.rng))
    print(f"Resumed game from slot {slot.slot}.")
    return True


def _describe_slot(slot: int, exists: bool, metadata: dict | None, is_corrupt: bool) -> str:
    if not exists:
        return f"Slot {slot}: empty"
    if is_corrupt or metadata is None:
        return f"Slot {slot}: unreadable"
    names = ", ".join(metadata.get("warband_names", []))
    return f"Slot {slot}: round {metadata.get('battle_round', '?')} - {names} ({metadata.get('saved_at', '?')})"


def _run_game_loop(
    controller: GameController,
    snapshot_service: SnapshotService,
    store: SnapshotSlotStore,
    *,
    damage_step: int,
) -> None:
    options = _game_menu_options(damage_step)
    while controller.is_started:
        view = controller.get_game_view()
        render_game_view(view)
        render_menu("Actions", [label for label, _ in options])
        choice = options[_prompt_choice(len(options))][1]

        if choice == "save_snapshot":
            _save_snapshot(controller, snapshot_service, store)
            continue
        if choice == "end_game":
            _render_summary(controller.end_game())
            return
        if choice == "reset_game":
            if input("Discard this game? (y/N): ").strip().lower() == "y":
                controller.reset_game()
                print("Game reset.")
                return
            continue

        try:
            action = _build_action(choice, view, damage_step)
            if action is None:
                continue
            _render_events(controller.apply_action(action))
        except (ValueError, UnknownAbilityError) as exc:
            print(f"Cannot do that: {exc}")


def _build_action(choice: GameMenuAction, view: GameView, damage_step: int) -> GameAction | None:
    if choice == "end_turn":
        return GameAction(action_type="end_turn")
    if choice == "roll_dice":
        return GameAction(action_type="roll_dice", warband_id=view.active_warband_id)

    fighter_id = _prompt_fighter(view)
    if fighter_id is None:
        return None
    if choice in ("damage", "heal"):
        return GameAction(action_type=choice, fighter_id=fighter_id, amount=damage_step)
    if choice == "status":
        label = input("Status effect (e.g. Stunned): ").strip()
        return GameAction(action_type="status", fighter_id=fighter_id, label=label)
    if choice == "ability_dice":
        ability = _prompt_ability(view, fighter_id)
        if ability is None:
            return None
        return GameAction(action_type="ability_dice", fighter_id=fighter_id, ability=ability)
    return GameAction(action_type=choice, fighter_id=fighter_id)


def _fighter_choices(view: GameView) -> List[Tuple[str, str]]:
    return [
        (f"{warband.name}: {fighter.name} ({fighter.wounds_display})", fighter.fighter_id)
        for warband in view.warbands
        for fighter in warband.fighters
    ]


def _prompt_fighter(view: GameView) -> str | None:
    choices = _fighter_choices(view)
    if not choices:
        print("No fighters in this game.")
        return None
    render_menu("Choose Fighter (blank to cancel)", [label for label, _ in choices])
    index = _prompt_choice(len(choices), allow_blank=True)
    return None if index is None else choices[index][1]


def _prompt_ability(view: GameView, fighter_id: str) -> str | None:
    abilities: Sequence[str] = ()
    for warband in view.warbands:
        for fighter in warband.fighters:
            if fighter.fighter_id == fighter_id:
                abilities = fighter.abilities
    if not abilities:
        ability = input("Ability name: ").strip()
        return ability or None
    render_menu("Choose Ability (blank to cancel)", list(abilities))
    index = _prompt_choice(len(abilities), allow_blank=True)
    return None if index is None else abilities[index]


def _save_snapshot(controller: GameController, snapshot_service: SnapshotService, store: SnapshotSlotStore) -> None:
    slot = _prompt_positive_int(f"Save to slot (1-{store.slot_count}): ")
    try:
        store.write_slot(slot, snapshot_service.serialize(controller.session, controller.rng))
    except (OSError, ValueError) as exc:
        print(f"Could not save snapshot: {exc}")
        return
    print(f"Saved to slot {slot}.")


def _render_summary(summary: GameSummary) -> None:
    render_heading(f"Game Over after round {summary.battle_round}")
    for warband in summary.warbands:
        down = ", ".join(warband.fighters_taken_down) or "none"
        print(f"{warband.name}: treasure {warband.total_treasures}, standing {warband.fighters_standing}, down: {down}")


def _render_events(events: Sequence[GameEvent]) -> None:
    lines = [line for line in (_format_event(event) for event in events) if line]
    render_bullet_lines(lines)


def _format_event(event: GameEvent) -> str | None:
    if isinstance(event, GameStartedEvent):
        return f"Game started: {' vs '.join(event.warband_names)} ({event.fighter_count} fighters)."
    if isinstance(event, DiceRolledEvent):
        rolled = " ".join(str(value) for value in event.rolls)
        return f"{event.warband_name} rolled {rolled} -> {format_dice_pool(event.dice_pool)}"
    if isinstance(event, DamageAppliedEvent):
        return f"{event.fighter_name} takes {event.amount} damage ({event.current_wounds} wounds left)."
    if isinstance(event, FighterHealedEvent):
        return f"{event.fighter_name} heals {event.amount} ({event.current_wounds} wounds)."
    if isinstance(event, FighterTakenDownEvent):
        return f"{event.fighter_name} is taken down."
    if isinstance(event, ActivationToggledEvent):
        state = "used" if event.activation_used else "ready"
        return f"{event.fighter_name} activation {state}."
    if isinstance(event, TreasureToggledEvent):
        verb = "picks up" if event.has_treasure else "drops"
        return f"{event.fighter_name} {verb} treasure (warband total {event.warband_treasures})."
    if isinstance(event, StatusEffectToggledEvent):
        verb = "gains" if event.active else "loses"
        return f"{event.fighter_name} {verb} {event.label}."
    if isinstance(event, StatusEffectsClearedEvent):
        return f"{event.fighter_name} clears all status effects."
    if isinstance(event, AbilityDiceSetEvent):
        return f"{event.fighter_name} uses {event.ability} with a {event.dice_value}."
    if isinstance(event, AbilityDiceClearedEvent):
        return f"{event.fighter_name} ability dice cleared."
    if isinstance(event, TurnEndedEvent):
        return f"{event.next_warband_name} to act."
    if isinstance(event, RoundStartedEvent):
        return f"Battle round {event.battle_round} begins."
    return None
