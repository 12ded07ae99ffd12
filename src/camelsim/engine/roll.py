from __future__ import annotations

from typing import TYPE_CHECKING

from camelsim.core.types import DIE_FACES
from camelsim.engine.movement import resolve_move

if TYPE_CHECKING:
    from camelsim.core.types import CamelName
    from camelsim.engine.game_engine import GameEngine
    from camelsim.engine.movement import MoveOutcome


def pick_camel(engine: GameEngine) -> CamelName:
    """Draw one of the camels that has not rolled yet this leg."""
    available = engine.state.dice.available()
    if not available:
        msg = "No camel left to roll; the leg is already complete."
        raise ValueError(msg)
    return engine.rng.choice(available)


def roll_die(engine: GameEngine) -> int:
    return engine.rng.randint(DIE_FACES[0], DIE_FACES[-1])


def handle_roll(engine: GameEngine) -> MoveOutcome:
    name = pick_camel(engine)
    camel = engine.state.get_camel(name)
    engine.log_context.start_turn_log(camel.repr)

    die = roll_die(engine)
    engine.log_info(f"Dice Roll: {name} -> {die}")

    outcome = resolve_move(engine.state, name, die, engine.rules)
    log_move(engine, outcome)
    return outcome


def log_move(engine: GameEngine, outcome: MoveOutcome) -> None:
    if len(outcome.carried) > 1:
        riders = ", ".join(outcome.carried[1:])
        engine.log_info(
            f"Move: {outcome.camel} {outcome.start}->{outcome.end} carrying {riders}",
        )
    else:
        engine.log_info(f"Move: {outcome.camel} {outcome.start}->{outcome.end}")

    if outcome.modifier.delta:
        side = "bottom" if outcome.inserted_below else "top"
        engine.log_info(
            f"BOARD: {outcome.modifier.display_name} at {outcome.raw_target} puts "
            f"{outcome.camel} on the {side} of the stack",
        )
