from __future__ import annotations

from typing import TYPE_CHECKING

from camelsim.core.state import CamelState
from camelsim.core.types import CAMEL_ORDER, INITIAL_POSITION, START_POSITIONS
from camelsim.engine.stacks import camels_at

if TYPE_CHECKING:
    from camelsim.core.state import GameState
    from camelsim.engine.game_engine import GameEngine


def initial_camels() -> list[CamelState]:
    """All camels stacked on the last cell in canonical order."""
    return [
        CamelState(name, position=INITIAL_POSITION, stack_rank=rank)
        for rank, name in enumerate(CAMEL_ORDER)
    ]


def place_starting_camels(engine: GameEngine) -> None:
    """Drop each camel on a random start cell, on top of whoever is there.

    Camels are placed one at a time, so each one's rank is the number of
    camels already sitting on its cell.
    """
    state = engine.state
    placed: list[CamelState] = []
    for name in CAMEL_ORDER:
        start = engine.rng.choice(START_POSITIONS)
        rank = sum(1 for c in placed if c.position == start)
        placed.append(CamelState(name, position=start, stack_rank=rank, start=start))
        engine.log_info(f"Start: {name} placed on {start} (rank {rank})")
    state.camels = placed


def leg_complete(state: GameState) -> bool:
    return state.dice.complete


def start_new_leg(engine: GameEngine) -> None:
    """Clear dice and modifiers. Camels stay where they are."""
    state = engine.state
    log_leg_summary(engine)
    state.dice.clear()
    state.board.reset_modifiers()
    state.leg += 1
    engine.log_context.new_leg(state.leg)
    engine.log_info(f"=== START LEG {state.leg} ===")


def standings(state: GameState) -> list[CamelState]:
    """Camels from first to last by track progress, then stack height.

    Equal progress means the same cell, so the stack rank only ever breaks
    ties between camels sharing a stack.
    """
    return sorted(
        state.camels,
        key=lambda c: (c.progress, c.stack_rank),
        reverse=True,
    )


def leader(state: GameState) -> CamelState:
    return standings(state)[0]


def log_leg_summary(engine: GameEngine) -> None:
    if not engine.verbose:
        return
    state = engine.state
    engine.log_info(f"=== LEG {state.leg} RESULT ===")
    for place, camel in enumerate(standings(state), start=1):
        stack = ",".join(c.name for c in camels_at(state, camel.position))
        engine.log_info(
            f"Result: {place}. {camel.repr} distance={camel.distance} stack=({stack})",
        )
