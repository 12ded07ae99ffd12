from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from camelsim.core.state import GameRules
from camelsim.core.types import ModifierKind
from camelsim.engine.stacks import camels_at, carried_stack, place_stack, reform_stack

if TYPE_CHECKING:
    from camelsim.core.state import GameState
    from camelsim.core.types import CamelName


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """What a single die-driven move did."""

    camel: CamelName
    die: int
    start: int
    raw_target: int
    end: int
    modifier: ModifierKind
    carried: tuple[CamelName, ...]

    @property
    def inserted_below(self) -> bool:
        return self.modifier is ModifierKind.TRAP


def resolve_move(
    state: GameState,
    camel_name: CamelName,
    die: int,
    rules: GameRules | None = None,
) -> MoveOutcome:
    """Move `camel_name` and everyone on top of it `die` cells around the ring.

    The die is recorded in the dice pool, which refuses a second roll for
    the same camel within a leg. Landing on a Trap slides the arriving
    stack under the camels already there; Boost and plain cells put it on
    top. Unless `rules.modifier_shifts_destination` is set, modifiers never
    change which cell is reached.
    """
    rules = rules or GameRules()
    board = state.board
    camel = state.get_camel(camel_name)

    start = camel.position
    raw_target = board.wrap(start + die)
    state.dice.record(camel_name, die)

    modifier = board.modifier_at(raw_target)
    shift = modifier.delta if rules.modifier_shifts_destination else 0
    end = board.wrap(raw_target + shift)

    carried = carried_stack(state, camel)
    travelled = die + shift
    for c in carried:
        c.distance += travelled

    place_stack(state, carried, end, below=modifier is ModifierKind.TRAP)
    reform_stack(state, end)
    reform_stack(state, start)

    return MoveOutcome(
        camel=camel_name,
        die=die,
        start=start,
        raw_target=raw_target,
        end=end,
        modifier=modifier,
        carried=tuple(c.name for c in carried),
    )


def nudge_camel(state: GameState, camel_name: CamelName) -> tuple[int, int]:
    """Step a single camel forward one cell, onto the top of the stack there.

    Dice, modifiers and leg state are ignored and camels above the nudged
    one stay behind. Returns the (start, end) cells.
    """
    camel = state.get_camel(camel_name)
    start = camel.position
    end = state.board.wrap(start + 1)

    camel.stack_rank = len(camels_at(state, end))
    camel.position = end
    camel.distance += 1
    reform_stack(state, start)
    return start, end
