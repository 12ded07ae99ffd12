from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from camelsim.core.errors import InvariantViolationError
from camelsim.core.types import CAMEL_ORDER, DIE_FACES, ModifierKind

if TYPE_CHECKING:
    from camelsim.core.state import GameState


def find_violations(state: GameState) -> list[str]:
    """Describe every structural invariant `state` currently breaks."""
    problems: list[str] = []
    board = state.board

    names = [c.name for c in state.camels]
    if sorted(names) != sorted(CAMEL_ORDER):
        problems.append(f"camel roster is {names}")

    ranks_by_cell: defaultdict[int, list[int]] = defaultdict(list)
    for camel in state.camels:
        if not 0 <= camel.position < board.size:
            problems.append(f"{camel.repr} is off the board")
        ranks_by_cell[camel.position].append(camel.stack_rank)

    for cell, ranks in sorted(ranks_by_cell.items()):
        if sorted(ranks) != list(range(len(ranks))):
            problems.append(f"cell {cell} has stack ranks {sorted(ranks)}")

    if board.modifiers[0] is not ModifierKind.NONE:
        problems.append("cell 0 carries a modifier")
    for cell in board.placed_modifiers():
        _, next_cell = board.neighbours(cell)
        if board.modifiers[next_cell] is not ModifierKind.NONE:
            problems.append(f"cells {cell} and {next_cell} both carry modifiers")

    for name, value in state.dice.rolls.items():
        if value is not None and value not in DIE_FACES:
            problems.append(f"{name} rolled {value}")

    return problems


def check_invariants(state: GameState) -> None:
    """Raise InvariantViolationError if `state` is structurally broken."""
    problems = find_violations(state)
    if problems:
        msg = "Invariant violated: " + "; ".join(problems)
        raise InvariantViolationError(msg)
