from __future__ import annotations

import itertools
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from camelsim.core import LOGGER_NAME
from camelsim.core.state import DicePool, GameRules, GameState, LogContext
from camelsim.engine.board import Board
from camelsim.engine.flow import (
    initial_camels,
    leg_complete,
    place_starting_camels,
    start_new_leg,
)
from camelsim.engine.invariants import check_invariants
from camelsim.engine.logging import ContextFilter
from camelsim.engine.movement import nudge_camel
from camelsim.engine.roll import handle_roll
from camelsim.engine.stacks import camels_at

if TYPE_CHECKING:
    from camelsim.core.types import CamelName, ModifierKind
    from camelsim.engine.movement import MoveOutcome

MoveCallback = Callable[["GameEngine", "MoveOutcome"], None]

_engine_ids = itertools.count()


def initial_state() -> GameState:
    """Empty board, empty dice pool, every camel stacked on the last cell."""
    return GameState(board=Board(), camels=initial_camels(), dice=DicePool())


@dataclass
class GameEngine:
    """Owns one game state and applies external intents to it.

    Every public operation runs to completion, checks the state's invariants
    (unless `rules.strict` is off) and returns an independent snapshot, so
    callers can never mutate the engine's state behind its back.
    """

    state: GameState = field(default_factory=initial_state)
    rng: random.Random = field(default_factory=random.Random)
    rules: GameRules = field(default_factory=GameRules)
    log_context: LogContext = field(default_factory=LogContext)

    # Callback for external observers
    on_move: MoveCallback | None = None
    verbose: bool = True
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.log_context.engine_id = next(_engine_ids)
        self.log_context.new_leg(self.state.leg)

        base = logging.getLogger(LOGGER_NAME)
        self._logger = base.getChild(f"engine.{self.log_context.engine_id}")
        if self.verbose:
            self._logger.addFilter(ContextFilter(self))

    # --- External operations ---
    @staticmethod
    def get_initial_state() -> GameState:
        return initial_state()

    def start_new_race(self) -> GameState:
        """Fresh board and dice, camels scattered over the start cells."""
        self.state = GameState(board=Board(), camels=[], dice=DicePool())
        self.log_context.new_leg(self.state.leg)
        self.log_info("=== START NEW RACE ===")
        place_starting_camels(self)
        return self._commit()

    def advance(self) -> GameState:
        """Roll for one camel, or open a new leg once every camel has rolled."""
        if leg_complete(self.state):
            self.log_debug("Every camel has rolled; opening a new leg.")
            start_new_leg(self)
        else:
            outcome = handle_roll(self)
            if self.on_move is not None:
                self.on_move(self, outcome)
        return self._commit()

    def toggle_modifier(self, cell_index: int) -> GameState:
        """Cycle the modifier on a cell. Illegal placements are ignored."""
        board = self.state.board
        old = board.modifier_at(cell_index)
        if board.toggle_modifier(cell_index):
            self._log_modifier_change(cell_index, old)
        else:
            self.log_debug(f"BOARD: Toggle at cell {cell_index} blocked.")
        return self._commit()

    def place_modifier(self, cell_index: int, kind: ModifierKind) -> GameState:
        """Toggle a cell until it shows `kind`; blocked placements are skipped."""
        board = self.state.board
        old = board.modifier_at(cell_index)
        if not board.place_modifier(cell_index, kind):
            self.log_info(f"BOARD: Cannot place {kind.display_name} on cell {cell_index}")
        elif old is not kind:
            self._log_modifier_change(cell_index, old)
        return self._commit()

    def _log_modifier_change(self, cell_index: int, old: ModifierKind) -> None:
        board = self.state.board
        new = board.modifier_at(cell_index)
        self.log_info(
            f"BOARD: Cell {board.wrap(cell_index)} {old.display_name} -> {new.display_name}",
        )

    def nudge_camel(self, camel_name: CamelName) -> GameState:
        """Manual correction: one camel one cell forward, alone."""
        start, end = nudge_camel(self.state, camel_name)
        self.log_info(f"Nudge: {camel_name} {start}->{end}")
        return self._commit()

    def run_leg(self) -> None:
        """Advance until every camel has rolled in the current leg."""
        while not leg_complete(self.state):
            _ = self.advance()

    def _commit(self) -> GameState:
        if self.rules.strict:
            check_invariants(self.state)
        return self.state.snapshot()

    # -- Debugging --
    def dump_state(self) -> None:
        self.log_info(f"=== STATE DUMP (leg {self.state.leg}) ===")
        for cell in range(self.state.board.size):
            stack = camels_at(self.state, cell)
            if stack:
                names = ", ".join(c.name for c in stack)
                self.log_info(f"  Cell {cell:02d}: {names}")
        rolls = ", ".join(
            f"{name}={value if value is not None else '-'}"
            for name, value in self.state.dice.rolls.items()
        )
        self.log_info(f"  Dice: {rolls}")
        placed = self.state.board.placed_modifiers()
        if not placed:
            self.log_info("  (Board has no modifiers)")
        for cell, modifier in placed.items():
            self.log_info(f"  Cell {cell:02d}: {modifier.display_name}")

    # -- Logging --
    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Core logging helper; respects engine verbosity."""
        if not self.verbose:
            return
        self._logger.log(level, msg, *args, **kwargs)

    def log_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def log_info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)
