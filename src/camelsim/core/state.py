from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from camelsim.core.errors import DiceAlreadyRolledError, UnknownCamelError
from camelsim.core.types import CAMEL_ORDER, INITIAL_POSITION

if TYPE_CHECKING:
    from camelsim.core.types import CamelName
    from camelsim.engine.board import Board


@dataclass(slots=True)
class GameRules:
    """House rules. Defaults reproduce the reference game behaviour."""

    # Boost/Trap also shift the landing cell by +1/-1 instead of only
    # changing how the arriving stack is ordered.
    modifier_shifts_destination: bool = False
    # Verify every structural invariant after each external operation.
    strict: bool = True


@dataclass(slots=True)
class CamelState:
    name: CamelName
    position: int = INITIAL_POSITION
    stack_rank: int = 0
    # Cell the camel stood on when the race began
    start: int = INITIAL_POSITION
    distance: int = 0

    @property
    def repr(self) -> str:
        return f"{self.position}.{self.stack_rank}:{self.name}"

    @property
    def progress(self) -> int:
        """Unwrapped track position: the start cell plus every cell travelled."""
        return self.start + self.distance


def _empty_rolls() -> dict[CamelName, int | None]:
    return dict.fromkeys(CAMEL_ORDER)


@dataclass(slots=True)
class DicePool:
    """Which camels have rolled in the current leg, and what they rolled."""

    rolls: dict[CamelName, int | None] = field(default_factory=_empty_rolls)

    @property
    def complete(self) -> bool:
        return all(value is not None for value in self.rolls.values())

    def available(self) -> list[CamelName]:
        return [name for name, value in self.rolls.items() if value is None]

    def record(self, name: CamelName, value: int) -> None:
        if name not in self.rolls:
            raise UnknownCamelError(name)
        if self.rolls[name] is not None:
            msg = f"{name} already rolled {self.rolls[name]} this leg."
            raise DiceAlreadyRolledError(msg)
        self.rolls[name] = value

    def clear(self) -> None:
        for name in self.rolls:
            self.rolls[name] = None


@dataclass(slots=True)
class GameState:
    board: Board
    camels: list[CamelState]
    dice: DicePool = field(default_factory=DicePool)
    leg: int = 1

    def get_camel(self, name: CamelName) -> CamelState:
        for camel in self.camels:
            if camel.name == name:
                return camel
        raise UnknownCamelError(name)

    def positions(self) -> dict[CamelName, tuple[int, int]]:
        return {c.name: (c.position, c.stack_rank) for c in self.camels}

    def snapshot(self) -> GameState:
        """Independent copy handed to callers outside the engine."""
        return copy.deepcopy(self)

    def get_state_hash(self) -> int:
        camel_data = tuple(
            (c.name, c.position, c.stack_rank, c.start, c.distance) for c in self.camels
        )
        board_data = tuple(self.board.modifiers)
        dice_data = tuple(self.dice.rolls.items())
        return hash((camel_data, board_data, dice_data, self.leg))


@dataclass(slots=True)
class LogContext:
    """Per-engine logging state."""

    engine_id: int = 0
    leg: int = 1
    turn_log_count: int = 0
    current_camel_repr: str = "_"

    def new_leg(self, leg: int) -> None:
        self.leg = leg
        self.turn_log_count = 0
        self.current_camel_repr = "_"

    def start_turn_log(self, camel_repr: str) -> None:
        self.turn_log_count = 0
        self.current_camel_repr = camel_repr

    def inc_log_count(self) -> None:
        self.turn_log_count += 1
