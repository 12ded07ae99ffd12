from __future__ import annotations

from enum import IntEnum
from typing import Final, Literal

CamelName = Literal[
    "white",
    "orange",
    "yellow",
    "green",
    "blue",
]

# Canonical order: initial stacking, start-race placement and dice pool order.
CAMEL_ORDER: Final[tuple[CamelName, ...]] = (
    "white",
    "orange",
    "yellow",
    "green",
    "blue",
)

ModifierName = Literal["boost", "trap"]

BOARD_SIZE: Final[int] = 16
START_POSITIONS: Final[tuple[int, ...]] = (0, 1, 2)
INITIAL_POSITION: Final[int] = 15
DIE_FACES: Final[tuple[int, ...]] = (1, 2, 3)

DieValue = Literal[1, 2, 3]


class ModifierKind(IntEnum):
    """Cell modifier. The value is the signed cell shift of the tabletop tile."""

    NONE = 0
    BOOST = 1
    TRAP = -1

    @property
    def delta(self) -> int:
        return int(self.value)

    @property
    def display_name(self) -> str:
        return "-" if self is ModifierKind.NONE else self.name.capitalize()

    def next(self) -> ModifierKind:
        """Cycle None -> Boost -> Trap -> None."""
        match self:
            case ModifierKind.NONE:
                return ModifierKind.BOOST
            case ModifierKind.BOOST:
                return ModifierKind.TRAP
            case ModifierKind.TRAP:
                return ModifierKind.NONE

    @classmethod
    def from_name(cls, name: ModifierName) -> ModifierKind:
        match name:
            case "boost":
                return cls.BOOST
            case "trap":
                return cls.TRAP
        msg = f"Unknown modifier '{name}', expected boost or trap."
        raise ValueError(msg)
