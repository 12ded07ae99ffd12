from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from camelsim.core.types import BOARD_SIZE, ModifierKind


class Cell(NamedTuple):
    index: int
    modifier: ModifierKind


def _empty_cells() -> list[ModifierKind]:
    return [ModifierKind.NONE] * BOARD_SIZE


@dataclass(slots=True)
class Board:
    """Ring of cells, each optionally carrying a Boost or Trap modifier.

    Placement rules are enforced when a modifier is toggled: cell 0 never
    carries one and no two modifier cells are ring neighbours.
    """

    modifiers: list[ModifierKind] = field(default_factory=_empty_cells)

    @property
    def size(self) -> int:
        return len(self.modifiers)

    @property
    def cells(self) -> tuple[Cell, ...]:
        return tuple(Cell(i, m) for i, m in enumerate(self.modifiers))

    def wrap(self, position: int) -> int:
        return position % self.size

    def neighbours(self, position: int) -> tuple[int, int]:
        return self.wrap(position - 1), self.wrap(position + 1)

    def modifier_at(self, position: int) -> ModifierKind:
        return self.modifiers[self.wrap(position)]

    def can_toggle(self, position: int) -> bool:
        if self.wrap(position) == 0:
            return False
        prev_cell, next_cell = self.neighbours(position)
        return (
            self.modifiers[prev_cell] is ModifierKind.NONE
            and self.modifiers[next_cell] is ModifierKind.NONE
        )

    def toggle_modifier(self, position: int) -> bool:
        """Cycle None -> Boost -> Trap -> None at `position`.

        Illegal placements are ignored. Returns whether the cell changed.
        """
        if not self.can_toggle(position):
            return False

        cell = self.wrap(position)
        self.modifiers[cell] = self.modifiers[cell].next()
        return True

    def place_modifier(self, position: int, kind: ModifierKind) -> bool:
        """Toggle `position` until it shows `kind`. False if placement is blocked."""
        for _ in range(len(ModifierKind)):
            if self.modifier_at(position) is kind:
                return True
            if not self.toggle_modifier(position):
                return False
        return self.modifier_at(position) is kind

    def reset_modifiers(self) -> None:
        for cell in range(self.size):
            self.modifiers[cell] = ModifierKind.NONE

    def placed_modifiers(self) -> dict[int, ModifierKind]:
        return {
            i: m for i, m in enumerate(self.modifiers) if m is not ModifierKind.NONE
        }
