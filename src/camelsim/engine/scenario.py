from __future__ import annotations

import random
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

from camelsim.core.state import CamelState, GameRules, GameState, LogContext
from camelsim.core.types import CAMEL_ORDER, ModifierKind
from camelsim.engine.board import Board
from camelsim.engine.game_engine import GameEngine
from camelsim.engine.stacks import camels_at

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from camelsim.core.types import CamelName, ModifierName


class GameScenario:
    """
    A reusable harness that wraps the GameEngine.

    Without a seed the engine gets a MagicMock RNG: `randint` answers dice
    rolls and `choice` answers camel picks and start cells, both scripted
    through `set_dice_rolls` / `set_picks`.
    """

    def __init__(
        self,
        stacks: Mapping[int, list[CamelName]] | None = None,
        dice_rolls: list[int] | None = None,
        picks: Iterable[object] | None = None,
        modifiers: Mapping[int, ModifierName] | None = None,
        rules: GameRules | None = None,
        seed: int | None = None,
        verbose: bool = True,
    ):
        # 1. Setup Camels
        if stacks is None:
            state = GameEngine.get_initial_state()
        else:
            state = GameState(board=Board(), camels=_camels_from_stacks(stacks))

        # 2. Setup Board
        for cell, name in (modifiers or {}).items():
            if not state.board.place_modifier(cell, ModifierKind.from_name(name)):
                msg = f"Cannot place {name} on cell {cell}."
                raise ValueError(msg)

        # 3. Mock the RNG unless a real seed was asked for
        self.mock_rng: MagicMock | None = None
        if seed is None:
            self.mock_rng = MagicMock()
            rng = self.mock_rng
        else:
            rng = random.Random(seed)

        self.engine: GameEngine = GameEngine(
            state=state,
            rng=rng,
            rules=rules or GameRules(),
            log_context=LogContext(),
            verbose=verbose,
        )

        if dice_rolls:
            self.set_dice_rolls(dice_rolls)
        if picks:
            self.set_picks(picks)

    @property
    def state(self) -> GameState:
        return self.engine.state

    def _require_mock(self) -> MagicMock:
        if self.mock_rng is None:
            msg = "Scripted randomness needs a scenario without a seed."
            raise ValueError(msg)
        return self.mock_rng

    def set_dice_rolls(self, rolls: Iterable[int]):
        """Script the dice rolls (e.g., [1, 3])."""
        self._require_mock().randint.side_effect = rolls  # pyright: ignore[reportAny]

    def set_picks(self, picks: Iterable[object]):
        """Script camel picks during legs, or start cells for a new race."""
        self._require_mock().choice.side_effect = picks  # pyright: ignore[reportAny]

    def advance(self, n: int = 1) -> GameState:
        snapshot = self.state.snapshot()
        for _ in range(n):
            snapshot = self.engine.advance()
        return snapshot

    def get_camel(self, name: CamelName) -> CamelState:
        return self.state.get_camel(name)

    def stack(self, cell: int) -> list[CamelName]:
        """Names on `cell`, bottom to top."""
        return [c.name for c in camels_at(self.state, cell)]


def _camels_from_stacks(stacks: Mapping[int, list[CamelName]]) -> list[CamelState]:
    placed: dict[CamelName, CamelState] = {}
    for cell, names in stacks.items():
        for rank, name in enumerate(names):
            if name in placed:
                msg = f"Camel '{name}' placed twice."
                raise ValueError(msg)
            placed[name] = CamelState(name, position=cell, stack_rank=rank, start=cell)

    missing = [name for name in CAMEL_ORDER if name not in placed]
    if missing:
        msg = f"Every camel needs a cell; missing {', '.join(missing)}."
        raise ValueError(msg)
    return [placed[name] for name in CAMEL_ORDER]
