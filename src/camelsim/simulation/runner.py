"""Core simulation execution logic."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tqdm import tqdm

from camelsim.core.state import GameRules
from camelsim.core.types import ModifierKind
from camelsim.engine.flow import log_leg_summary, standings
from camelsim.engine.scenario import GameScenario

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from camelsim.core.types import CamelName
    from camelsim.engine.game_engine import GameEngine
    from camelsim.engine.movement import MoveOutcome
    from camelsim.simulation.config import GameConfig, ModifierPlacement


@dataclass(slots=True)
class LegResult:
    """Where everyone stood once the last camel of a leg had rolled."""

    leg: int
    standings: tuple[CamelName, ...]
    positions: dict[CamelName, tuple[int, int]]
    rolls: dict[CamelName, int | None]

    @property
    def leader(self) -> CamelName:
        return self.standings[0]


@dataclass(slots=True)
class SimulationResult:
    """Result of a single race simulation."""

    config_hash: str
    timestamp: float
    execution_time_ms: float
    move_count: int
    legs: list[LegResult] = field(default_factory=list)


def build_rules(overrides: Mapping[str, int | float | str | bool]) -> GameRules:
    """Apply house rules on top of the defaults; unknown keys are ignored."""
    rules = GameRules()
    for k, v in overrides.items():
        if hasattr(rules, k):
            setattr(rules, k, v)
    return rules


def place_leg_modifiers(
    engine: GameEngine,
    placements: Iterable[ModifierPlacement],
) -> None:
    for placement in placements:
        _ = engine.place_modifier(placement.cell, ModifierKind.from_name(placement.kind))


def run_single_simulation(
    config: GameConfig,
    *,
    verbose: bool = False,
    report: bool = False,
) -> SimulationResult:
    """
    Play one seeded race leg by leg and record the standings after each leg.
    """
    if report:
        tqdm.write(f"▶ Simulating: {config.repr}")

    start_time = time.perf_counter()
    timestamp = time.time()

    scenario = GameScenario(
        rules=build_rules(config.rules),
        seed=config.seed,
        verbose=verbose,
    )
    engine = scenario.engine

    move_count = 0

    def on_move(_: GameEngine, __: MoveOutcome) -> None:
        nonlocal move_count
        move_count += 1

    engine.on_move = on_move

    legs: list[LegResult] = []
    _ = engine.start_new_race()
    for name in config.nudges:
        _ = engine.nudge_camel(name)

    for leg_index in range(config.legs):
        if leg_index > 0:
            # The advance after a complete leg only clears dice and modifiers.
            _ = engine.advance()
        place_leg_modifiers(engine, config.modifiers)
        engine.run_leg()

        state = engine.state
        legs.append(
            LegResult(
                leg=state.leg,
                standings=tuple(c.name for c in standings(state)),
                positions=state.positions(),
                rolls=dict(state.dice.rolls),
            ),
        )

    log_leg_summary(engine)
    execution_time_ms = (time.perf_counter() - start_time) * 1000

    if report and legs:
        tqdm.write(
            f"🏁 Done in {execution_time_ms:.2f}ms | {move_count} moves | "
            f"final leader: {legs[-1].leader}",
        )

    return SimulationResult(
        config_hash=config.compute_hash(),
        timestamp=timestamp,
        execution_time_ms=execution_time_ms,
        move_count=move_count,
        legs=legs,
    )
