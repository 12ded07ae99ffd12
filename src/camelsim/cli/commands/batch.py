"""CLI command for running many seeded races."""

from __future__ import annotations

import logging
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import Annotated

import cappa
import msgspec
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from camelsim.cli.converters import parse_house_rules, parse_modifier_placements
from camelsim.core import LOGGER_NAME
from camelsim.core.palettes import get_camel_color
from camelsim.core.types import CAMEL_ORDER, CamelName
from camelsim.simulation.config import ModifierPlacement, SimulationConfig
from camelsim.simulation.runner import run_single_simulation


def render_summary(
    leg_leaders: Counter[CamelName],
    race_leaders: Counter[CamelName],
    races: int,
) -> Table:
    total_legs = sum(leg_leaders.values())
    table = Table(title=f"Leaders over {races} races")
    table.add_column("Camel")
    table.add_column("Legs led", justify="right")
    table.add_column("Leg share", justify="right")
    table.add_column("Races led", justify="right")
    table.add_column("Race share", justify="right")

    for name in sorted(CAMEL_ORDER, key=lambda n: leg_leaders[n], reverse=True):
        leg_share = leg_leaders[name] / total_legs if total_legs else 0.0
        race_share = race_leaders[name] / races if races else 0.0
        table.add_row(
            f"[{get_camel_color(name)}]{name}[/]",
            str(leg_leaders[name]),
            f"{leg_share:.1%}",
            str(race_leaders[name]),
            f"{race_share:.1%}",
        )
    return table


@cappa.command(name="batch", help="Simulate many seeded races and tally the leaders.")
@dataclass
class BatchCommand:
    config: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML configuration file."),
    ] = None
    races: Annotated[
        int | None,
        cappa.Arg(short="-n", long="--races", help="Override: number of races."),
    ] = None
    legs_per_race: Annotated[
        int | None,
        cappa.Arg(short="-l", long="--legs", help="Override: legs per race."),
    ] = None
    seed_offset: Annotated[
        int | None,
        cappa.Arg(long="--seed-offset", help="Starting seed value."),
    ] = None
    modifiers: Annotated[
        list[ModifierPlacement] | None,
        cappa.Arg(
            short="-m",
            long="--modifier",
            parse=parse_modifier_placements,
            num_args=-1,
            help="Modifiers placed every leg as CELL=boost|trap.",
        ),
    ] = None
    house_rules: Annotated[
        list[str] | None,
        cappa.Arg(
            short="-H",
            long="--houserule",
            num_args=-1,
            help="House rules as key=value.",
        ),
    ] = None

    def __call__(self) -> int:
        # Suppress engine logs, the progress bar is the output
        logging.getLogger(LOGGER_NAME).setLevel(logging.CRITICAL)

        sim_config = SimulationConfig()
        if self.config:
            if not self.config.exists():
                tqdm.write(f"Error: Config file not found: {self.config}", file=sys.stderr)
                return 1
            try:
                sim_config = SimulationConfig.from_toml(str(self.config))
            except msgspec.DecodeError as e:
                tqdm.write(f"Error: Invalid TOML config: {e}", file=sys.stderr)
                return 1

        # CLI overrides
        if self.races is not None:
            sim_config.races = self.races
        if self.legs_per_race is not None:
            sim_config.legs_per_race = self.legs_per_race
        if self.seed_offset is not None:
            sim_config.seed_offset = self.seed_offset
        if self.modifiers:
            sim_config.modifiers = self.modifiers
        if self.house_rules:
            sim_config.rules.update(parse_house_rules(self.house_rules))

        if sim_config.races < 1 or sim_config.legs_per_race < 1:
            tqdm.write("Error: races and legs must both be positive", file=sys.stderr)
            return 1

        tqdm.write(f"Races: {sim_config.races}")
        tqdm.write(f"Legs per race: {sim_config.legs_per_race}")
        tqdm.write(f"Modifiers: {[m.repr for m in sim_config.modifiers] or 'none'}")
        tqdm.write("")

        leg_leaders: Counter[CamelName] = Counter()
        race_leaders: Counter[CamelName] = Counter()
        total_ms = 0.0

        with tqdm(
            desc="Simulating",
            unit="race",
            total=sim_config.races,
            dynamic_ncols=True,
        ) as pbar:
            for game_config in sim_config.game_configs():
                result = run_single_simulation(game_config)
                total_ms += result.execution_time_ms
                leg_leaders.update(leg.leader for leg in result.legs)
                race_leaders[result.legs[-1].leader] += 1
                pbar.update(1)

        console = Console()
        console.print(render_summary(leg_leaders, race_leaders, sim_config.races))
        console.print(
            f"Average race time: {total_ms / sim_config.races:.2f}ms",
            style="grey50",
        )
        return 0
