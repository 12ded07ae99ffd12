"""CLI command for running a single race."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import Annotated

import cappa
import msgspec

from camelsim.cli.converters import (
    parse_house_rules,
    parse_modifier_placements,
    validate_camel_names,
)
from camelsim.core.types import CamelName  # noqa: TC001
from camelsim.engine.logging import configure_logging
from camelsim.simulation.config import (
    DEFAULT_LEGS,
    GameConfig,
    ModifierPlacement,
    PartialGameConfig,
)
from camelsim.simulation.runner import run_single_simulation

logger = logging.getLogger(__name__)


def _print_config(config: GameConfig) -> None:
    logger.log(logging.INFO, config.repr)
    if config.rules:
        logger.log(logging.INFO, f"House Rules: {config.rules}")


def run_console_game(config: GameConfig) -> None:
    """Play the race with the engine's log going to the console."""
    _print_config(config)
    logger.log(logging.INFO, "-" * 20)

    try:
        result = run_single_simulation(config, verbose=True)
    except Exception:
        logger.exception("Game Error")
        raise

    logger.log(logging.INFO, "-" * 20)
    for leg in result.legs:
        logger.log(logging.INFO, f"Leg {leg.leg}: {' > '.join(leg.standings)}")
    _print_config(config)


@cappa.command(
    name="game",
    help="Run a single race. Picks a random seed if none is given.",
)
@dataclass
class GameCommand:
    seed: Annotated[
        int | None,
        cappa.Arg(short="-s", long="--seed", help="RNG seed."),
    ] = None
    legs: Annotated[
        int | None,
        cappa.Arg(short="-l", long="--legs", help="Number of legs to play."),
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
    nudges: Annotated[
        list[CamelName] | None,
        cappa.Arg(
            long="--nudge",
            parse=validate_camel_names,
            num_args=-1,
            help="Camels stepped one cell forward after the start placement.",
        ),
    ] = None

    config_file: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML config file."),
    ] = None
    encoding: Annotated[
        str | None,
        cappa.Arg(short="-e", long="--encoding", help="Base64 encoded configuration."),
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

    def __call__(self):
        # Default State
        final_seed: int = random.randint(0, 1000000)
        final_legs: int = DEFAULT_LEGS
        final_modifiers: list[ModifierPlacement] = []
        final_nudges: list[CamelName] = []
        final_rules: dict[str, int | float | str | bool] = {}

        # 1. Load File (Middle Priority)
        if self.config_file:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise cappa.Exit(msg, code=1)
            try:
                file_conf = PartialGameConfig.from_toml(self.config_file)
            except msgspec.DecodeError as e:
                msg = f"Invalid TOML config: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904

            if file_conf.seed is not None:
                final_seed = file_conf.seed
            if file_conf.legs is not None:
                final_legs = file_conf.legs
            if file_conf.modifiers:
                final_modifiers = file_conf.modifiers
            if file_conf.nudges:
                final_nudges = file_conf.nudges
            if file_conf.rules:
                final_rules.update(file_conf.rules)

        # 2. Load Encoding (High Priority - Overrides File)
        if self.encoding:
            try:
                decoded = GameConfig.from_encoded(self.encoding)
            except Exception as e:  # noqa: BLE001
                msg = f"Invalid encoding: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904
            final_seed = decoded.seed
            final_legs = decoded.legs
            final_modifiers = list(decoded.modifiers)
            final_nudges = list(decoded.nudges)
            final_rules.update(decoded.rules)

        # 3. CLI Args (Highest Priority - Overrides Everything)
        if self.seed is not None:
            final_seed = self.seed
        if self.legs is not None:
            final_legs = self.legs
        if self.modifiers:
            final_modifiers = self.modifiers
        if self.nudges:
            final_nudges = self.nudges
        if self.house_rules:
            final_rules.update(parse_house_rules(self.house_rules))

        if final_legs < 1:
            msg = f"A race needs at least one leg, got {final_legs}."
            raise cappa.Exit(msg, code=1)

        config = GameConfig(
            seed=final_seed,
            legs=final_legs,
            modifiers=tuple(final_modifiers),
            nudges=tuple(final_nudges),
            rules=final_rules,
        )

        configure_logging()
        run_console_game(config)
