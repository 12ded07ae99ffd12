import random

from camelsim.core.types import CAMEL_ORDER, ModifierKind
from camelsim.engine.game_engine import GameEngine
from camelsim.simulation.config import GameConfig, ModifierPlacement
from camelsim.simulation.runner import (
    build_rules,
    place_leg_modifiers,
    run_single_simulation,
)


def test_simulation_plays_every_leg():
    result = run_single_simulation(GameConfig(seed=7, legs=3))

    assert [leg.leg for leg in result.legs] == [1, 2, 3]
    assert result.move_count == 15
    for leg in result.legs:
        assert all(value in (1, 2, 3) for value in leg.rolls.values())
        assert sorted(leg.standings) == sorted(CAMEL_ORDER)
        assert leg.leader == leg.standings[0]


def test_simulation_is_deterministic_per_seed():
    config = GameConfig(
        seed=11,
        legs=4,
        modifiers=(ModifierPlacement(4, "trap"), ModifierPlacement(8, "boost")),
    )

    first = run_single_simulation(config)
    second = run_single_simulation(config)

    assert [leg.positions for leg in first.legs] == [leg.positions for leg in second.legs]
    assert first.config_hash == second.config_hash


def test_simulation_applies_nudges_and_house_rules():
    config = GameConfig(
        seed=5,
        legs=1,
        nudges=("white", "white"),
        rules={"modifier_shifts_destination": True},
    )

    result = run_single_simulation(config)

    assert len(result.legs) == 1
    assert result.move_count == 5


def test_place_leg_modifiers_skips_blocked_cells():
    engine = GameEngine(rng=random.Random(0), verbose=False)

    place_leg_modifiers(
        engine,
        [
            ModifierPlacement(5, "boost"),
            ModifierPlacement(6, "trap"),
            ModifierPlacement(9, "trap"),
            ModifierPlacement(0, "boost"),
        ],
    )

    assert engine.state.board.placed_modifiers() == {
        5: ModifierKind.BOOST,
        9: ModifierKind.TRAP,
    }


def test_build_rules_ignores_unknown_keys():
    rules = build_rules({"modifier_shifts_destination": True, "bogus": 3})

    assert rules.modifier_shifts_destination is True
    assert rules.strict is True
    assert not hasattr(rules, "bogus")
