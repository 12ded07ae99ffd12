import random

import pytest

from camelsim.core.errors import InvariantViolationError
from camelsim.core.state import GameRules
from camelsim.core.types import CAMEL_ORDER, ModifierKind
from camelsim.engine.game_engine import GameEngine
from camelsim.engine.invariants import check_invariants, find_violations
from camelsim.engine.scenario import GameScenario


def _random_walk(engine: GameEngine, seed: int, steps: int) -> None:
    """Drive the engine with a random mix of intents, checking after each one."""
    op_rng = random.Random(seed)
    moved_this_leg: set[str] = set()

    def on_move(_, outcome):
        moved_this_leg.add(outcome.camel)

    engine.on_move = on_move

    for _ in range(steps):
        leg_before = engine.state.leg
        op = op_rng.choice(["advance", "advance", "advance", "toggle", "nudge"])
        match op:
            case "advance":
                snapshot = engine.advance()
            case "toggle":
                snapshot = engine.toggle_modifier(op_rng.randrange(16))
            case _:
                snapshot = engine.nudge_camel(op_rng.choice(CAMEL_ORDER))

        if snapshot.leg != leg_before:
            moved_this_leg.clear()

        assert find_violations(snapshot) == []
        rolled = {name for name, value in snapshot.dice.rolls.items() if value is not None}
        assert rolled == moved_this_leg
        for camel in snapshot.camels:
            assert 0 <= camel.position < 16


@pytest.mark.parametrize("seed", range(30))
def test_invariants_hold_for_random_intent_sequences(seed: int):
    engine = GameEngine(rng=random.Random(seed), verbose=False)
    engine.start_new_race()

    _random_walk(engine, seed + 1000, steps=150)


@pytest.mark.parametrize("seed", range(10))
def test_invariants_hold_with_shifted_destinations(seed: int):
    engine = GameEngine(
        rng=random.Random(seed),
        rules=GameRules(modifier_shifts_destination=True),
        verbose=False,
    )

    _random_walk(engine, seed + 2000, steps=150)


def test_broken_stack_is_reported(scenario: type[GameScenario]):
    game = scenario({4: ["white", "orange"], 9: ["yellow", "green", "blue"]})
    game.get_camel("orange").stack_rank = 5

    assert find_violations(game.state) == ["cell 4 has stack ranks [0, 5]"]
    with pytest.raises(InvariantViolationError):
        check_invariants(game.state)


def test_engine_raises_on_corrupted_state(scenario: type[GameScenario]):
    """
    Scenario: A stack rank is corrupted behind the engine's back.
    Verify: The next operation fails loudly as an assertion.
    """
    game = scenario()
    game.get_camel("blue").position = 16

    with pytest.raises(AssertionError, match="off the board"):
        game.engine.toggle_modifier(3)


def test_non_strict_rules_skip_checks(scenario: type[GameScenario]):
    game = scenario(rules=GameRules(strict=False))
    game.get_camel("blue").stack_rank = 9

    snapshot = game.engine.toggle_modifier(3)

    assert snapshot.get_camel("blue").stack_rank == 9


def test_adjacent_modifiers_are_reported(scenario: type[GameScenario]):
    game = scenario()
    game.state.board.modifiers[4] = ModifierKind.BOOST
    game.state.board.modifiers[5] = ModifierKind.TRAP

    assert find_violations(game.state) == ["cells 4 and 5 both carry modifiers"]


def test_snapshots_are_independent(scenario: type[GameScenario]):
    game = scenario()

    snapshot = game.engine.toggle_modifier(5)
    snapshot.board.modifiers[5] = ModifierKind.NONE
    snapshot.get_camel("white").position = 3

    assert game.state.board.modifier_at(5) is ModifierKind.BOOST
    assert game.get_camel("white").position == 15
    assert snapshot.get_state_hash() != game.state.get_state_hash()
