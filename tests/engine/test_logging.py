import logging

from rich.text import Text

from camelsim.core.palettes import get_camel_color
from camelsim.core.types import ModifierKind
from camelsim.engine.logging import CamelLogHighlighter, RichMarkupFormatter
from camelsim.engine.scenario import GameScenario


def test_engine_logs_rolls_and_moves(scenario: type[GameScenario], caplog):
    game = scenario(picks=["yellow"], dice_rolls=[2])

    with caplog.at_level(logging.INFO, logger="camel_up"):
        game.advance()

    messages = [r.getMessage() for r in caplog.records]
    assert "Dice Roll: yellow -> 2" in messages
    assert "Move: yellow 15->1 carrying green, blue" in messages


def test_log_records_carry_engine_context(scenario: type[GameScenario], caplog):
    game = scenario(picks=["blue"], dice_rolls=[3])

    with caplog.at_level(logging.INFO, logger="camel_up"):
        game.advance()

    record = next(r for r in caplog.records if r.getMessage().startswith("Move"))
    assert record.leg == 1
    assert record.camel_repr == "15.4:blue"
    assert record.engine_id == game.engine.log_context.engine_id


def test_quiet_engine_logs_nothing(scenario: type[GameScenario], caplog):
    game = scenario(picks=["blue"], dice_rolls=[3], verbose=False)

    with caplog.at_level(logging.DEBUG, logger="camel_up"):
        game.engine.toggle_modifier(5)
        game.engine.toggle_modifier(6)
        game.engine.place_modifier(9, ModifierKind.TRAP)
        game.advance()
        game.engine.dump_state()

    assert not [r for r in caplog.records if r.name.startswith("camel_up")]


def test_modifier_changes_log_through_the_engine(
    scenario: type[GameScenario],
    caplog,
):
    game = scenario()

    with caplog.at_level(logging.DEBUG, logger="camel_up"):
        game.engine.toggle_modifier(5)
        game.engine.toggle_modifier(6)
        game.engine.place_modifier(9, ModifierKind.TRAP)
        game.engine.place_modifier(10, ModifierKind.BOOST)

    records = [r for r in caplog.records if r.getMessage().startswith("BOARD")]
    assert [r.getMessage() for r in records] == [
        "BOARD: Cell 5 - -> Boost",
        "BOARD: Toggle at cell 6 blocked.",
        "BOARD: Cell 9 - -> Trap",
        "BOARD: Cannot place Boost on cell 10",
    ]
    engine_logger = f"camel_up.engine.{game.engine.log_context.engine_id}"
    assert all(r.name == engine_logger for r in records)


def test_formatter_prefixes_leg_and_camel():
    record = logging.LogRecord("camel_up", logging.INFO, __file__, 1, "Move: x", None, None)
    record.leg = 2
    record.turn_log_count = 1
    record.camel_repr = "3.0:white"
    record.engine_id = 7

    formatted = RichMarkupFormatter().format(record)

    assert "7 L2.3.0:white.1" in formatted
    assert formatted.endswith("Move: x")


def test_highlighter_colors_camel_names():
    text = Text("Move: 4.1:orange 3->4")

    CamelLogHighlighter().highlight(text)

    styles = {str(span.style) for span in text.spans}
    assert f"bold {get_camel_color('orange')}" in styles


def test_dump_state_lists_stacks_dice_and_modifiers(
    scenario: type[GameScenario],
    caplog,
):
    game = scenario(stacks={3: ["white", "orange"], 7: ["yellow", "green", "blue"]})
    game.engine.place_modifier(5, ModifierKind.TRAP)

    with caplog.at_level(logging.INFO, logger="camel_up"):
        game.engine.dump_state()

    messages = [r.getMessage() for r in caplog.records]
    assert "  Cell 03: white, orange" in messages
    assert "  Cell 07: yellow, green, blue" in messages
    assert "  Cell 05: Trap" in messages
