import base64
import json
import logging

import cappa
import pytest

from camelsim.cli.commands.batch import BatchCommand
from camelsim.cli.commands.game import GameCommand
from camelsim.simulation.config import GameConfig, ModifierPlacement


@pytest.fixture
def no_console_logging(monkeypatch):
    monkeypatch.setattr("camelsim.cli.commands.game.configure_logging", lambda: None)


@pytest.fixture
def restore_engine_log_level():
    logger = logging.getLogger("camel_up")
    level = logger.level
    yield
    logger.setLevel(level)


def test_game_command_runs_seeded_race(no_console_logging, caplog):
    command = GameCommand(
        seed=3,
        legs=2,
        modifiers=[ModifierPlacement(6, "trap")],
    )

    with caplog.at_level(logging.INFO):
        command()

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Leg 2: ") for m in messages)
    assert "BOARD: Cell 6 - -> Trap" in messages


def test_game_command_reads_encoding(no_console_logging, caplog):
    encoded = GameConfig(seed=9, legs=1).encoded

    with caplog.at_level(logging.INFO):
        GameCommand(encoding=encoded)()

    messages = [r.getMessage() for r in caplog.records]
    assert any("(Seed: 9)" in m for m in messages)
    assert not any(m.startswith("Leg 2: ") for m in messages)



def test_game_command_rejects_encoding_with_unknown_modifier(no_console_logging):
    encoded = base64.urlsafe_b64encode(
        json.dumps({"seed": 1, "modifiers": [[5, "banana"]]}).encode("utf-8"),
    ).decode("ascii")

    with pytest.raises(cappa.Exit):
        GameCommand(encoding=encoded)()

def test_game_command_rejects_zero_legs(no_console_logging):
    with pytest.raises(cappa.Exit):
        GameCommand(seed=1, legs=0)()


def test_game_command_rejects_missing_config(no_console_logging, tmp_path):
    with pytest.raises(cappa.Exit):
        GameCommand(config_file=tmp_path / "missing.toml")()


def test_batch_command_prints_summary(restore_engine_log_level, capsys):
    exit_code = BatchCommand(races=4, legs_per_race=2)()

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Leaders over 4 races" in out
    for name in ("white", "orange", "yellow", "green", "blue"):
        assert name in out


def test_batch_command_missing_config(restore_engine_log_level, tmp_path):
    assert BatchCommand(config=tmp_path / "missing.toml")() == 1
