"""Leg simulator for a circular camel race."""

from camelsim.core.state import GameRules, GameState
from camelsim.engine.game_engine import GameEngine

__all__ = ["GameEngine", "GameRules", "GameState"]
