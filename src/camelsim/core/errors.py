from __future__ import annotations


class CamelSimError(Exception):
    """Base class for errors raised by the engine."""


class InvariantViolationError(CamelSimError, AssertionError):
    """The game state broke one of its structural invariants.

    Always a defect in move resolution or stack reformation, never a
    condition callers are expected to recover from.
    """


class UnknownCamelError(CamelSimError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name: str = name

    def __str__(self) -> str:
        return f"Unknown camel '{self.name}'."


class DiceAlreadyRolledError(CamelSimError):
    """A camel was asked to move by die roll twice within one leg."""
