"""Configuration schema for races and batch simulations using msgspec."""

from __future__ import annotations

import base64
import hashlib
import json
from pathlib import Path
from typing import get_args

import msgspec

from camelsim.core.types import (  # msgspec needs these at runtime
    CamelName,
    ModifierName,
)

DEFAULT_LEGS = 5


class ModifierPlacement(msgspec.Struct, frozen=True):
    """A modifier laid down at the start of every leg."""

    cell: int
    kind: ModifierName

    @property
    def repr(self) -> str:
        return f"{self.cell}={self.kind}"


class GameConfig(msgspec.Struct, frozen=True):
    """
    Immutable representation of a single race setup.
    Serves as both the execution config and the deduplication key.
    """

    seed: int
    legs: int = DEFAULT_LEGS
    modifiers: tuple[ModifierPlacement, ...] = ()
    # Manual one-cell corrections applied right after the start placement
    nudges: tuple[CamelName, ...] = ()
    rules: dict[str, int | float | str | bool] = msgspec.field(default_factory=dict)

    def _as_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "seed": self.seed,
            "legs": self.legs,
            "modifiers": [[m.cell, m.kind] for m in self.modifiers],
        }
        if self.nudges:
            data["nudges"] = list(self.nudges)
        if self.rules:
            data["rules"] = dict(sorted(self.rules.items()))
        return data

    def compute_hash(self) -> str:
        """Compute stable SHA-256 hash of this configuration."""
        canonical = json.dumps(self._as_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @property
    def encoded(self) -> str:
        """Shareable config string (Base64)."""
        canonical = json.dumps(self._as_dict(), sort_keys=True, separators=(",", ":"))
        return base64.urlsafe_b64encode(canonical.encode("utf-8")).decode("ascii")

    @classmethod
    def from_encoded(cls, encoded: str) -> GameConfig:
        """Decode from shareable string."""
        json_str = base64.urlsafe_b64decode(encoded).decode("utf-8")
        data = json.loads(json_str)
        modifiers = tuple(
            ModifierPlacement(cell=cell, kind=kind)
            for cell, kind in data.get("modifiers", [])
        )
        for placement in modifiers:
            if placement.kind not in get_args(ModifierName):
                msg = f"Unknown modifier '{placement.kind}' on cell {placement.cell}."
                raise ValueError(msg)
        nudges = tuple(data.get("nudges", []))
        for name in nudges:
            if name not in get_args(CamelName):
                msg = f"Unknown camel '{name}' in nudges."
                raise ValueError(msg)
        return cls(
            seed=data["seed"],
            legs=data.get("legs", DEFAULT_LEGS),
            modifiers=modifiers,
            nudges=nudges,
            rules=data.get("rules", {}),
        )

    @property
    def repr(self) -> str:
        """String representation for logging."""
        placements = ", ".join(m.repr for m in self.modifiers) or "no modifiers"
        return f"{self.legs} legs, {placements} (Seed: {self.seed}) - {self.encoded}"


class PartialGameConfig(msgspec.Struct):
    """
    Partial configuration for loading from TOML files.
    """

    seed: int | None = None
    legs: int | None = None
    modifiers: list[ModifierPlacement] | None = None
    nudges: list[CamelName] | None = None
    rules: dict[str, int | float | str | bool] | None = None

    @classmethod
    def from_toml(cls, path: Path) -> PartialGameConfig:
        with path.open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)


class SimulationConfig(msgspec.Struct):
    """
    TOML-backed configuration for batch race simulations.
    """

    races: int = 1000
    legs_per_race: int = DEFAULT_LEGS
    seed_offset: int = 0
    modifiers: list[ModifierPlacement] = msgspec.field(default_factory=list)
    rules: dict[str, int | float | str | bool] = msgspec.field(default_factory=dict)

    @classmethod
    def from_toml(cls, path: str) -> SimulationConfig:
        """Load configuration from a TOML file path."""
        with Path(path).open("rb") as f:
            # Decode bytes directly for max performance
            return msgspec.toml.decode(f.read(), type=cls)

    def game_configs(self):
        """One GameConfig per race, seeded consecutively from `seed_offset`."""
        for i in range(self.races):
            yield GameConfig(
                seed=self.seed_offset + i,
                legs=self.legs_per_race,
                modifiers=tuple(self.modifiers),
                rules=dict(self.rules),
            )
