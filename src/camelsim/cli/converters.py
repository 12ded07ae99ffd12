from __future__ import annotations

import difflib
from typing import get_args

import cappa

from camelsim.core.types import CamelName, ModifierName
from camelsim.simulation.config import ModifierPlacement


def _normalize(s: str) -> str:
    """Normalize string: remove whitespace, dots, and convert to lowercase."""
    return s.strip().replace(" ", "").replace(".", "").lower()


def validate_camel_names(camel_args: list[str]) -> list[CamelName]:
    """
    Validate and resolve camel names using fuzzy matching.
    Input "B.L.U.E" matches "blue".
    """
    lookup_map: dict[str, CamelName] = {_normalize(k): k for k in get_args(CamelName)}
    camel_names: list[CamelName] = []
    for camel_arg in camel_args:
        normalized_input = _normalize(camel_arg)
        if normalized_input in lookup_map:
            camel_names.append(lookup_map[normalized_input])
            continue

        matches = difflib.get_close_matches(
            normalized_input,
            get_args(CamelName),
            n=3,
            cutoff=0.5,
        )
        msg = f"Camel '{camel_arg}' not found."
        if matches:
            msg += f" Did you mean: {', '.join(matches)}?"

        raise cappa.Exit(msg, code=1)
    return camel_names


def parse_modifier_placements(values: list[str]) -> list[ModifierPlacement]:
    """
    Parse "CELL=KIND" strings, e.g. "5=boost" or "9=trap".
    """
    placements: list[ModifierPlacement] = []
    lookup_map: dict[str, ModifierName] = {
        _normalize(k): k for k in get_args(ModifierName)
    }
    for item in values:
        if "=" not in item:
            msg = f"Invalid modifier format '{item}'. Expected 'CELL=boost|trap'."
            raise cappa.Exit(msg, code=1)

        cell_str, kind_str = (part.strip() for part in item.split("=", 1))
        if not cell_str.isdigit():
            msg = f"Invalid cell '{cell_str}' in '{item}'."
            raise cappa.Exit(msg, code=1)

        kind = lookup_map.get(_normalize(kind_str))
        if kind is None:
            matches = difflib.get_close_matches(
                _normalize(kind_str),
                get_args(ModifierName),
                n=2,
                cutoff=0.5,
            )
            msg = f"Modifier '{kind_str}' not found."
            if matches:
                msg += f" Did you mean: {', '.join(matches)}?"
            raise cappa.Exit(msg, code=1)

        placements.append(ModifierPlacement(cell=int(cell_str), kind=kind))
    return placements


def parse_house_rules(value: list[str]) -> dict[str, str | int | float | bool]:
    """
    Parse a list of key=value strings into a dictionary.
    Supports basic type inference (bool/int/float).
    """
    rules: dict[str, str | int | float | bool] = {}
    for item in value:
        if "=" not in item:
            msg = f"Invalid house rule format '{item}'. Expected 'key=value'."
            raise cappa.Exit(
                msg,
                code=1,
            )

        k, v = item.split("=", 1)
        k = k.strip()
        v = v.strip()

        # Basic type inference
        if v.lower() in ("true", "false"):
            rules[k] = v.lower() == "true"
        elif v.isdigit():
            rules[k] = int(v)
        else:
            try:
                rules[k] = float(v)
            except ValueError:
                rules[k] = v

    return rules
