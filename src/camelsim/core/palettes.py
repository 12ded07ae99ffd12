from typing import NamedTuple

from camelsim.core.types import CamelName, ModifierKind


class CamelPalette(NamedTuple):
    primary: str
    secondary: str | None = None
    outline: str = "#000000"


CAMEL_PALETTES: dict[CamelName, CamelPalette] = {
    "white": CamelPalette("#F5F5F5", None, "#808080"),
    "orange": CamelPalette("#FF8C00", None, "#8B4513"),
    "yellow": CamelPalette("#FFD700", None, "#B8860B"),
    "green": CamelPalette("#3AB71D", None, "#006400"),
    "blue": CamelPalette("#1E90FF", None, "#00008B"),
}

MODIFIER_COLORS: dict[ModifierKind, str] = {
    ModifierKind.NONE: "grey50",
    ModifierKind.BOOST: "bold #23d18b",
    ModifierKind.TRAP: "bold bright_red",
}


FALLBACK_PALETTE = CamelPalette("#8A2BE2", None, "#000")


def get_camel_palette(name: str) -> CamelPalette:
    return CAMEL_PALETTES.get(name, FALLBACK_PALETTE)


def get_camel_color(name: str) -> str:
    return get_camel_palette(name).primary
