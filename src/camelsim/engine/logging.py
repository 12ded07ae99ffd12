from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, get_args, override

from rich.highlighter import Highlighter
from rich.logging import RichHandler

from camelsim.core.palettes import MODIFIER_COLORS, get_camel_color
from camelsim.core.types import CamelName, ModifierKind

if TYPE_CHECKING:
    from rich.text import Text

    from camelsim.engine.game_engine import GameEngine

CAMEL_NAMES = set(get_args(CamelName))

# --- PATTERNS ---
# Captures "15.2:white" or "3:blue" (prefix) and a bare "white" (name)
CAMEL_COMPOSITE_PATTERN = re.compile(
    rf"(?P<prefix>[\d\.]*:)?\b(?P<name>{'|'.join(map(re.escape, CAMEL_NAMES))})\b",
)
BOOST_PATTERN = re.compile(r"\bBoost\b")
TRAP_PATTERN = re.compile(r"\bTrap\b")

COLOR = {
    "move": "bold #23d18b",  # light green
    "nudge": "bold #87d700",  # yellow-ish green
    "warning": "bold bright_red",
    "prefix": "grey50",
    "board": "bold #d670d6",  # magenta
    "dice_roll": "bold #f5f543",  # yellow
    "leg": "bold #29b8db",  # cyan
}


class ContextFilter(logging.Filter):
    """Inject per-engine runtime context into every log record."""

    def __init__(self, engine: GameEngine, name: str = "") -> None:
        super().__init__(name)
        self.engine: GameEngine = engine

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        logctx = self.engine.log_context
        record.leg = logctx.leg
        record.turn_log_count = logctx.turn_log_count
        record.camel_repr = logctx.current_camel_repr
        record.engine_id = logctx.engine_id
        logctx.inc_log_count()
        return True


class RichMarkupFormatter(logging.Formatter):
    @override
    def format(self, record: logging.LogRecord) -> str:
        leg = getattr(record, "leg", 0)
        turn_log_count = getattr(record, "turn_log_count", 0)
        camel_repr = getattr(record, "camel_repr", "_")
        engine_id = getattr(record, "engine_id", 0)

        prefix = f"{engine_id} L{leg}.{camel_repr}.{turn_log_count}"
        message = record.getMessage()

        # The highlighter applies stronger colors on top of the grey prefix.
        return f"[{COLOR['prefix']}]{prefix:<19}[/{COLOR['prefix']}]  {message}"


class CamelLogHighlighter(Highlighter):
    @override
    def highlight(self, text: Text) -> None:
        text.highlight_regex(r"\bMove\b", COLOR["move"])
        text.highlight_regex(r"\bNudge\b", COLOR["nudge"])
        text.highlight_regex(r"\bBOARD\b", COLOR["board"])
        text.highlight_regex(r"\bDice Roll\b", COLOR["dice_roll"])
        text.highlight_regex(r"=== .* ===", COLOR["leg"])
        text.highlight_regex(BOOST_PATTERN, MODIFIER_COLORS[ModifierKind.BOOST])
        text.highlight_regex(TRAP_PATTERN, MODIFIER_COLORS[ModifierKind.TRAP])
        text.highlight_regex(r"!!!", COLOR["warning"])

        # Each camel name (and its position prefix) in the camel's own color
        for match in CAMEL_COMPOSITE_PATTERN.finditer(text.plain):
            hex_color = get_camel_color(match.group("name"))
            if match.group("prefix"):
                start, end = match.span("prefix")
                text.stylize(hex_color, start=start, end=end)
            start, end = match.span("name")
            text.stylize(f"bold {hex_color}", start=start, end=end)


def configure_logging(level: int = logging.INFO) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)
    handler = RichHandler(
        markup=True,
        show_path=False,
        show_time=False,
        highlighter=CamelLogHighlighter(),
    )
    handler.setFormatter(RichMarkupFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
