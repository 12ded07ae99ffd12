from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from camelsim.core.state import CamelState, GameState


def camels_at(state: GameState, position: int) -> list[CamelState]:
    """Camels on `position`, bottom to top."""
    return sorted(
        (c for c in state.camels if c.position == position),
        key=lambda c: c.stack_rank,
    )


def reform_stack(state: GameState, position: int) -> None:
    """Renumber ranks on `position` to 0..k-1, keeping their order."""
    for rank, camel in enumerate(camels_at(state, position)):
        camel.stack_rank = rank


def carried_stack(state: GameState, camel: CamelState) -> list[CamelState]:
    """`camel` and everyone stacked above it, bottom to top."""
    return [
        c for c in camels_at(state, camel.position) if c.stack_rank >= camel.stack_rank
    ]


def place_stack(
    state: GameState,
    carried: Sequence[CamelState],
    destination: int,
    *,
    below: bool,
) -> None:
    """Move `carried` onto `destination`, under or over the camels already there.

    Ranks on `destination` are dense afterwards. The cells the camels came
    from are left for the caller to reform.
    """
    carried_ids = {id(c) for c in carried}
    occupants = [c for c in camels_at(state, destination) if id(c) not in carried_ids]

    ordered = [*carried, *occupants] if below else [*occupants, *carried]
    for camel in carried:
        camel.position = destination
    for rank, camel in enumerate(ordered):
        camel.stack_rank = rank
