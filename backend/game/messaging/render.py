"""Hand rendering for replies."""

from collections.abc import Sequence
from typing import Protocol

from game.logic.tiles import hand_to_display


class HandRenderer(Protocol):
    """Turns a hand into the opaque reference placed in the reply content."""

    def render(self, hand: Sequence[int]) -> str: ...


class TextHandRenderer:
    """Renders the hand as a row of tile glyphs above their 1-based positions."""

    def render(self, hand: Sequence[int]) -> str:
        positions = " ".join(str(i) for i in range(1, len(hand) + 1))
        return f"{hand_to_display(hand)}\n{positions}"
