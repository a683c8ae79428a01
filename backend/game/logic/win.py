"""
Win detection for the single-suit puzzle.

A complete hand is one pair plus four melds (triplets or runs) using all
14 tiles. The search works on a 9-element count array: every rank with at
least two tiles is tried as the pair (ascending), then the remaining twelve
tiles are consumed from the lowest non-empty rank upward, trying a triplet
before a run at each step and undoing the move on failure.

The lowest non-empty rank has to be consumed by a meld that starts there,
so a rank that admits neither move ends the branch. The first decomposition
found is returned; callers only need existence, not the best split.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from game.logic.enums import MeldKind
from game.logic.exceptions import HandSizeError
from game.logic.tiles import HAND_SIZE, NUM_RANKS, hand_to_counts

MELDS_PER_HAND = 4
_TRIPLET_SIZE = 3
_PAIR_SIZE = 2
_LAST_RUN_START = NUM_RANKS - 3  # a run starting at 6 covers 6, 7, 8


@dataclass(frozen=True)
class Meld:
    """A triplet or run, identified by its lowest rank."""

    kind: MeldKind
    rank: int

    @property
    def tiles(self) -> tuple[int, int, int]:
        if self.kind == MeldKind.TRIPLET:
            return (self.rank, self.rank, self.rank)
        return (self.rank, self.rank + 1, self.rank + 2)


@dataclass(frozen=True)
class Completion:
    """Decomposition of a complete hand into a pair and four melds."""

    pair: int
    melds: tuple[Meld, ...]


def _try_melds(counts: list[int], melds: list[Meld]) -> bool:
    if len(melds) == MELDS_PER_HAND:
        return True

    rank = next((r for r, count in enumerate(counts) if count > 0), None)
    if rank is None:
        return False

    if counts[rank] >= _TRIPLET_SIZE:
        counts[rank] -= _TRIPLET_SIZE
        melds.append(Meld(MeldKind.TRIPLET, rank))
        if _try_melds(counts, melds):
            return True
        melds.pop()
        counts[rank] += _TRIPLET_SIZE

    if rank <= _LAST_RUN_START and counts[rank + 1] > 0 and counts[rank + 2] > 0:
        for offset in range(3):
            counts[rank + offset] -= 1
        melds.append(Meld(MeldKind.RUN, rank))
        if _try_melds(counts, melds):
            return True
        melds.pop()
        for offset in range(3):
            counts[rank + offset] += 1

    return False


def find_completion(hand: Sequence[int]) -> Completion | None:
    """
    Find a pair + four melds decomposition of a 14-tile hand.

    Returns None when the hand is not complete. Raises HandSizeError for a
    hand that does not hold exactly 14 tiles and ValueError for ranks
    outside 0-8.
    """
    if len(hand) != HAND_SIZE:
        raise HandSizeError(f"completion check needs {HAND_SIZE} tiles, got {len(hand)}")

    counts = hand_to_counts(hand)
    for pair in range(NUM_RANKS):
        if counts[pair] < _PAIR_SIZE:
            continue
        counts[pair] -= _PAIR_SIZE
        melds: list[Meld] = []
        found = _try_melds(counts, melds)
        counts[pair] += _PAIR_SIZE
        if found:
            return Completion(pair=pair, melds=tuple(melds))
    return None


def is_complete(hand: Sequence[int]) -> bool:
    return find_completion(hand) is not None
