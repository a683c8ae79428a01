"""
Tile representation utilities for the single-suit puzzle.

Tiles are plain integer ranks 0-8 of one suit (pin). There is no tile
identity: two tiles of the same rank are interchangeable, so a hand is
fully described by its sorted ranks or by a 9-element count array.
"""

from collections.abc import Iterable

NUM_RANKS = 9
COPIES_PER_RANK = 4
TOTAL_TILES = NUM_RANKS * COPIES_PER_RANK  # 36
HAND_SIZE = 14

RANK_MIN = 0
RANK_MAX = NUM_RANKS - 1

# U+1F019 is MAHJONG TILE ONE OF CIRCLES, followed by two..nine
_PIN_GLYPH_START = 0x1F019


def validate_rank(rank: int) -> None:
    """Raise ValueError unless rank is an integer in [0, 8]."""
    if isinstance(rank, bool) or not isinstance(rank, int):
        raise ValueError(f"rank must be an int, got {type(rank).__name__}")
    if not (RANK_MIN <= rank <= RANK_MAX):
        raise ValueError(f"rank must be in [{RANK_MIN}, {RANK_MAX}], got {rank}")


def sort_tiles(tiles: Iterable[int]) -> tuple[int, ...]:
    """Sort tiles by rank."""
    return tuple(sorted(tiles))


def hand_to_counts(tiles: Iterable[int]) -> list[int]:
    """
    Convert a list of ranks to a count array.

    The array has 9 elements, where each index is a rank and the value is
    the number of tiles of that rank in the hand.
    """
    counts = [0] * NUM_RANKS
    for rank in tiles:
        validate_rank(rank)
        counts[rank] += 1
    return counts


def counts_to_tiles(counts: Iterable[int]) -> tuple[int, ...]:
    """Expand a count array back into a sorted tuple of ranks."""
    return tuple(rank for rank, count in enumerate(counts) for _ in range(count))


def tile_to_display(rank: int) -> str:
    validate_rank(rank)
    return chr(_PIN_GLYPH_START + rank)


def hand_to_display(tiles: Iterable[int]) -> str:
    """Render a hand as a row of tile glyphs."""
    return "".join(tile_to_display(rank) for rank in tiles)
