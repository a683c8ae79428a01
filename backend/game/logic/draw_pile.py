"""
Draw pile (mountain) state and operations.

The pile is a multiset of undrawn tiles held as a per-rank count array.
It starts with four copies of each of the nine ranks (36 tiles); the
opening deal takes 14, leaving 22 for the rest of the game.

Draws are uniform over the remaining tile instances: a rank with three
copies left is three times as likely as a rank with one copy left.
"""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict, field_validator

from game.logic.tiles import COPIES_PER_RANK, NUM_RANKS


class DrawPile(BaseModel):
    """Immutable draw pile. Drawing returns a new pile."""

    model_config = ConfigDict(frozen=True)

    counts: tuple[int, ...] = (COPIES_PER_RANK,) * NUM_RANKS

    @field_validator("counts")
    @classmethod
    def _validate_counts(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if len(v) != NUM_RANKS:
            raise ValueError(f"counts must have {NUM_RANKS} entries, got {len(v)}")
        if any(not (0 <= c <= COPIES_PER_RANK) for c in v):
            raise ValueError(f"each count must be in [0, {COPIES_PER_RANK}], got {v}")
        return v

    @classmethod
    def full(cls) -> DrawPile:
        return cls()

    @property
    def remaining(self) -> int:
        return sum(self.counts)

    @property
    def is_empty(self) -> bool:
        return self.remaining == 0

    def draw(self, rng: random.Random) -> tuple[int | None, DrawPile]:
        """
        Draw one tile uniformly at random from the remaining tiles.

        Returns (rank, new_pile). When the pile is empty returns (None, self)
        without changing anything.
        """
        remaining = self.remaining
        if remaining == 0:
            return None, self

        pick = rng.randrange(remaining)
        for rank, count in enumerate(self.counts):
            if pick < count:
                break
            pick -= count

        counts = list(self.counts)
        counts[rank] -= 1
        return rank, self.model_copy(update={"counts": tuple(counts)})
