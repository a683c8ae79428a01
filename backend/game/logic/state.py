"""
Game state and turn transitions.

GameState is immutable: every transition returns a new instance and leaves
the input untouched, so a rejected command can never leave a half-applied
state behind. Persistence is handled by the session layer.

Turn flow:
    create_game  -> 14 tiles dealt, turn_count = 1
    drop_tile    -> remove the tile at a 1-based position, draw a replacement,
                    turn_count += 1 (hand stays at 14 until the pile runs out)
    check_hand   -> completion check; always ends the game
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from game.logic.draw_pile import DrawPile
from game.logic.enums import CheckOutcome
from game.logic.exceptions import InvalidSelectorError, PileExhaustedError
from game.logic.tiles import HAND_SIZE, sort_tiles, validate_rank
from game.logic.win import Completion, find_completion

if TYPE_CHECKING:
    import random

FIRST_TURN = 1


class GameState(BaseModel):
    """Immutable snapshot of one player's game.

    game_id is the id of the latest message representing the game (empty
    until the first reply is stored); created_at is set once the game is
    stored and carries over as the game moves along its message chain.
    """

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    game_id: str = ""
    created_at: datetime | None = None
    hand: tuple[int, ...]
    draw_pile: DrawPile = Field(default_factory=DrawPile.full)
    turn_count: int = Field(default=FIRST_TURN, ge=FIRST_TURN)

    @field_validator("hand")
    @classmethod
    def _validate_hand(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if len(v) not in (HAND_SIZE - 1, HAND_SIZE):
            raise ValueError(f"hand must hold {HAND_SIZE - 1} or {HAND_SIZE} tiles, got {len(v)}")
        for rank in v:
            validate_rank(rank)
        return sort_tiles(v)


class DropResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: GameState
    dropped: int
    drawn: int | None = None
    pile_exhausted: bool = False  # hand left at 13 tiles, only check remains


class CheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: CheckOutcome
    turn_count: int
    completion: Completion | None = None

    @property
    def is_win(self) -> bool:
        return self.outcome != CheckOutcome.MISJUDGE


def create_game(owner: str, rng: random.Random) -> GameState:
    """Deal 14 tiles from a fresh pile. The new game starts on turn 1."""
    pile = DrawPile.full()
    hand: list[int] = []
    for _ in range(HAND_SIZE):
        rank, pile = pile.draw(rng)
        if rank is None:  # pragma: no cover
            raise RuntimeError("draw pile ran out during the deal")
        hand.append(rank)
    return GameState(owner=owner, hand=sort_tiles(hand), draw_pile=pile, turn_count=FIRST_TURN)


def drop_tile(state: GameState, position: int, rng: random.Random) -> DropResult:
    """
    Discard the tile at a 1-based position of the sorted hand and draw a replacement.

    Raises InvalidSelectorError when position is outside 1..len(hand) and
    PileExhaustedError when the hand is already short because the pile ran
    out on an earlier turn. When the pile runs out on this drop the
    transition still succeeds with a 13-tile hand and pile_exhausted=True.
    """
    if len(state.hand) < HAND_SIZE:
        raise PileExhaustedError("no tiles left to draw, only check is possible")
    if not (1 <= position <= len(state.hand)):
        raise InvalidSelectorError(position=position, hand_size=len(state.hand))

    hand = list(state.hand)
    dropped = hand.pop(position - 1)

    drawn, pile = state.draw_pile.draw(rng)
    if drawn is not None:
        hand.append(drawn)

    new_state = state.model_copy(
        update={
            "hand": sort_tiles(hand),
            "draw_pile": pile,
            "turn_count": state.turn_count + 1,
        },
    )
    return DropResult(state=new_state, dropped=dropped, drawn=drawn, pile_exhausted=drawn is None)


def check_hand(state: GameState) -> CheckResult:
    """
    Run the completion check. Any outcome ends the game.

    A 13-tile hand (pile exhausted) can never be complete and is reported
    as a misjudge without invoking the checker.
    """
    completion = find_completion(state.hand) if len(state.hand) == HAND_SIZE else None
    if completion is None:
        outcome = CheckOutcome.MISJUDGE
    elif state.turn_count == FIRST_TURN:
        outcome = CheckOutcome.WIN_FIRST_TURN
    else:
        outcome = CheckOutcome.WIN
    return CheckResult(outcome=outcome, turn_count=state.turn_count, completion=completion)
