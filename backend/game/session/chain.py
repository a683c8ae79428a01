"""
Identity chain linking successive reply messages to one logical game.

A live game is stored under the id of the most recent reply the bot sent
for it. Each mutation moves the record to the id of the new reply and
retires the old one in the same transaction, so only the latest message
of a game resolves. Replies to older messages find nothing, which is how
"the game has moved on" is detected.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from game.logic.draw_pile import DrawPile
from game.logic.exceptions import NotOwnerError, UnknownReferenceError
from game.logic.state import GameState
from shared.dal.models import GameRecord

if TYPE_CHECKING:
    from shared.dal.game_repository import GameRepository

logger = structlog.get_logger()


def to_record(game_id: str, state: GameState) -> GameRecord:
    return GameRecord(
        game_id=game_id,
        owner=state.owner,
        hand=state.hand,
        mountain=state.draw_pile.counts,
        count=state.turn_count,
        created_at=state.created_at or datetime.now(UTC),
    )


def to_state(record: GameRecord) -> GameState:
    return GameState(
        owner=record.owner,
        game_id=record.game_id,
        created_at=record.created_at,
        hand=record.hand,
        draw_pile=DrawPile(counts=record.mountain),
        turn_count=record.count,
    )


class SessionChain:
    """Loads, authorizes, and persists games along the message identity chain."""

    def __init__(self, repository: GameRepository) -> None:
        self._repository = repository

    async def resolve(self, reference_id: str | None, actor: str) -> GameState:
        """
        Load the game whose latest message is reference_id on behalf of actor.

        Raises UnknownReferenceError when there is no reference or it does not
        resolve, and NotOwnerError when actor did not start the game. Neither
        touches the store.
        """
        if not reference_id:
            raise UnknownReferenceError(reference_id)
        record = await self._repository.get_game(reference_id)
        if record is None:
            raise UnknownReferenceError(reference_id)
        if record.owner != actor:
            logger.info("rejected command from non-owner", game_id=reference_id, actor=actor)
            raise NotOwnerError(reference_id=reference_id, actor=actor)
        return to_state(record)

    async def start(self, game_id: str, state: GameState) -> GameState:
        """Store a freshly dealt game under the id of its first reply."""
        record = to_record(game_id, state)
        await self._repository.create_game(record)
        logger.info("game started", game_id=game_id, owner=state.owner)
        return to_state(record)

    async def advance(self, state: GameState, new_game_id: str) -> GameState:
        """
        Move the game to new_game_id, storing state.

        state.game_id is the id being retired; it stops resolving once this
        returns. The creation time carries over to the new record.
        """
        if not state.game_id:
            raise ValueError("cannot advance a game that was never stored")
        record = to_record(new_game_id, state)
        await self._repository.replace_game(state.game_id, record)
        logger.info(
            "game advanced",
            old_game_id=state.game_id,
            game_id=new_game_id,
            turn_count=state.turn_count,
        )
        return to_state(record)

    async def terminate(self, state: GameState) -> None:
        """Remove a finished game so its id no longer resolves."""
        await self._repository.delete_game(state.game_id)
        logger.info("game terminated", game_id=state.game_id, turn_count=state.turn_count)
