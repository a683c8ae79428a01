from __future__ import annotations

import secrets
import time
from typing import TYPE_CHECKING

import structlog

from game.logic.enums import CheckOutcome, CommandKind
from game.logic.exceptions import InvalidSelectorError, NotOwnerError, PileExhaustedError, UnknownReferenceError
from game.logic.state import check_hand, create_game, drop_tile
from game.messaging.commands import HELP_TEXT, parse_command
from game.messaging.events import Event, find_reference, reply_tags
from game.messaging.signer import sign_event

if TYPE_CHECKING:
    import random
    from collections.abc import Callable

    from game.logic.state import GameState
    from game.messaging.commands import Command
    from game.messaging.render import HandRenderer
    from game.messaging.signer import EventSigner
    from game.session.chain import SessionChain

logger = structlog.get_logger()

MSG_INVALID_NUMBER = "Invalid number"
MSG_INVALID_REFERENCE = "Invalid reference"
MSG_NOT_OWNER = "You are not game owner"
MSG_NO_MORE_TILES = "No more tiles"
MSG_MISJUDGE = "Misjudge, game over 😵"
MSG_WIN_FIRST_TURN = "Win, game over (天和) 😳"
MSG_WIN = "Win, game over (count: {count}) 😆"


def check_message(outcome: CheckOutcome, turn_count: int) -> str:
    if outcome == CheckOutcome.WIN_FIRST_TURN:
        return MSG_WIN_FIRST_TURN
    if outcome == CheckOutcome.WIN:
        return MSG_WIN.format(count=turn_count)
    return MSG_MISJUDGE


class CommandRouter:
    """
    Routes inbound events to game commands and builds the signed reply.

    Every reply, including denials, is a signed event addressed to the
    sender. A reply is signed before anything is persisted because its id
    becomes the new key of the game. Persistence errors propagate to the
    caller with nothing stored.
    """

    def __init__(
        self,
        chain: SessionChain,
        signer: EventSigner,
        renderer: HandRenderer,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._chain = chain
        self._signer = signer
        self._renderer = renderer
        self._rng = rng or secrets.SystemRandom()
        self._clock = clock

    async def handle_event(self, event: Event) -> Event | None:
        """Run the command in event and return the reply, or None when there is nothing to answer."""
        command = parse_command(event.content)
        if command is None:
            return None

        reference = find_reference(event.tags)
        log = logger.bind(command=command.kind, actor=event.pubkey, reference=reference)

        if command.kind == CommandKind.HELP:
            return self._reply(event, HELP_TEXT)
        if command.kind == CommandKind.START:
            if reference is not None:
                log.debug("ignoring start inside a thread")
                return None
            return await self._handle_start(event)

        try:
            state = await self._chain.resolve(reference, event.pubkey)
        except UnknownReferenceError:
            log.info("unknown reference")
            return self._reply(event, MSG_INVALID_REFERENCE)
        except NotOwnerError:
            return self._reply(event, MSG_NOT_OWNER)

        if command.kind == CommandKind.DROP:
            return await self._handle_drop(event, command, state)
        return await self._handle_check(event, state)

    async def _handle_start(self, event: Event) -> Event:
        state = create_game(event.pubkey, self._rng)
        reply = self._reply(event, self._renderer.render(state.hand))
        await self._chain.start(reply.id, state)
        return reply

    async def _handle_drop(self, event: Event, command: Command, state: GameState) -> Event:
        try:
            result = drop_tile(state, command.position or 0, self._rng)
        except InvalidSelectorError as e:
            logger.info("invalid drop selector", game_id=state.game_id, error=str(e))
            return self._reply(event, MSG_INVALID_NUMBER)
        except PileExhaustedError:
            return self._reply(event, MSG_NO_MORE_TILES)

        content = self._renderer.render(result.state.hand)
        if result.pile_exhausted:
            content = f"{content}\n{MSG_NO_MORE_TILES}"
        reply = self._reply(event, content)
        await self._chain.advance(result.state, reply.id)
        return reply

    async def _handle_check(self, event: Event, state: GameState) -> Event:
        result = check_hand(state)
        reply = self._reply(event, check_message(result.outcome, result.turn_count))
        await self._chain.terminate(state)
        logger.info("game checked", game_id=state.game_id, outcome=result.outcome, turn_count=result.turn_count)
        return reply

    def _reply(self, inbound: Event, content: str) -> Event:
        return sign_event(
            self._signer,
            created_at=int(self._clock()),
            kind=inbound.kind,
            tags=reply_tags(inbound),
            content=content,
        )
