import random
from collections.abc import Sequence

import pytest

from game.logic.draw_pile import DrawPile
from game.logic.state import GameState
from game.messaging.render import TextHandRenderer
from game.messaging.router import CommandRouter
from game.server.app import create_app
from game.server.settings import BotServerSettings
from game.session.chain import SessionChain
from game.tests.helpers.events import ALICE
from game.tests.mocks import FakeSigner, InMemoryGameRepository

# pair 0, triplets 1/2/3, run 4-5-6
COMPLETE_HAND = (0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 5, 6)
INCOMPLETE_HAND = (0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 5, 7)

TEST_SECRET_KEY = "01" * 32
FIXED_NOW = 1_700_000_100


def create_state(
    hand: Sequence[int] = COMPLETE_HAND,
    *,
    owner: str = ALICE,
    counts: Sequence[int] | None = None,
    turn_count: int = 1,
    game_id: str = "",
) -> GameState:
    """Create a GameState with sensible defaults for testing."""
    pile = DrawPile(counts=tuple(counts)) if counts is not None else DrawPile.full()
    return GameState(owner=owner, hand=tuple(hand), draw_pile=pile, turn_count=turn_count, game_id=game_id)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def repository():
    return InMemoryGameRepository()


@pytest.fixture
def chain(repository):
    return SessionChain(repository)


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def command_router(chain, signer, rng):
    return CommandRouter(chain, signer, TextHandRenderer(), rng=rng, clock=lambda: FIXED_NOW)


@pytest.fixture
def settings(tmp_path):
    return BotServerSettings(secret_key=TEST_SECRET_KEY, database_path=str(tmp_path / "test.db"))


@pytest.fixture
def app(settings, command_router):
    return create_app(settings=settings, command_router=command_router)
