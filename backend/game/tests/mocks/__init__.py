from game.tests.mocks.repository import FailingGameRepository, InMemoryGameRepository
from game.tests.mocks.signer import FakeSigner

__all__ = [
    "FailingGameRepository",
    "FakeSigner",
    "InMemoryGameRepository",
]
