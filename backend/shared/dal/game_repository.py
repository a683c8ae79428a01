"""Abstract interface for live game persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import GameRecord


class GameRepository(ABC):
    """Keyed store of live games.

    Holds at most one record per logical game. A record is reachable only
    through the id of the latest message of its game; replace_game moves it
    to a new id in one transaction so the old id stops resolving.
    Implementations raise PersistenceError when the store fails.
    """

    @abstractmethod
    async def get_game(self, game_id: str) -> GameRecord | None: ...

    @abstractmethod
    async def create_game(self, record: GameRecord) -> None: ...

    @abstractmethod
    async def replace_game(self, old_game_id: str, record: GameRecord) -> None: ...

    @abstractmethod
    async def delete_game(self, game_id: str) -> None: ...
