"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.exceptions import PersistenceError
from shared.dal.game_repository import GameRepository
from shared.dal.models import GameRecord

__all__ = [
    "GameRecord",
    "GameRepository",
    "PersistenceError",
]
