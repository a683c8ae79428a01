"""Persistence models for the data access layer."""

from datetime import datetime

from pydantic import BaseModel, Field


class GameRecord(BaseModel, frozen=True):
    """Stored snapshot of one live game, keyed by the latest reply message id."""

    game_id: str = Field(min_length=1)  # id of the most recent message representing this game
    owner: str = Field(min_length=1)  # pubkey of the player who started the game
    hand: tuple[int, ...]
    mountain: tuple[int, ...]  # remaining count per rank
    count: int = Field(ge=1)  # turn counter, 1 right after the deal
    created_at: datetime

    def data_json(self) -> str:
        """Serialize the hand and mountain into the blob stored in the data column."""
        return self.model_dump_json(include={"hand", "mountain"})
