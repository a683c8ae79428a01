"""SQLite-backed game repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from shared.dal.exceptions import PersistenceError
from shared.dal.game_repository import GameRepository
from shared.dal.models import GameRecord

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()

_INSERT_SQL = "INSERT INTO mahjong_game (id, owner, data, count, created_at) VALUES (?, ?, ?, ?, ?)"
_DELETE_SQL = "DELETE FROM mahjong_game WHERE id = ?"


def _row_values(record: GameRecord) -> tuple[str, str, str, int, str]:
    return (
        record.game_id,
        record.owner,
        record.data_json(),
        record.count,
        record.created_at.isoformat(),
    )


class SqliteGameRepository(GameRepository):
    """SQLite implementation of GameRepository.

    The hand and mountain are stored together as a JSON blob in the data
    column. Every write runs in an explicit transaction under an asyncio
    lock and is rolled back on any error, so a failed replace leaves the
    old record in place.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def get_game(self, game_id: str) -> GameRecord | None:
        """Retrieve a live game by the id of its latest message."""
        try:
            row = self._db.connection.execute(
                "SELECT id, owner, data, count, created_at FROM mahjong_game WHERE id = ?",
                (game_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to load game {game_id}") from exc
        if row is None:
            return None
        data = json.loads(row[2])
        return GameRecord(
            game_id=row[0],
            owner=row[1],
            hand=tuple(data["hand"]),
            mountain=tuple(data["mountain"]),
            count=row[3],
            created_at=datetime.fromisoformat(row[4]),
        )

    async def create_game(self, record: GameRecord) -> None:
        """Insert a new game. Raises PersistenceError on duplicate id."""
        async with self._lock:
            self._run_in_transaction([(_INSERT_SQL, _row_values(record))])
        logger.debug("game created", game_id=record.game_id, owner=record.owner)

    async def replace_game(self, old_game_id: str, record: GameRecord) -> None:
        """Delete the record under old_game_id and insert record in one transaction.

        Concurrent replaces of the same old id are not guarded: when the old
        record is already gone the insert still happens and a warning is logged.
        """
        async with self._lock:
            deleted = self._run_in_transaction(
                [
                    (_DELETE_SQL, (old_game_id,)),
                    (_INSERT_SQL, _row_values(record)),
                ],
            )
        if deleted[0] == 0:
            logger.warning("replaced game was already gone", old_game_id=old_game_id, game_id=record.game_id)
        logger.debug("game replaced", old_game_id=old_game_id, game_id=record.game_id)

    async def delete_game(self, game_id: str) -> None:
        """Delete a game. Deleting an unknown id logs a warning and is otherwise a no-op."""
        async with self._lock:
            deleted = self._run_in_transaction([(_DELETE_SQL, (game_id,))])
        if deleted[0] == 0:
            logger.warning("delete_game had no effect (not found)", game_id=game_id)

    def _run_in_transaction(self, statements: list[tuple[str, tuple]]) -> list[int]:
        """Execute statements atomically and return the rowcount of each."""
        conn = self._db.connection
        try:
            conn.execute("BEGIN")
            rowcounts = [conn.execute(sql, params).rowcount for sql, params in statements]
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise PersistenceError(str(exc)) from exc
        return rowcounts
