"""
Connection Infrastructure & Write Models
========================================

Thread-safe SQLite connection manager used as the query executor for the
users/games queries, plus small write-side models for inserting users,
games and their links.
"""

import sqlite3
import threading
import uuid
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable
from contextlib import contextmanager
import logging
import time

from config.settings import DATABASE_PATH, DATABASE_TIMEOUT, QUERY_LOG_MAX_CHARS
from .migration import apply_migration

logger = logging.getLogger(__name__)


@runtime_checkable
class QueryExecutor(Protocol):
    """Anything able to run one parameterized statement and return its rows.

    Rows must be addressable by column name. ``DatabaseConnection`` is the
    implementation shipped here; callers may inject their own.
    """

    def execute_query(self, query: str, params: tuple = ()) -> Sequence[Mapping[str, Any]]:
        ...


def _first_line(query: str) -> str:
    first_line = query.strip().splitlines()[0] if query else ""
    return first_line[:QUERY_LOG_MAX_CHARS]


class DatabaseConnection:
    """Thread-safe SQLite connection manager with one connection per thread.

    ``":memory:"`` is backed by a named shared-cache in-memory database so
    every thread sees the same tables. An anchor connection held by the
    instance keeps that database alive while per-thread connections come
    and go.
    """

    def __init__(self, db_path: Union[str, Path] = DATABASE_PATH,
                 timeout: float = DATABASE_TIMEOUT):
        self.db_path = str(db_path)
        self.timeout = timeout
        self._local = threading.local()
        self._anchor = None
        if self.is_memory:
            self._database = f"file:gamesdb-{uuid.uuid4().hex}?mode=memory&cache=shared"
            self._anchor = self._connect()
        else:
            self._database = self.db_path
        self._ensure_database()

    @property
    def is_memory(self) -> bool:
        return self.db_path == ":memory:"

    def _ensure_database(self):
        """Ensure database exists and schema is applied."""
        if self.is_memory:
            logger.info("Using in-memory database")
            self._create_database()
            return

        path = Path(self.db_path)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Creating new database: {self.db_path}")
            self._create_database()
        else:
            logger.info(f"Using existing database: {self.db_path}")

    def _create_database(self):
        """Create database with schema."""
        apply_migration(self)

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(
            self._database,
            check_same_thread=False,
            timeout=self.timeout,
            uri=self.is_memory
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        return connection

    @contextmanager
    def get_connection(self):
        """Get thread-local database connection with automatic cleanup."""
        if not hasattr(self._local, 'connection'):
            self._local.connection = self._connect()

        try:
            yield self._local.connection
        except Exception as e:
            self._local.connection.rollback()
            logger.error(f"Database operation failed: {e}")
            raise

    def execute_query(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        """Execute SELECT query and return results."""
        with self.get_connection() as conn:
            t0 = time.perf_counter()
            cursor = conn.execute(query, params)
            rows = cursor.fetchall()
            dt = time.perf_counter() - t0
            logger.info(f"DB timing: execute_query {dt:.3f}s rows={len(rows)} | {_first_line(query)}")
            return rows

    def execute_update(self, query: str, params: tuple = ()) -> int:
        """Execute INSERT/UPDATE/DELETE and return affected rows."""
        with self.get_connection() as conn:
            t0 = time.perf_counter()
            cursor = conn.execute(query, params)
            conn.commit()
            dt = time.perf_counter() - t0
            logger.info(f"DB timing: execute_update {dt:.3f}s affected={cursor.rowcount} | {_first_line(query)}")
            return cursor.rowcount

    def execute_many(self, query: str, params_list: List[tuple]) -> int:
        """Execute query with multiple parameter sets in one transaction."""
        with self.get_connection() as conn:
            t0 = time.perf_counter()
            cursor = conn.executemany(query, params_list)
            conn.commit()
            dt = time.perf_counter() - t0
            logger.info(f"DB timing: execute_many {dt:.3f}s affected={cursor.rowcount} batches={len(params_list)} | {_first_line(query)}")
            return cursor.rowcount

    def execute_script(self, script: str) -> None:
        """Execute a multi-statement SQL script (schema changes)."""
        with self.get_connection() as conn:
            t0 = time.perf_counter()
            conn.executescript(script)
            conn.commit()
            dt = time.perf_counter() - t0
            logger.info(f"DB timing: execute_script {dt:.3f}s")

    def close(self):
        """Close the thread-local database connection."""
        if hasattr(self._local, 'connection'):
            try:
                self._local.connection.commit()
                self._local.connection.close()
                logger.debug("Database connection closed")
            except sqlite3.Error as e:
                logger.warning(f"Error closing database connection: {e}")
            finally:
                try:
                    del self._local.connection
                except AttributeError:
                    pass  # Already deleted

    def dispose(self):
        """Close this thread's connection and release an in-memory database."""
        self.close()
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None
            logger.debug("In-memory database released")


class GameModel:
    """Write operations on the games table."""

    @classmethod
    def insert(cls, db: DatabaseConnection, title: str, game_id: Optional[str] = None) -> str:
        """Insert a game and return its generated id."""
        game_id = game_id or str(uuid.uuid4())
        db.execute_update("INSERT INTO games (id, title) VALUES (?, ?)", (game_id, title))
        logger.info(f"Created game {game_id} ({title})")
        return game_id

    @classmethod
    def delete(cls, db: DatabaseConnection, game_id: str) -> bool:
        """Delete a game; its users_games rows go with it."""
        deleted = db.execute_update("DELETE FROM games WHERE id = ?", (game_id,))
        return deleted > 0


class UserModel:
    """Write operations on the users and users_games tables."""

    @classmethod
    def insert(cls, db: DatabaseConnection, first_name: str, last_name: str, email: str,
               user_id: Optional[str] = None) -> str:
        """Insert a user and return its generated id."""
        user_id = user_id or str(uuid.uuid4())
        query = """
            INSERT INTO users (id, first_name, last_name, email)
            VALUES (?, ?, ?, ?)
        """
        db.execute_update(query, (user_id, first_name, last_name, email))
        logger.info(f"Created user {user_id} ({first_name} {last_name})")
        return user_id

    @classmethod
    def add_games(cls, db: DatabaseConnection, user_id: str, game_ids: Iterable[str]) -> int:
        """Link games to a user, ignoring links that already exist."""
        params = [(user_id, game_id) for game_id in dict.fromkeys(game_ids)]
        if not params:
            return 0
        return db.execute_many(
            "INSERT OR IGNORE INTO users_games (user_id, game_id) VALUES (?, ?)", params
        )

    @classmethod
    def delete(cls, db: DatabaseConnection, user_id: str) -> bool:
        """Delete a user; its users_games rows go with it."""
        deleted = db.execute_update("DELETE FROM users WHERE id = ?", (user_id,))
        return deleted > 0
