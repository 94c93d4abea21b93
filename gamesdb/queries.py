"""
Users & Games Query Engine
==========================

The fixed set of read queries over users, games and the users_games join
table. Each operation validates its arguments, sends exactly one
parameterized statement to the injected connection and maps the rows into
``User`` / ``Game`` entities.
"""

import logging
from typing import Any, List, Mapping, Sequence

from .entities import Game, User, group_users_with_games, row_to_game, row_to_user
from .errors import InvalidArgumentError, NotFoundError
from .models import QueryExecutor

logger = logging.getLogger(__name__)

USER_COLUMNS = "u.id, u.first_name, u.last_name, u.email, u.created_at, u.updated_at"
GAME_COLUMNS = "g.id, g.title, g.created_at, g.updated_at"
# Game columns aliased so they can sit next to USER_COLUMNS in one row
JOINED_GAME_COLUMNS = (
    "g.id AS game_id, g.title AS game_title, "
    "g.created_at AS game_created_at, g.updated_at AS game_updated_at"
)

USERS_WITH_GAMES_FROM = """
    FROM users u
    LEFT JOIN users_games ug ON ug.user_id = u.id
    LEFT JOIN games g ON g.id = ug.game_id
"""


def _require_text(name: str, value: Any) -> str:
    """Reject None, non-strings and blank strings before any SQL is built."""
    if not isinstance(value, str) or not value.strip():
        logger.warning(f"Rejected {name}={value!r}: expected a non-empty string")
        raise InvalidArgumentError(f"{name} must be a non-empty string, got {value!r}")
    return value


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value is matched literally (ESCAPE '\\')."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class _BaseQueries:
    """Holds the injected connection and runs single statements through it."""

    def __init__(self, db: QueryExecutor):
        self.db = db

    def _fetch(self, operation: str, query: str, params: tuple = ()) -> Sequence[Mapping[str, Any]]:
        try:
            return self.db.execute_query(query, params)
        except Exception as e:
            logger.error(f"{operation} failed: {e}")
            raise


class GamesQueries(_BaseQueries):
    """Queries reading the games table and its users."""

    def find_by_title_containing(self, fragment: str) -> List[Game]:
        """Games whose title contains ``fragment``, ignoring ASCII case.

        The fragment is used verbatim (inner and surrounding spaces count)
        and LIKE wildcards in it match literally. Results are ordered by
        title, then id.

        Raises:
            InvalidArgumentError: fragment is empty, blank or not a string.
        """
        _require_text("fragment", fragment)

        query = f"""
            SELECT {GAME_COLUMNS}
            FROM games g
            WHERE lower(g.title) LIKE lower(?) ESCAPE '\\'
            ORDER BY g.title, g.id
        """
        pattern = f"%{_escape_like(fragment)}%"
        rows = self._fetch("find_by_title_containing", query, (pattern,))

        games = [row_to_game(row) for row in rows]
        logger.info(f"Found {len(games)} games with title containing {fragment!r}")
        return games

    def count_all_games(self) -> int:
        """Total number of rows in games."""
        rows = self._fetch("count_all_games", "SELECT COUNT(*) AS count FROM games")
        count = int(rows[0]["count"]) if rows else 0
        logger.debug(f"Counted {count} games")
        return count

    def find_users_by_game_id(self, game_id: str) -> List[User]:
        """Users linked to a game, ordered by last name, first name, id.

        An unknown game id yields an empty list; the id is not checked
        against the games table.
        """
        _require_text("game_id", game_id)

        query = f"""
            SELECT {USER_COLUMNS}
            FROM users u
            INNER JOIN users_games ug ON ug.user_id = u.id
            WHERE ug.game_id = ?
            ORDER BY u.last_name, u.first_name, u.id
        """
        rows = self._fetch("find_users_by_game_id", query, (game_id,))

        users = [row_to_user(row) for row in rows]
        logger.info(f"Found {len(users)} users for game {game_id}")
        return users


class UsersQueries(_BaseQueries):
    """Queries reading the users table and its games."""

    def find_user_with_games_by_id(self, user_id: str) -> User:
        """Return one user with its games loaded, ordered by title then id.

        Raises:
            InvalidArgumentError: user_id is empty, blank or not a string.
            NotFoundError: no user has this id.
        """
        _require_text("user_id", user_id)

        query = f"""
            SELECT {USER_COLUMNS}, {JOINED_GAME_COLUMNS}
            {USERS_WITH_GAMES_FROM}
            WHERE u.id = ?
            ORDER BY g.title, g.id
        """
        rows = self._fetch("find_user_with_games_by_id", query, (user_id,))

        users = group_users_with_games(rows)
        if not users:
            logger.info(f"User {user_id} not found")
            raise NotFoundError("User", user_id)

        user = users[0]
        logger.info(f"Loaded user {user_id} with {len(user.games)} games")
        return user

    def find_all_users_ordered_by_first_name(self, include_games: bool = False) -> List[User]:
        """All users sorted by first name (byte-wise), ties broken by id.

        Games are only loaded when ``include_games`` is set; otherwise
        ``User.games`` is None.
        """
        order_by = "u.first_name COLLATE BINARY, u.id"
        if include_games:
            query = f"""
                SELECT {USER_COLUMNS}, {JOINED_GAME_COLUMNS}
                {USERS_WITH_GAMES_FROM}
                ORDER BY {order_by}, g.title, g.id
            """
            rows = self._fetch("find_all_users_ordered_by_first_name", query)
            users = group_users_with_games(rows)
        else:
            query = f"""
                SELECT {USER_COLUMNS}
                FROM users u
                ORDER BY {order_by}
            """
            rows = self._fetch("find_all_users_ordered_by_first_name", query)
            users = [row_to_user(row) for row in rows]

        logger.info(f"Listed {len(users)} users ordered by first name")
        return users

    def find_user_by_full_name(self, first_name: str, last_name: str,
                               include_games: bool = False) -> List[User]:
        """Users whose first and last names both equal the given ones, ignoring ASCII case.

        This is an exact comparison, not a substring search. Several users
        may share a name; all of them are returned, ordered by id. No match
        gives an empty list.
        """
        _require_text("first_name", first_name)
        _require_text("last_name", last_name)

        where = "WHERE lower(u.first_name) = lower(?) AND lower(u.last_name) = lower(?)"
        params = (first_name, last_name)
        if include_games:
            query = f"""
                SELECT {USER_COLUMNS}, {JOINED_GAME_COLUMNS}
                {USERS_WITH_GAMES_FROM}
                {where}
                ORDER BY u.id, g.title, g.id
            """
            rows = self._fetch("find_user_by_full_name", query, params)
            users = group_users_with_games(rows)
        else:
            query = f"""
                SELECT {USER_COLUMNS}
                FROM users u
                {where}
                ORDER BY u.id
            """
            rows = self._fetch("find_user_by_full_name", query, params)
            users = [row_to_user(row) for row in rows]

        logger.info(f"Found {len(users)} users named {first_name!r} {last_name!r}")
        return users
