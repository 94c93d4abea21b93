"""Typed entities and row mappers.

Rows come back from the connection as mappings addressable by column name
(``sqlite3.Row``). The mappers here turn them into ``User`` and ``Game``
dataclasses. Associations are never loaded implicitly: ``User.games`` and
``Game.users`` stay ``None`` unless the query that built the entity joined
them in, in which case they hold a (possibly empty) list.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

# Column aliases used when game columns are joined next to user columns
GAME_ALIAS_PREFIX = "game_"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convert a stored timestamp (SQLite CURRENT_TIMESTAMP text) to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Game:
    """A game row.

    ``users`` is never filled by the current queries; it is reserved for a
    reverse eager load (game with its users) and stays None until then.
    """

    id: str
    title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    users: Optional[List[User]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
        }
        if self.users is not None:
            data["users"] = [user.to_dict() for user in self.users]
        return data


@dataclass
class User:
    """A user row, optionally with the games linked to it."""

    id: str
    first_name: str
    last_name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    games: Optional[List[Game]] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
        }
        if self.games is not None:
            data["games"] = [game.to_dict() for game in self.games]
        return data


def row_to_game(row: Mapping[str, Any], prefix: str = "") -> Game:
    """Map a row to a Game.

    Args:
        row: Row addressable by column name.
        prefix: Column prefix, e.g. ``"game_"`` when the game columns were
            aliased inside a join with ``users``.
    """
    return Game(
        id=row[f"{prefix}id"],
        title=row[f"{prefix}title"],
        created_at=parse_timestamp(row[f"{prefix}created_at"]),
        updated_at=parse_timestamp(row[f"{prefix}updated_at"]),
    )


def row_to_user(row: Mapping[str, Any]) -> User:
    """Map a row to a User without touching its games."""
    return User(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def group_users_with_games(rows: Iterable[Mapping[str, Any]]) -> List[User]:
    """Fold ``users LEFT JOIN games`` rows into users with eager games.

    Users keep the order in which they first appear in ``rows`` and games
    keep row order within each user. A user whose joined game columns are
    NULL ends up with an empty ``games`` list.
    """
    users: Dict[str, User] = {}
    for row in rows:
        user = users.get(row["id"])
        if user is None:
            user = row_to_user(row)
            user.games = []
            users[user.id] = user

        if row[f"{GAME_ALIAS_PREFIX}id"] is not None:
            user.games.append(row_to_game(row, prefix=GAME_ALIAS_PREFIX))

    return list(users.values())
