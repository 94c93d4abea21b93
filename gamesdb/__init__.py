"""
SQLite Data-Access Layer for Users & Games
==========================================

Schema, connection, entities and the fixed set of queries over users,
games and their many-to-many association.
"""

from .entities import Game, User
from .errors import GamesDBError, InvalidArgumentError, NotFoundError
from .models import DatabaseConnection, GameModel, QueryExecutor, UserModel
from .queries import GamesQueries, UsersQueries

__version__ = "1.0.0"
__all__ = [
    "DatabaseConnection",
    "QueryExecutor",
    "GameModel",
    "UserModel",
    "Game",
    "User",
    "GamesQueries",
    "UsersQueries",
    "GamesDBError",
    "InvalidArgumentError",
    "NotFoundError",
]
