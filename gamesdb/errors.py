"""Exceptions raised by the games database layer.

Storage failures are not wrapped: whatever the connection raises
(``sqlite3.OperationalError``, timeouts, ...) reaches the caller as-is.
"""

from typing import Any


class GamesDBError(Exception):
    """Base class for errors raised by the query layer itself."""


class InvalidArgumentError(GamesDBError, ValueError):
    """Raised when a caller passes an empty or malformed argument.

    Always raised before any SQL is sent to the connection.
    """


class NotFoundError(GamesDBError, LookupError):
    """Raised when a single-entity lookup matches no row."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")
