"""
Database migration for the users/games schema
==============================================

Creates the users, games and users_games tables (see schema.sql) and can
roll them back. The connection passed in only needs ``execute_query``,
``execute_update`` and ``execute_script``.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

TABLES = ("users", "games", "users_games")
INDEXES = ("idx_users_games_user_id", "idx_users_games_game_id")


def is_applied(db) -> bool:
    """Return True when every table of the schema exists."""
    check_query = f"""
        SELECT name FROM sqlite_master
        WHERE type='table' AND name IN ({', '.join('?' for _ in TABLES)})
    """
    result = db.execute_query(check_query, TABLES)
    return len(result) == len(TABLES)


def apply_migration(db) -> bool:
    """Apply the schema. Returns False if it was already in place."""
    try:
        if is_applied(db):
            logger.info("Users/games schema already exists, skipping migration")
            return False

        db.execute_script(SCHEMA_PATH.read_text(encoding='utf-8'))
        logger.info("Users/games schema migration completed successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to apply users/games migration: {e}")
        raise


def rollback_migration(db) -> bool:
    """Drop the schema, join table first. Data is lost."""
    try:
        for index_name in INDEXES:
            db.execute_update(f"DROP INDEX IF EXISTS {index_name}")

        # users_games references both other tables
        for table in reversed(TABLES):
            db.execute_update(f"DROP TABLE IF EXISTS {table}")

        logger.info("Users/games schema rolled back")
        return True

    except Exception as e:
        logger.error(f"Failed to roll back users/games migration: {e}")
        raise
