# gamesdb - Users & Games query CLI
"""
Command-line entry point for the users/games database.

Examples:
    gamesdb init-db
    gamesdb seed
    gamesdb users --with-games
    gamesdb search-games "need for"
"""

import argparse
import json
import logging
import sqlite3
import sys

# Load environment variables from .env file before settings are read
from dotenv import load_dotenv
load_dotenv()

from config.settings import DATABASE_PATH, LOG_FILE, LOG_FORMAT, LOG_LEVEL
from gamesdb import (
    DatabaseConnection, GamesQueries, InvalidArgumentError, NotFoundError, UsersQueries
)
from gamesdb.migration import apply_migration, rollback_migration
from gamesdb.seed import seed_demo_data

logger = logging.getLogger(__name__)


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Send log records to stderr and the log file."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr), logging.FileHandler(LOG_FILE)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='gamesdb', description='Query users, games and who plays what')
    parser.add_argument('--db', default=str(DATABASE_PATH), help='SQLite database file path')
    parser.add_argument('--log-level', default=LOG_LEVEL, help='Logging level (default: %(default)s)')

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('init-db', help='Create the users/games schema')
    sub.add_parser('drop-db', help='Drop the users/games schema')
    sub.add_parser('seed', help='Insert demo users and games')

    user = sub.add_parser('user', help='Show one user with their games')
    user.add_argument('user_id')

    users = sub.add_parser('users', help='List users ordered by first name')
    users.add_argument('--with-games', action='store_true', help='Include each user\'s games')

    find_user = sub.add_parser('find-user', help='Find users by first and last name (case-insensitive)')
    find_user.add_argument('first_name')
    find_user.add_argument('last_name')

    search = sub.add_parser('search-games', help='Find games whose title contains a fragment')
    search.add_argument('fragment')

    sub.add_parser('count-games', help='Count all games')

    game_users = sub.add_parser('game-users', help='List users who have a game')
    game_users.add_argument('game_id')

    return parser


def run_command(args: argparse.Namespace, db: DatabaseConnection):
    """Dispatch a parsed command and return a JSON-serializable result."""
    games = GamesQueries(db)
    users = UsersQueries(db)

    if args.command == 'init-db':
        return {'applied': apply_migration(db)}
    if args.command == 'drop-db':
        return {'dropped': rollback_migration(db)}
    if args.command == 'seed':
        return seed_demo_data(db)
    if args.command == 'user':
        return users.find_user_with_games_by_id(args.user_id).to_dict()
    if args.command == 'users':
        return [u.to_dict() for u in users.find_all_users_ordered_by_first_name(include_games=args.with_games)]
    if args.command == 'find-user':
        return [u.to_dict() for u in users.find_user_by_full_name(args.first_name, args.last_name)]
    if args.command == 'search-games':
        return [g.to_dict() for g in games.find_by_title_containing(args.fragment)]
    if args.command == 'count-games':
        return {'count': games.count_all_games()}
    if args.command == 'game-users':
        return [u.to_dict() for u in games.find_users_by_game_id(args.game_id)]
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper())

    db = DatabaseConnection(args.db)
    try:
        result = run_command(args, db)
    except InvalidArgumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except NotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except sqlite3.Error as e:
        print(f"error: storage failure: {e}", file=sys.stderr)
        return 3
    finally:
        db.close()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
