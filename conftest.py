"""
Pytest configuration and shared fixtures for the gamesdb test suite.

This module provides:
- Temporary database setup and teardown
- A database seeded with the demo users and games
"""

import pytest
import shutil
import sys
import tempfile
import time
from pathlib import Path
from typing import Dict, Generator

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from gamesdb.models import DatabaseConnection
from gamesdb.seed import seed_demo_data


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture(scope="function")
def test_db_path(temp_dir: Path) -> Path:
    """Create a temporary database file path."""
    return temp_dir / "test_games.db"


@pytest.fixture(scope="function")
def db_connection(test_db_path: Path):
    """
    Create a test database connection with the users/games schema.

    The schema is applied by DatabaseConnection itself since the file does
    not exist yet.
    """
    conn = DatabaseConnection(str(test_db_path))

    yield conn

    conn.close()

    # On Windows, wait a moment for file handles to be released
    if sys.platform == 'win32':
        time.sleep(0.1)

    if test_db_path.exists():
        try:
            test_db_path.unlink()
        except PermissionError:
            # File still locked, ignore for now
            pass


@pytest.fixture(scope="function")
def seeded_db(db_connection) -> Dict[str, Dict[str, str]]:
    """
    Seed the test database with the demo data.

    Returns the generated ids: {"games": {title: id}, "users": {email: id}}.
    """
    return seed_demo_data(db_connection)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Register custom markers
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "database: Tests that run against a real SQLite database")
    config.addinivalue_line("markers", "integration: End-to-end tests through the CLI")
