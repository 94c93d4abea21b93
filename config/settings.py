from pathlib import Path
import os

# ============================================================================
# DATABASE
# ============================================================================

# SQLite file holding the users, games and users_games tables
# Can be overridden with GAMESDB_DATABASE_PATH environment variable
DATABASE_PATH = Path(os.getenv("GAMESDB_DATABASE_PATH", ".db/games.db"))

# Seconds sqlite3 waits on a locked database before raising OperationalError
DATABASE_TIMEOUT = float(os.getenv("GAMESDB_DATABASE_TIMEOUT", "30.0"))

# ============================================================================
# LOGGING
# ============================================================================

LOG_LEVEL = os.getenv("GAMESDB_LOG_LEVEL", "INFO").upper()
LOG_FILE = Path(os.getenv("GAMESDB_LOG_FILE", "gamesdb.log"))
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Only the first line of each statement is logged, truncated to this length
QUERY_LOG_MAX_CHARS = 120
