"""
Integration tests for the gamesdb command-line entry point.

Each test runs main() against a fresh database file and parses the JSON it
prints.
"""

import json
import pytest

import main as cli


@pytest.fixture
def run_cli(test_db_path, monkeypatch, capsys):
    """Run the CLI against the test database and return (exit_code, output)."""
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)

    def _run(*args):
        code = cli.main(["--db", str(test_db_path), *args])
        captured = capsys.readouterr()
        output = json.loads(captured.out) if code == 0 else captured.err
        return code, output

    return _run


@pytest.mark.integration
class TestCli:
    """Test the CLI commands end to end."""

    def test_seed_and_count(self, run_cli):
        code, seeded = run_cli("seed")
        assert code == 0
        assert len(seeded["games"]) == 4
        assert len(seeded["users"]) == 4

        assert run_cli("count-games") == (0, {"count": 4})

    def test_init_db_on_existing_schema(self, run_cli):
        assert run_cli("init-db") == (0, {"applied": False})

    def test_drop_db(self, run_cli):
        assert run_cli("drop-db") == (0, {"dropped": True})

    def test_search_games(self, run_cli):
        run_cli("seed")

        code, games = run_cli("search-games", "eed")

        assert code == 0
        assert [game["title"] for game in games] == [
            "Need For Speed: Most Wanted", "Need For Speed: Payback"
        ]

    def test_users_with_games(self, run_cli):
        run_cli("seed")

        code, users = run_cli("users", "--with-games")

        assert code == 0
        assert [user["first_name"] for user in users] == ["Daniele", "Danilo", "Joseph", "Vinicius"]
        assert len(users[0]["games"]) == 3

    def test_user_and_game_users(self, run_cli):
        _, seeded = run_cli("seed")
        user_id = seeded["users"]["joseph.oliveira@rocketseat.com.br"]

        code, user = run_cli("user", user_id)
        assert code == 0
        assert {game["title"] for game in user["games"]} == {"Rocket League", "Need For Speed: Most Wanted"}

        code, users = run_cli("game-users", seeded["games"]["The Last Of Us"])
        assert code == 0
        assert {u["first_name"] for u in users} == {"Danilo", "Daniele"}

    def test_find_user(self, run_cli):
        run_cli("seed")

        code, users = run_cli("find-user", "joSEPH", "OLIVEIRA")

        assert code == 0
        assert [user["email"] for user in users] == ["joseph.oliveira@rocketseat.com.br"]

    def test_unknown_user_exits_with_not_found(self, run_cli):
        code, err = run_cli("user", "no-such-user")

        assert code == 1
        assert "User not found: no-such-user" in err

    def test_blank_fragment_exits_with_invalid_argument(self, run_cli):
        code, err = run_cli("search-games", "   ")

        assert code == 2
        assert "fragment" in err

    def test_storage_failure_exits_with_error(self, run_cli):
        run_cli("drop-db")

        code, err = run_cli("users")

        assert code == 3
        assert "storage failure" in err
        assert "no such table: users" in err
