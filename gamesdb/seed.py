"""Demo data: four users, four games and the links between them."""

import logging
from typing import Dict

from .models import DatabaseConnection, GameModel, UserModel

logger = logging.getLogger(__name__)

DEMO_GAMES = [
    "Rocket League",
    "The Last Of Us",
    "Need For Speed: Most Wanted",
    "Need For Speed: Payback",
]

DEMO_USERS = [
    ("Vinicius", "Fraga", "vinicius.fraga@rocketseat.com.br"),
    ("Danilo", "Vieira", "danilo.vieira@rocketseat.com.br"),
    ("Joseph", "Oliveira", "joseph.oliveira@rocketseat.com.br"),
    ("Daniele", "Leão", "dani.leao@rocketseat.com.br"),
]

# email -> titles owned
DEMO_LIBRARY = {
    "vinicius.fraga@rocketseat.com.br": ["Rocket League", "Need For Speed: Most Wanted", "Need For Speed: Payback"],
    "danilo.vieira@rocketseat.com.br": ["Rocket League", "Need For Speed: Most Wanted", "The Last Of Us"],
    "joseph.oliveira@rocketseat.com.br": ["Rocket League", "Need For Speed: Most Wanted"],
    "dani.leao@rocketseat.com.br": ["Need For Speed: Most Wanted", "Need For Speed: Payback", "The Last Of Us"],
}


def seed_demo_data(db: DatabaseConnection) -> Dict[str, Dict[str, str]]:
    """Insert the demo rows and return their ids.

    Returns:
        ``{"games": {title: id}, "users": {email: id}}``
    """
    game_ids = {title: GameModel.insert(db, title) for title in DEMO_GAMES}

    user_ids = {}
    for first_name, last_name, email in DEMO_USERS:
        user_id = UserModel.insert(db, first_name, last_name, email)
        UserModel.add_games(db, user_id, [game_ids[title] for title in DEMO_LIBRARY[email]])
        user_ids[email] = user_id

    logger.info(f"Seeded {len(user_ids)} users and {len(game_ids)} games")
    return {"games": game_ids, "users": user_ids}
