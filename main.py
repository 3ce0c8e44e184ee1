import json
import os
import random
import sys

from classes import (
    DEFAULT_CARD_HEIGHT,
    DEFAULT_CARD_WIDTH,
    DEFAULT_COLUMNS,
    DEFAULT_NAMES,
    DEFAULT_ROWS,
    Board,
    Game,
    InvalidConfiguration,
)
from console import ConsoleInput

# Settings management
SETTINGS_FILE = "settings.json"
DEFAULT_SETTINGS = {
    "rows": DEFAULT_ROWS,
    "columns": DEFAULT_COLUMNS,
    "names": DEFAULT_NAMES,
    "card_width": DEFAULT_CARD_WIDTH,
    "card_height": DEFAULT_CARD_HEIGHT,
    "seed": None,
}

INTEGER_SETTINGS = ("rows", "columns", "card_width", "card_height")


def load_settings(path=SETTINGS_FILE):
    """
    Load settings from a JSON file, filling anything missing with the defaults.

    A missing or unreadable file gives the default settings.
    """
    settings = dict(DEFAULT_SETTINGS)
    if os.path.exists(path):
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Could not read {path}: {e}. Using default settings.")
            return settings
        if isinstance(data, dict):
            settings.update({key: value for key, value in data.items() if key in DEFAULT_SETTINGS})
        else:
            print(f"Ignoring {path}: expected a JSON object.")
    return settings


def check_settings(settings):
    """Raise InvalidConfiguration if a setting has the wrong type."""
    for key in INTEGER_SETTINGS:
        value = settings[key]
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidConfiguration(f"Setting '{key}' must be an integer, got {value!r}")
    names = settings["names"]
    if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
        raise InvalidConfiguration("Setting 'names' must be a list of strings")
    seed = settings["seed"]
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise InvalidConfiguration(f"Setting 'seed' must be an integer or null, got {seed!r}")


def create_game(settings=None, input_provider=None):
    """
    Factory function to build a game from settings.

    Args:
        settings: Settings dictionary, as returned by load_settings()
        input_provider: Source of player input, defaults to the console

    Returns:
        Game ready to be started
    """
    if settings is None:
        settings = dict(DEFAULT_SETTINGS)
    check_settings(settings)

    board = Board(
        names=settings["names"],
        rows=settings["rows"],
        cols=settings["columns"],
        card_width=settings["card_width"],
        card_height=settings["card_height"],
        rng=random.Random(settings["seed"]),
    )
    return Game(board, input_provider or ConsoleInput())


def main():
    """Main function to run the game."""
    try:
        game = create_game(load_settings())
        game.start()
    except InvalidConfiguration as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
