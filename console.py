"""
Console input and message text for the game of concentration.
Parses the raw lines typed by the players; the game logic lives in classes.py.
"""
import re
from typing import Optional, Tuple

EXIT_KEYWORD = "quit"
AFFIRMATIVE_RESPONSE = "yes"
NEGATIVE_RESPONSE = "no"

MAX_MODE = 4
MAX_SIMULATIONS = 1000000

# number of integers in a move: two (row, column) pairs
MOVE_SIZE = 4

NUMBER_PATTERN = re.compile(r"[0-9]+")

WELCOME_MESSAGE = "Welcome to the Game of Concentration!"
INPUT_INSTRUCTIONS = ("Enter the row-column pair of two cards to flip, or type \""
                      + EXIT_KEYWORD + "\" to end the game.")
INPUT_EXAMPLE = "Example: \"(0, 0) (0, 1)\" or \"0 0 0 1\""
INPUT_SUGGESTION = "Please choose two different, available cards as an ordered pair."
MATCH_MADE_MESSAGE = "made a match! This pair will be removed."
SINGLE_PLAYER_NO_MATCH_MESSAGE = "No match found. Please try again or type \"" + EXIT_KEYWORD + "\" to exit."
MULTIPLAYER_NO_MATCH_MESSAGE = "No match found. Switching turns..."
GAME_WON_MESSAGE = "won the game!"
REPLAY_PROMPT = ("Would you like to play again? \"" + AFFIRMATIVE_RESPONSE + "\" or \""
                 + NEGATIVE_RESPONSE + "\"")
ANSWER_PROMPT = "Answer: "
ALREADY_PAIRED_MESSAGE = "One or more of the given cards has already been paired."
OUT_OF_BOUNDS_MESSAGE = "The given positions aren't on the board."
DUPLICATE_CARD_MESSAGE = "The given positions must be different."
INVALID_INPUT_MESSAGE = "Invalid input!"
INVALID_MODE_MESSAGE = "Invalid Mode!"
INVALID_SIMULATIONS_MESSAGE = "Invalid number of games!"
MODE_MESSAGE = "Please enter the number of the mode you would like to select:"
MODE_PROMPT = "Mode: "
MODE_LIST_MESSAGE = "1 - Single Player\n2 - Player vs Player\n3 - Player vs Bot\n4 - Bot vs Bot (Simulation)"
SIMULATIONS_MESSAGE = "Please enter the number of games to simulate"
SIMULATIONS_PROMPT = "Number of games: "


class ConsoleInput:
    """Reads player input from the terminal, one line at a time."""

    def __init__(self):
        self.closed = False

    def read_line(self, prompt: str = "") -> str:
        """
        Read a line from standard input.

        Args:
            prompt: Text shown before the cursor

        Returns:
            The line without its newline. End of input is reported as the
            exit keyword so the game can shut down cleanly.
        """
        if self.closed:
            return EXIT_KEYWORD
        try:
            return input(prompt)
        except EOFError:
            self.closed = True
            return EXIT_KEYWORD

    def close(self) -> None:
        self.closed = True


def is_quit(text: str) -> bool:
    return text.strip().lower() == EXIT_KEYWORD


def parse_move(text: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Extract a move from free-form text such as "(0, 0) (0, 1)" or "0 0 0 1".

    Only runs of digits are read; everything else is ignored.

    Returns:
        (row1, col1, row2, col2), or None if fewer than four numbers were typed
    """
    numbers = NUMBER_PATTERN.findall(text)
    if len(numbers) < MOVE_SIZE:
        return None
    row1, col1, row2, col2 = (int(number) for number in numbers[:MOVE_SIZE])
    return row1, col1, row2, col2


def _parse_bounded(text: str, low: int, high: int) -> Optional[int]:
    match = NUMBER_PATTERN.search(text)
    if match is None:
        return None
    value = int(match.group())
    if low <= value <= high:
        return value
    return None


def parse_mode(text: str) -> Optional[int]:
    """Return the mode number typed by the player, or None if it isn't 1-4."""
    return _parse_bounded(text, 1, MAX_MODE)


def parse_simulation_count(text: str) -> Optional[int]:
    """Return the number of games to simulate, or None if it is out of range."""
    return _parse_bounded(text, 1, MAX_SIMULATIONS)
