import random

import pytest

from classes import Board, Game, Player


class ScriptedInput:
    """Input provider that replays a fixed list of lines."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []
        self.closed = False

    def read_line(self, prompt=""):
        self.prompts.append(prompt)
        if not self.lines:
            raise AssertionError(f"Ran out of scripted input at prompt {prompt!r}")
        return self.lines.pop(0)

    def close(self):
        self.closed = True


def find_positions(board, matching):
    """Return (r1, c1, r2, c2) of two unpaired cards whose names match or differ."""
    positions = [(r, c) for r in range(board.rows) for c in range(board.cols)
                 if not board.cards[r][c].is_paired]
    for i, first in enumerate(positions):
        for second in positions[i + 1:]:
            same = board.get_card(*first).name == board.get_card(*second).name
            if same == matching:
                return first + second
    return None


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def board(rng):
    board = Board(["Alice", "Bob", "Charlie"], rows=2, cols=3, rng=rng)
    board.setup()
    return board


@pytest.fixture
def two_player_game(board):
    game = Game(board, ScriptedInput([]))
    game.players = [Player("Player 1", True), Player("Player 2", True)]
    game.reset_game_state()
    return game
