import random
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from console import (
    ALREADY_PAIRED_MESSAGE,
    ANSWER_PROMPT,
    AFFIRMATIVE_RESPONSE,
    DUPLICATE_CARD_MESSAGE,
    GAME_WON_MESSAGE,
    INPUT_EXAMPLE,
    INPUT_INSTRUCTIONS,
    INPUT_SUGGESTION,
    INVALID_INPUT_MESSAGE,
    INVALID_MODE_MESSAGE,
    INVALID_SIMULATIONS_MESSAGE,
    MATCH_MADE_MESSAGE,
    MAX_SIMULATIONS,
    MODE_LIST_MESSAGE,
    MODE_MESSAGE,
    MODE_PROMPT,
    MULTIPLAYER_NO_MATCH_MESSAGE,
    NEGATIVE_RESPONSE,
    OUT_OF_BOUNDS_MESSAGE,
    REPLAY_PROMPT,
    SIMULATIONS_MESSAGE,
    SIMULATIONS_PROMPT,
    SINGLE_PLAYER_NO_MATCH_MESSAGE,
    WELCOME_MESSAGE,
    ConsoleInput,
    is_quit,
    parse_mode,
    parse_move,
    parse_simulation_count,
)
from shared.models import SimulationSummary

# (row1, col1, row2, col2)
Move = Tuple[int, int, int, int]

DEFAULT_COLUMNS = 6
DEFAULT_ROWS = 6
MIN_BOARD_SIZE = 2

# Cell size in characters, both even and at least 4
DEFAULT_CARD_WIDTH = 12
DEFAULT_CARD_HEIGHT = 4
MIN_CARD_SIZE = 4

INTERSECTION_SYMBOL = '+'
VERTICAL_SEPARATOR_SYMBOL = '|'
HORIZONTAL_SEPARATOR_SYMBOL = '-'
REMOVED_SYMBOL = '-'
EMPTY_CHAR = ' '

DEFAULT_NAMES = ["Alice", "Bob", "Charlie", "David", "Ellen", "Frank", "Gerry", "Hanna", "Ian"]

# Axis index of the label margin in BoardLayout.cell_center()
LABEL_MARGIN = -1

DEFAULT_SIMULATIONS = 15000
SIMULATIONS_DISPLAY_INCREMENT = 10000


class InvalidConfiguration(ValueError):
    """Raised when the board cannot be set up with the given parameters."""


class NotInitialized(RuntimeError):
    """Raised when the board is queried before setup() has been called."""


class InvalidMove(ValueError):
    """Raised when a pair of positions cannot be flipped."""


class Card:
    """
    A class representing a card in the game of concentration.
    Each card has a name, can be revealed or hidden, and can be paired.
    """

    def __init__(self, name: str):
        """
        Initialize a new card, face down and unpaired.

        Args:
            name: The name shown when the card is revealed
        """
        self.name = name
        self.is_revealed = False
        self.is_paired = False

    def reveal(self):
        """Turn the card face up."""
        self.is_revealed = True

    def hide(self):
        """Turn the card face down."""
        self.is_revealed = False

    def pair(self):
        """Mark the card as paired, removing it from play."""
        self.is_paired = True

    def matches(self, other: "Card") -> bool:
        return self.name == other.name

    def __str__(self):
        status = "paired" if self.is_paired else "revealed" if self.is_revealed else "hidden"
        return f"Card({self.name}, {status})"

    def __repr__(self):
        return f"Card(name={self.name!r}, is_revealed={self.is_revealed}, is_paired={self.is_paired})"


class Player:
    """
    A class representing a player in the game of concentration.
    Tracks the number of moves and matches made in the current game.
    """

    def __init__(self, name="Player", is_human=True):
        """
        Initialize a new player.

        Args:
            name: The player's name
            is_human: False for a scripted player that picks random cards
        """
        self.name = name
        self.is_human = is_human
        self.moves = 0
        self.matches = 0

    def add_move(self):
        """Increment the player's move counter."""
        self.moves += 1

    def add_match(self):
        """Increment the player's match counter."""
        self.matches += 1

    def reset_stats(self):
        """Reset the player's stats for a new game."""
        self.moves = 0
        self.matches = 0

    def __str__(self):
        return f"{self.name}: Moves={self.moves}, Matches={self.matches}"


@dataclass(frozen=True)
class BoardLayout:
    """
    Geometry of the text buffer for a rows x cols board.

    The buffer starts with a margin of half a cell on each axis for the
    labels, followed by the grid. Every printed line ends with a newline,
    which is counted in ``width``.
    """
    rows: int
    cols: int
    card_width: int = DEFAULT_CARD_WIDTH
    card_height: int = DEFAULT_CARD_HEIGHT

    @property
    def width(self) -> int:
        # margin, cells, closing separator and the newline
        return self.card_width // 2 + self.cols * self.card_width + 2

    @property
    def height(self) -> int:
        return self.card_height // 2 + self.rows * self.card_height + 1

    def offset(self, line: int, column: int) -> int:
        """Return the buffer offset of a printed line and column."""
        return line * self.width + column

    @staticmethod
    def _axis_center(index: int, cell_size: int) -> int:
        if index == LABEL_MARGIN:
            return cell_size // 4
        return (index + 1) * cell_size

    def cell_center(self, row: int, col: int) -> int:
        """
        Return the buffer offset of the center of a cell.

        Args:
            row: Card row, or LABEL_MARGIN for the column label line
            col: Card column, or LABEL_MARGIN for the row label column

        Returns:
            Offset into the flat buffer
        """
        return self.offset(self._axis_center(row, self.card_height),
                           self._axis_center(col, self.card_width))

    def cell_top_left(self, row: int, col: int) -> int:
        """Return the buffer offset of the top left corner of a card's border."""
        return (self.cell_center(row, col)
                - (self.card_height // 2) * self.width
                - self.card_width // 2)

    def centered_span(self, center: int, text: str) -> Tuple[int, int]:
        """Return the (start, end) offsets of text centered on the given offset."""
        start = center - len(text) // 2
        return start, start + len(text)


class Board:
    """
    A class representing the board for the game of concentration.
    Owns the grid of cards and the text buffer drawn from it.
    """

    def __init__(self, names: Optional[Sequence[str]] = None, rows=DEFAULT_ROWS, cols=DEFAULT_COLUMNS,
                 card_width=DEFAULT_CARD_WIDTH, card_height=DEFAULT_CARD_HEIGHT,
                 rng: Optional[random.Random] = None):
        """
        Initialize a new board. Nothing is validated or drawn until setup().

        Args:
            names: Names to put on the cards, reused if there are too few
            rows: Number of rows in the grid
            cols: Number of columns in the grid
            card_width: Width of a card cell in characters
            card_height: Height of a card cell in characters
            rng: Source of randomness for shuffling and random moves
        """
        self.names = list(DEFAULT_NAMES if names is None else names)
        self.rows = rows
        self.cols = cols
        self.layout = BoardLayout(rows, cols, card_width, card_height)
        self.possible_matches = (rows * cols) // 2
        self.rng = rng if rng is not None else random.Random()
        self.cards: List[List[Card]] = []
        self.chosen_names: List[str] = []
        self._buffer: List[str] = []
        self.initialized = False

    @property
    def width(self) -> int:
        return self.layout.width

    @property
    def height(self) -> int:
        return self.layout.height

    def setup(self) -> None:
        """Prepare the board for a new game: pick, shuffle and place the cards, then draw them."""
        self._check_board_parameters()

        self._choose_names()
        self._scramble_names()
        self._generate_cards()
        self._populate_board()

        self.initialized = True

    def _check_board_parameters(self) -> None:
        if (self.rows < 0 or self.cols < 0 or self.rows * self.cols < MIN_BOARD_SIZE
                or (self.rows * self.cols) % 2 != 0):
            raise InvalidConfiguration(
                "The number of rows and columns must be positive, and their product must be an even number.")
        if not self.names:
            raise InvalidConfiguration("The number of names must be greater than 0.")
        for size in (self.layout.card_width, self.layout.card_height):
            if size < MIN_CARD_SIZE or size % 2 != 0:
                raise InvalidConfiguration(
                    f"Card width and height must be even and at least {MIN_CARD_SIZE}.")

    def _choose_names(self) -> None:
        self.chosen_names = []
        for i in range(self.possible_matches):
            name = self.names[i % len(self.names)]
            self.chosen_names.extend((name, name))

    def _scramble_names(self) -> None:
        # Each index swaps with any index of the whole list, not only the unvisited tail
        names = self.chosen_names
        for i in range(len(names)):
            j = self.rng.randrange(len(names))
            names[i], names[j] = names[j], names[i]

    def _generate_cards(self) -> None:
        max_length = self.layout.card_width - 1
        self.cards = []
        for r in range(self.rows):
            row_cards = []
            for c in range(self.cols):
                # Names must fit on a single line of the cell
                row_cards.append(Card(self.chosen_names[r * self.cols + c][:max_length]))
            self.cards.append(row_cards)

    def _populate_board(self) -> None:
        self._buffer = []
        self._add_grid()
        self._add_column_numbers()
        self._add_row_numbers()

    def _add_grid(self) -> None:
        width = self.layout.card_width
        height = self.layout.card_height
        for line in range(self.layout.height):
            y = line - height // 2
            for column in range(self.layout.width - 1):
                x = column - width // 2
                if y < 0 or x < 0:
                    # label margin
                    self._buffer.append(EMPTY_CHAR)
                elif y % height == 0 and x % width == 0:
                    self._buffer.append(INTERSECTION_SYMBOL)
                elif y % height == 0:
                    self._buffer.append(HORIZONTAL_SEPARATOR_SYMBOL)
                elif x % width == 0:
                    self._buffer.append(VERTICAL_SEPARATOR_SYMBOL)
                else:
                    self._buffer.append(EMPTY_CHAR)
            self._buffer.append('\n')

    def _add_column_numbers(self) -> None:
        for c in range(self.cols):
            self._write(self.layout.cell_center(LABEL_MARGIN, c), str(c))

    def _add_row_numbers(self) -> None:
        for r in range(self.rows):
            self._write(self.layout.cell_center(r, LABEL_MARGIN), str(r))

    def _write(self, center: int, text: str) -> None:
        start, end = self.layout.centered_span(center, text)
        self._buffer[start:end] = list(text)

    def _erase(self, center: int, text: str) -> None:
        start, end = self.layout.centered_span(center, text)
        self._buffer[start:end] = [EMPTY_CHAR] * (end - start)

    def _fill_in_card(self, row: int, col: int) -> None:
        top_left = self.layout.cell_top_left(row, col)
        for i in range(1, self.layout.card_height):
            start = top_left + i * self.layout.width + 1
            end = start + self.layout.card_width - 1
            self._buffer[start:end] = [REMOVED_SYMBOL] * (end - start)

    def _check_for_initialization(self) -> None:
        if not self.initialized:
            raise NotInitialized("Board must be initialized with setup() before invoking this method")

    def update(self) -> None:
        """Redraw every card in the buffer from its current state."""
        self._check_for_initialization()

        for r in range(self.rows):
            for c in range(self.cols):
                card = self.cards[r][c]
                center = self.layout.cell_center(r, c)
                if card.is_revealed:
                    self._write(center, card.name)
                elif card.is_paired:
                    self._fill_in_card(r, c)
                else:
                    self._erase(center, card.name)

    def get_card(self, row, col) -> Optional[Card]:
        """
        Get the card at the specified position.

        Args:
            row: Row index
            col: Column index

        Returns:
            Card at the specified position or None if position is invalid
        """
        if 0 <= row < self.rows and 0 <= col < self.cols and self.cards:
            return self.cards[row][col]
        return None

    def hide_all_revealed(self) -> None:
        """Turn every revealed card face down."""
        for row in self.cards:
            for card in row:
                if card.is_revealed:
                    card.hide()

    def pick_two_unpaired_positions(self) -> Move:
        """
        Pick two different unpaired cards at random.

        Returns:
            Tuple of (row1, col1, row2, col2)
        """
        self._check_for_initialization()

        available = [(r, c) for r in range(self.rows) for c in range(self.cols)
                     if not self.cards[r][c].is_paired]
        first = available.pop(self.rng.randrange(len(available)))
        second = available.pop(self.rng.randrange(len(available)))
        return first + second

    def paired_count(self) -> int:
        return sum(1 for row in self.cards for card in row if card.is_paired)

    def render(self) -> str:
        """Return the board text, or an empty string if the board has not been set up."""
        return ''.join(self._buffer)

    def __str__(self) -> str:
        return self.render()


class Game:
    """
    Main game class that orchestrates the game of concentration.

    There are four modes: single player, player vs player, player vs bot and a
    bot vs bot simulation. Each turn flips two cards. A match removes the pair
    and the player goes again; otherwise the turn passes to the next player.
    The simulation plays many bot vs bot games and reports the spread of
    matches between the two bots.
    """

    MODE_SINGLE_PLAYER = 1
    MODE_PLAYER_VS_PLAYER = 2
    MODE_PLAYER_VS_BOT = 3
    MODE_SIMULATION = 4

    def __init__(self, board: Optional[Board] = None, input_provider=None):
        """
        Initialize a new game.

        Args:
            board: The board to play on (defaults to a 6x6 board)
            input_provider: Object with read_line(prompt) and close(), defaults to the console
        """
        self.board = board if board is not None else Board()
        self.input_provider = input_provider if input_provider is not None else ConsoleInput()
        self.players: List[Player] = []
        self.current_player_index = 0
        self.total_moves = 0
        self.total_matches = 0
        self.match_found = False
        self.mode: Optional[int] = None
        self.simulating = False
        self.simulation_count = DEFAULT_SIMULATIONS
        self.completed_simulations = 0
        self.spreads: Dict[int, int] = {}

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def start(self) -> None:
        """Run games until the player declines a replay, or run one simulation batch."""
        while True:
            print(WELCOME_MESSAGE)
            self.board.setup()
            self.select_game_mode()
            self.reset_game_state()

            if self.simulating:
                self.run_simulations()
                self.display_simulation_statistics()
                return

            self.play()
            self.end_game()
            if not self.ask_for_replay():
                self.exit_game()

    def reset_game_state(self) -> None:
        """Reset the players, counters and turn for a new game."""
        for player in self.players:
            player.reset_stats()
        self.match_found = False
        self.total_matches = 0
        self.total_moves = 0
        self.current_player_index = 0

    def read_line(self, prompt: str) -> str:
        """Read one line of input, leaving the program if it is the quit keyword."""
        text = self.input_provider.read_line(prompt)
        if is_quit(text):
            self.exit_game()
        return text

    def get_game_mode(self) -> int:
        while True:
            print(MODE_MESSAGE)
            print(MODE_LIST_MESSAGE)
            mode = parse_mode(self.read_line(MODE_PROMPT))
            if mode is not None:
                return mode
            print(INVALID_MODE_MESSAGE)

    def get_simulation_count(self) -> int:
        while True:
            print(f"{SIMULATIONS_MESSAGE} between 1 and {MAX_SIMULATIONS}.")
            count = parse_simulation_count(self.read_line(SIMULATIONS_PROMPT))
            if count is not None:
                return count
            print(INVALID_SIMULATIONS_MESSAGE)

    def select_game_mode(self) -> None:
        """Ask for a mode and create the players for it."""
        self.mode = self.get_game_mode()
        self.simulating = False
        if self.mode == self.MODE_SINGLE_PLAYER:
            self.players = [Player("Player 1 (You)", True)]
            print("Single Player Mode Selected")
        elif self.mode == self.MODE_PLAYER_VS_PLAYER:
            self.players = [Player("Player 1", True), Player("Player 2", True)]
            print("Player vs Player Mode Selected")
        elif self.mode == self.MODE_PLAYER_VS_BOT:
            self.players = [Player("Player 1 (You)", True), Player("Bot 1", False)]
            print("Player vs Bot Mode Selected")
        else:
            self.players = [Player("Bot 1", False), Player("Bot 2", False)]
            self.simulating = True
            self.completed_simulations = 0
            self.spreads = {}
            print("Bot vs Bot (Simulation) Mode Selected")
            self.simulation_count = self.get_simulation_count()

    def is_game_over(self) -> bool:
        return self.total_matches == self.board.possible_matches

    def switch_turns(self) -> None:
        self.current_player_index = (self.current_player_index + 1) % len(self.players)

    def advance_turn(self) -> None:
        """Pass the turn on if the last move was not a match."""
        if not self.match_found and self.total_moves != 0:
            self.switch_turns()

    def play(self) -> None:
        """Run the interactive loop until every pair has been found."""
        while not self.is_game_over():
            self.advance_turn()

            print(self.board)
            self.print_match_message()

            if self.current_player.is_human:
                self.handle_input()
            else:
                self.flip_cards(self.board.pick_two_unpaired_positions())

    def handle_input(self) -> None:
        """Prompt the current player until they enter a valid move."""
        while True:
            text = self.input_provider.read_line(f"{self.current_player.name}: ")
            if is_quit(text):
                self.quit_game()
            try:
                self.flip_cards(parse_move(text))
                return
            except InvalidMove as e:
                self.print_input_error(str(e))

    def validate_move(self, move: Optional[Sequence[int]]) -> Tuple[Card, Card]:
        """
        Check that a move names two different, existing, unpaired cards.

        Args:
            move: (row1, col1, row2, col2), or None if the input could not be read

        Returns:
            The two cards to flip

        Raises:
            InvalidMove: with a message describing the problem
        """
        if move is None or len(move) != 4:
            raise InvalidMove(INVALID_INPUT_MESSAGE)

        row1, col1, row2, col2 = move
        if row1 == row2 and col1 == col2:
            raise InvalidMove(DUPLICATE_CARD_MESSAGE)

        card1 = self.board.get_card(row1, col1)
        card2 = self.board.get_card(row2, col2)
        if card1 is None or card2 is None:
            raise InvalidMove(OUT_OF_BOUNDS_MESSAGE)
        if card1.is_paired or card2.is_paired:
            raise InvalidMove(ALREADY_PAIRED_MESSAGE)
        return card1, card2

    def flip_cards(self, move: Optional[Sequence[int]]) -> bool:
        """
        Flip two cards for the current player and score the result.

        Args:
            move: (row1, col1, row2, col2)

        Returns:
            True if the cards matched

        Raises:
            InvalidMove: if the move is not allowed; nothing is changed
        """
        card1, card2 = self.validate_move(move)
        player = self.current_player

        self.board.hide_all_revealed()
        card1.reveal()
        card2.reveal()

        self.match_found = card1.matches(card2)
        if self.match_found:
            card1.pair()
            card2.pair()
            self.total_matches += 1
            player.add_match()

        self.total_moves += 1
        player.add_move()

        if not self.simulating:
            self.board.update()
            row1, col1, row2, col2 = move
            print(f"\n{player.name} flipping cards at ({row1}, {col1}) and ({row2}, {col2})...")

        return self.match_found

    def print_input_error(self, message: str) -> None:
        print(f"\n{message}\n{INPUT_SUGGESTION}\n{INPUT_EXAMPLE}\n")

    def print_match_message(self) -> None:
        """Tell the players whether the last move was a match, or how to play."""
        if self.match_found:
            print(f"{self.current_player.name} {MATCH_MADE_MESSAGE}")
        elif self.total_moves > 0:
            print(SINGLE_PLAYER_NO_MATCH_MESSAGE if len(self.players) == 1 else MULTIPLAYER_NO_MATCH_MESSAGE)

        if self.total_moves == 0 and self.current_player.is_human:
            print(f"{INPUT_INSTRUCTIONS}\n{INPUT_EXAMPLE}")

    def play_simulated_game(self) -> None:
        while not self.is_game_over():
            self.advance_turn()
            self.flip_cards(self.board.pick_two_unpaired_positions())

    def record_spread(self) -> int:
        """Count the difference in matches between the two bots for the finished game."""
        spread = self.players[0].matches - self.players[1].matches
        self.spreads[spread] = self.spreads.get(spread, 0) + 1
        return spread

    def run_simulations(self) -> None:
        """Play simulation_count bot vs bot games on freshly shuffled boards."""
        print("Simulating...")
        for i in range(self.simulation_count):
            if i > 0 and i % SIMULATIONS_DISPLAY_INCREMENT == 0:
                print(f"Simulated {i}/{self.simulation_count} Games")

            self.play_simulated_game()
            self.record_spread()

            self.board.setup()
            self.reset_game_state()
            self.completed_simulations += 1

    def simulation_summary(self) -> SimulationSummary:
        return SimulationSummary.from_spreads(self.spreads)

    def display_simulation_statistics(self) -> None:
        summary = self.simulation_summary()
        games = "Game" if summary.games == 1 else "Games"
        print(f"Simulated {summary.games} {games}\n")
        print("Spread, Count")
        for spread, count in summary.distribution:
            print(f"{spread}, {count}")
        print(f"\nAverage Spread: {summary.mean:f}")
        print(f"Standard Deviation: {summary.std_dev:f}\n")

    def get_winners(self) -> List[Player]:
        """Return every player sharing the highest match count."""
        best = max(player.matches for player in self.players)
        return [player for player in self.players if player.matches == best]

    def display_player_statistics(self, game_completed=True) -> None:
        if game_completed:
            winners = self.get_winners()
            if len(winners) == 1:
                print(f"{winners[0].name} {GAME_WON_MESSAGE}")
            elif len(winners) == 2:
                print(f"There is a tie between {winners[0].name} and {winners[1].name}.")
            else:
                names = ", ".join(player.name for player in winners[:-1])
                print(f"There is a tie between {names}, and {winners[-1].name}.")

        for player in self.players:
            move_string = "move" if player.moves == 1 else "moves"
            match_string = "match" if player.matches == 1 else "matches"
            print(f"{player.name} made {player.moves} {move_string} and {player.matches} {match_string}.")

    def end_game(self) -> None:
        """Show the final board and the results of a completed game."""
        print(self.board)
        self.display_player_statistics(game_completed=True)

    def quit_game(self) -> None:
        """Show the board with every unpaired card hidden, then leave."""
        self.board.hide_all_revealed()
        self.board.update()
        print(self.board)
        self.display_player_statistics(game_completed=False)
        self.exit_game()

    def ask_for_replay(self) -> bool:
        """
        Ask whether to play again.

        Returns:
            True for the affirmative answer, False for the negative one
        """
        print(REPLAY_PROMPT)
        while True:
            answer = self.read_line(ANSWER_PROMPT).strip().lower()
            if answer == AFFIRMATIVE_RESPONSE:
                return True
            if answer == NEGATIVE_RESPONSE:
                return False

    def exit_game(self) -> None:
        self.input_provider.close()
        sys.exit(0)
