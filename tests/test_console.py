import builtins

import pytest

from console import (
    EXIT_KEYWORD,
    ConsoleInput,
    is_quit,
    parse_mode,
    parse_move,
    parse_simulation_count,
)


@pytest.mark.parametrize("text, expected", [
    ("0 0 0 1", (0, 0, 0, 1)),
    ("(0, 0) (0, 1)", (0, 0, 0, 1)),
    ("row 3 col 12 and row 4 col 5", (3, 12, 4, 5)),
    ("a12b3c4d5e6", (12, 3, 4, 5)),
    ("007 1 2 3", (7, 1, 2, 3)),
])
def test_parse_move(text, expected):
    assert parse_move(text) == expected


@pytest.mark.parametrize("text", ["", "1 2 3", "hello", "-1 -2 -3", "(0, 0)"])
def test_parse_move_needs_four_numbers(text):
    assert parse_move(text) is None


def test_parse_move_ignores_signs():
    # only digit runs count, so negative positions read as positive
    assert parse_move("-1 -2 -3 -4") == (1, 2, 3, 4)


@pytest.mark.parametrize("text, expected", [
    ("1", 1), ("4", 4), (" mode 3 ", 3), ("0", None), ("5", None), ("12", None), ("", None), ("two", None),
])
def test_parse_mode(text, expected):
    assert parse_mode(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("1", 1), ("15000", 15000), ("1000000", 1000000), ("1000001", None), ("0", None), ("many", None),
])
def test_parse_simulation_count(text, expected):
    assert parse_simulation_count(text) == expected


@pytest.mark.parametrize("text", ["quit", "QUIT", " Quit \n"])
def test_is_quit(text):
    assert is_quit(text)


@pytest.mark.parametrize("text", ["", "quit now", "q", "0 0 0 1"])
def test_is_not_quit(text):
    assert not is_quit(text)


def test_console_input_reads_lines(monkeypatch):
    monkeypatch.setattr(builtins, "input", lambda prompt="": "0 0 1 1")
    assert ConsoleInput().read_line("Mode: ") == "0 0 1 1"


def test_console_input_end_of_file_quits(monkeypatch):
    def raise_eof(prompt=""):
        raise EOFError

    monkeypatch.setattr(builtins, "input", raise_eof)
    console = ConsoleInput()
    assert console.read_line() == EXIT_KEYWORD
    assert console.closed


def test_closed_console_input_quits():
    console = ConsoleInput()
    console.close()
    assert console.read_line() == EXIT_KEYWORD


@pytest.mark.parametrize("text", ["12", "5 3", "0 1", "40"])
def test_mode_is_read_from_the_first_number_only(text):
    # later numbers are never tried once the first one is out of range
    assert parse_mode(text) is None


@pytest.mark.parametrize("text, expected", [("0 7", None), ("007", 7), ("25 games, not 30", 25)])
def test_simulation_count_is_read_from_the_first_number_only(text, expected):
    assert parse_simulation_count(text) == expected
