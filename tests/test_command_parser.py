"""
Command Parser Tests

Tests parsing of request(i, j, k) / release(i, j, k) command text.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from utils.command_parser import Command, CommandParseError, is_exit, parse_command


@pytest.mark.parametrize("text, expected", [
    ("request(1, 0, 2)", Command("request", 1, 0, 2)),
    ("release(4,2,1)", Command("release", 4, 2, 1)),
    ("  REQUEST ( 0 , 1 , 3 )  ", Command("request", 0, 1, 3)),
    ("Release(10, 11, 12)", Command("release", 10, 11, 12)),
])
def test_parse_valid_commands(text, expected):
    """Well-formed commands parse regardless of case and spacing."""
    assert parse_command(text) == expected


@pytest.mark.parametrize("text", [
    "",
    "request",
    "request 1 0 2",
    "request(1, 0)",
    "request(1, 0, 2, 3)",
    "allocate(1, 0, 2)",
    "request(a, 0, 2)",
    "request(1, 0, 2.5)",
    "request(1, -1, 2)",
    "request((1, 0, 2))",
])
def test_parse_invalid_commands(text):
    """Malformed text raises CommandParseError."""
    with pytest.raises(CommandParseError):
        parse_command(text)


def test_parse_error_is_value_error():
    """Collaborators may catch the parse error as a ValueError."""
    with pytest.raises(ValueError):
        parse_command("nonsense")


def test_command_str_round_trips():
    """str(Command) is valid command text."""
    command = Command("release", 2, 1, 4)
    assert str(command) == "release(2, 1, 4)"
    assert parse_command(str(command)) == command


def test_is_exit():
    """exit and quit end the loop, case-insensitively."""
    assert is_exit("exit")
    assert is_exit("  QUIT \n")
    assert not is_exit("request(0, 0, 1)")
