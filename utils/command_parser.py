"""
Command Parser for the Banker's Resource Allocator.

Turns textual commands of the form ``request(i, j, k)`` or
``release(i, j, k)`` into validated integer triples.
"""

import re
from dataclasses import dataclass
from typing import Optional


COMMAND_PATTERN = re.compile(
    r"^\s*(?P<action>[A-Za-z]+)\s*\(\s*(?P<args>[^()]*)\)\s*$"
)
EXIT_WORDS = ("exit", "quit")
USAGE = "request(i, j, k) or release(i, j, k)"


class CommandParseError(ValueError):
    """Exception raised when command text cannot be parsed."""
    pass


@dataclass(frozen=True)
class Command:
    """
    A parsed banker command.

    Attributes:
        action: "request" or "release"
        process: Process index (i)
        resource: Resource type index (j)
        amount: Number of units (k)
    """
    action: str
    process: int
    resource: int
    amount: int

    def __str__(self) -> str:
        return f"{self.action}({self.process}, {self.resource}, {self.amount})"


def is_exit(text: str) -> bool:
    """True if the text asks to leave the command loop."""
    return text.strip().lower() in EXIT_WORDS


def parse_command(text: str) -> Command:
    """
    Parse one command line.

    Args:
        text: Command text, e.g. "request(1, 0, 2)"

    Returns:
        Parsed Command

    Raises:
        CommandParseError: If the text is not a well-formed command
    """
    match = COMMAND_PATTERN.match(text)
    if not match:
        raise CommandParseError(f"Invalid command format: {text.strip()!r}. Use {USAGE}")

    action = match.group('action').lower()
    if action not in ("request", "release"):
        raise CommandParseError(f"Unknown command {action!r}. Use {USAGE}")

    params = [p.strip() for p in match.group('args').split(',')]
    if len(params) != 3:
        raise CommandParseError(
            f"{action} expects 3 parameters, got {len(params)}: {text.strip()!r}"
        )

    values = []
    for name, param in zip(("process", "resource", "amount"), params):
        value = _parse_int(param)
        if value is None:
            raise CommandParseError(f"{name} must be an integer, got {param!r}")
        if value < 0:
            raise CommandParseError(f"{name} cannot be negative, got {value}")
        values.append(value)

    return Command(action, *values)


def _parse_int(text: str) -> Optional[int]:
    """Parse a decimal integer, returning None when it is not one."""
    if not re.fullmatch(r"[+-]?\d+", text):
        return None
    return int(text)
