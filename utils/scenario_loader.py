"""
Scenario Loader for the Banker's Resource Allocator.

Loads and validates JSON scenario files holding the initial configuration
(available vector and maximum claim matrix) and an optional command script.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from utils.command_parser import Command, CommandParseError, parse_command


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


@dataclass
class Scenario:
    """
    Initial configuration plus scripted commands.

    Attributes:
        available: Units of each resource type [R]
        maximum: Maximum claim of each process [P][R]
        commands: Commands to run in order after construction
        description: Free-form description from the file
    """
    available: List[int]
    maximum: List[List[int]]
    commands: List[Command] = field(default_factory=list)
    description: str = ""

    @property
    def num_processes(self) -> int:
        return len(self.maximum)

    @property
    def num_resources(self) -> int:
        return len(self.available)


def load_scenario(file_path: str) -> Scenario:
    """
    Load scenario from JSON file.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Validated Scenario

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    return parse_scenario(data)


def parse_scenario(data: Dict[str, Any]) -> Scenario:
    """
    Validate an already-decoded scenario document.

    Args:
        data: Decoded JSON object

    Returns:
        Validated Scenario

    Raises:
        ScenarioLoadError: If any field is missing or malformed
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")

    # Validate required fields
    if 'available' not in data:
        raise ScenarioLoadError("Scenario missing 'available' field")
    if 'maximum' not in data:
        raise ScenarioLoadError("Scenario missing 'maximum' field")

    available = _load_vector(data['available'], "available")
    if not available:
        raise ScenarioLoadError("'available' must list at least one resource type")

    maximum = _load_maximum(data['maximum'], len(available))
    commands = _load_commands(data.get('commands', []))

    return Scenario(
        available=available,
        maximum=maximum,
        commands=commands,
        description=data.get('description', ''),
    )


def build_scenario(available: List[int], maximum: List[List[int]]) -> Scenario:
    """
    Validate configuration gathered interactively.

    Raises:
        ScenarioLoadError: If the values are malformed
    """
    return parse_scenario({'available': available, 'maximum': maximum})


def _load_vector(values: Any, name: str) -> List[int]:
    """
    Validate a list of non-negative integers.

    Args:
        values: Raw JSON value
        name: Field name for error messages

    Returns:
        List of ints
    """
    if not isinstance(values, list):
        raise ScenarioLoadError(f"'{name}' must be a list of integers")

    vector = []
    for i, value in enumerate(values):
        # bool is an int subclass in Python; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise ScenarioLoadError(f"{name}[{i}] must be an integer, got {value!r}")
        if value < 0:
            raise ScenarioLoadError(f"{name}[{i}] cannot be negative ({value})")
        vector.append(value)
    return vector


def _load_maximum(rows: Any, num_resources: int) -> List[List[int]]:
    """
    Load the maximum claim matrix.

    Args:
        rows: Raw JSON value
        num_resources: Number of resource types in system

    Returns:
        Matrix [P][R]
    """
    if not isinstance(rows, list) or not rows:
        raise ScenarioLoadError("'maximum' must list at least one process")

    maximum = []
    for i, row in enumerate(rows):
        vector = _load_vector(row, f"maximum[{i}]")

        # Validate row length matches resource count
        if len(vector) != num_resources:
            raise ScenarioLoadError(
                f"Process {i}: maximum length ({len(vector)}) "
                f"does not match resource count ({num_resources})"
            )
        maximum.append(vector)
    return maximum


def _load_commands(raw_commands: Any) -> List[Command]:
    """
    Parse scripted commands.

    Args:
        raw_commands: List of command strings

    Returns:
        Parsed commands in file order
    """
    if not isinstance(raw_commands, list):
        raise ScenarioLoadError("'commands' must be a list of strings")

    commands = []
    for i, text in enumerate(raw_commands):
        if not isinstance(text, str):
            raise ScenarioLoadError(f"commands[{i}] must be a string, got {text!r}")
        try:
            commands.append(parse_command(text))
        except CommandParseError as e:
            raise ScenarioLoadError(f"commands[{i}]: {e}")
    return commands

