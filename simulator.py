#!/usr/bin/env python3
"""
Banker's Resource Allocator
Main entry point for the command-line driver.

Builds the banker from a JSON scenario (or interactive prompts), runs any
scripted commands, then optionally reads request/release commands from
standard input, printing the state after each one.
"""

import argparse
import sys
from typing import Callable, Iterable, List, Optional

from algorithms.banker import Banker
from analysis.events import EventLog, EventType
from utils.command_parser import Command, CommandParseError, USAGE, is_exit, parse_command
from utils.logger import SimulatorLogger
from utils.scenario_loader import (
    Scenario,
    ScenarioLoadError,
    build_scenario,
    load_scenario,
)


def run_session(
    scenario: Scenario,
    logger: SimulatorLogger,
    lines: Optional[Iterable[str]] = None,
    prompt: Optional[Callable[[str], None]] = None
) -> EventLog:
    """
    Run scripted commands and then any commands read from `lines`.

    Args:
        scenario: Initial configuration and scripted commands
        logger: Logger instance
        lines: Extra command lines (e.g. standard input), or None
        prompt: Called with the prompt text before each extra line

    Returns:
        EventLog containing all decisions
    """
    event_log = EventLog()
    banker = Banker(scenario.available, scenario.maximum, logger=logger, event_log=event_log)

    logger.log("Initial System State:")
    logger.log_state(banker.snapshot())

    for command in scenario.commands:
        logger.log(f"\n> {command}")
        apply_command(banker, command, logger)

    if lines is not None:
        _command_loop(banker, lines, logger, prompt)

    _display_statistics(event_log, logger)
    return event_log


def apply_command(banker: Banker, command: Command, logger: SimulatorLogger) -> bool:
    """
    Apply one parsed command and print the updated state.

    Returns:
        True if the request was granted or the release applied
    """
    if command.action == "request":
        decision = banker.request_decision(command.process, command.resource, command.amount)
        logger.log("Request granted." if decision.granted else "Request denied.")
    else:
        decision = banker.release(command.process, command.resource, command.amount)
        logger.log("Resources released." if decision.granted else "Release rejected.")

    logger.log_state(banker.snapshot())
    return decision.granted


def _command_loop(
    banker: Banker,
    lines: Iterable[str],
    logger: SimulatorLogger,
    prompt: Optional[Callable[[str], None]]
) -> None:
    """Read commands until exit or end of input."""
    prompt_text = f"Enter your next command in form {USAGE}: "

    iterator = iter(lines)
    while True:
        if prompt:
            prompt(prompt_text)
        line = next(iterator, None)
        if line is None or is_exit(line):
            break
        if not line.strip():
            continue

        try:
            command = parse_command(line)
        except CommandParseError as e:
            logger.log(str(e), "warning")
            continue

        apply_command(banker, command, logger)


def prompt_scenario(
    read_line: Callable[[str], str],
    logger: Optional[SimulatorLogger] = None
) -> Scenario:
    """
    Ask for the configuration interactively.

    Args:
        read_line: Callable that shows a prompt and returns the typed line
        logger: Logger for the prompt headings (a console logger if omitted)

    Returns:
        Validated Scenario

    Raises:
        ScenarioLoadError: If a value is not an integer or shapes mismatch
    """
    if logger is None:
        logger = SimulatorLogger()

    num_processes = _read_ints(read_line("Enter number of processes: "), 1)[0]
    num_resources = _read_ints(read_line("Enter the number of resources: "), 1)[0]
    if num_processes < 1 or num_resources < 1:
        raise ScenarioLoadError("Need at least one process and one resource type")
    available = _read_ints(
        read_line("Enter number of each resource, separated by white space: "),
        num_resources
    )

    maximum = []
    logger.log("Enter the maximum resource claim for each process:")
    for i in range(num_processes):
        maximum.append(_read_ints(read_line(f"Process {i}: "), num_resources))

    return build_scenario(available, maximum)


def _read_ints(text: str, expected: int) -> List[int]:
    """Split a line into exactly `expected` integers."""
    parts = text.split()
    if len(parts) != expected:
        raise ScenarioLoadError(f"Expected {expected} integer(s), got {len(parts)}: {text.strip()!r}")
    try:
        return [int(part) for part in parts]
    except ValueError:
        raise ScenarioLoadError(f"Expected integers, got {text.strip()!r}")


def _display_statistics(event_log: EventLog, logger: SimulatorLogger) -> None:
    """Display final session statistics."""
    logger.log("\nSession Statistics:")

    grants = len(event_log.get_events_by_type(EventType.GRANT))
    denials = len(event_log.get_events_by_type(EventType.DENIAL))
    releases = len(event_log.get_events_by_type(EventType.RELEASE))
    rejected = len(event_log.get_events_by_type(EventType.REJECTED))

    logger.log(f"  Requests Granted: {grants}")
    logger.log(f"  Requests Denied: {denials}")
    logger.log(f"  Releases: {releases}")
    logger.log(f"  Rejected Commands: {rejected}")


def _stdin_lines() -> Iterable[str]:
    for line in sys.stdin:
        yield line.rstrip("\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the allocator CLI."""
    parser = argparse.ArgumentParser(
        description="Banker's Algorithm resource allocator"
    )
    parser.add_argument(
        '--scenario',
        type=str,
        help='Path to scenario JSON file (prompted interactively if omitted)'
    )
    parser.add_argument(
        '--interactive',
        action='store_true',
        help='Read commands from standard input after the scripted ones'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        help='Mirror all output into this file'
    )

    args = parser.parse_args(argv)

    logger = SimulatorLogger(verbose=args.verbose, log_file=args.log_file)
    try:
        if args.scenario:
            scenario = load_scenario(args.scenario)
            if scenario.description:
                logger.log(scenario.description)
        else:
            scenario = prompt_scenario(input, logger)
    except (ScenarioLoadError, EOFError) as e:
        logger.log(f"Failed to load scenario: {e}", "error")
        logger.close()
        return 1

    # Without a scenario file there is no script, so always read stdin
    interactive = args.interactive or not args.scenario
    lines = _stdin_lines() if interactive else None
    prompt = (lambda text: print(text, end="", flush=True)) if interactive else None

    run_session(scenario, logger, lines, prompt)
    logger.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
