"""
Logger utility for the Banker's Resource Allocator.

Provides per-command logging with verbosity levels.
"""

from typing import Optional
from datetime import datetime

from models.decision import Decision, Outcome
from models.resource_state import StateSnapshot


class SimulatorLogger:
    """
    Logger for banker decisions.

    Format: "P1 requests [1, 0, 0] - GRANTED/DENIED (reason)"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None,
                 quiet: bool = False, console: bool = True):
        """
        Initialize logger.

        Args:
            verbose: Enable debug output
            log_file: Optional file path for logging
            quiet: Only print warnings and errors to the console
            console: Print to the console at all (False keeps output in the file only)
        """
        self.verbose = verbose
        self.quiet = quiet
        self.console = console
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Banker Session Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        # Console output
        if self.console and (not self.quiet or level in ("warning", "error")):
            print(formatted)

        # File output
        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_decision(self, decision: Decision, action: str = "request") -> None:
        """
        Log a request or release decision.

        Granted calls log at info, unsafe or unsatisfiable requests at
        warning, and malformed indices or amounts at error.

        Args:
            decision: Decision returned by the banker
            action: "request" or "release"
        """
        verb = "requests" if action == "request" else "releases"
        if decision.granted:
            status = "GRANTED" if action == "request" else "RELEASED"
            level = "info"
        else:
            status = f"DENIED {decision.outcome.value}"
            if decision.outcome is Outcome.INVALID_INDEX:
                level = "error"
            else:
                level = "warning"

        message = f"P{decision.process} {verb} {list(decision.request)} - {status}"
        if decision.reason:
            message += f" ({decision.reason})"
        self.log(message, level)

    def log_state(self, snapshot: StateSnapshot) -> None:
        """
        Log a state snapshot.

        Args:
            snapshot: Snapshot to render
        """
        self.log(snapshot.display())

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
