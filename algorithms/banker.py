"""
Banker facade for the Resource Allocator.

Owns the resource state and exposes the request/release surface consumed by
collaborators (the CLI, scenario scripts, tests).
"""

import threading
from typing import List, Optional, Sequence

from models.decision import Decision, Outcome
from models.resource_state import ResourceState, StateSnapshot
from algorithms.safety import SafetyChecker, is_safe
from analysis.events import EventLog
from utils.logger import SimulatorLogger


class Banker:
    """
    Deadlock-avoiding allocator for a fixed set of processes and resources.

    Every operation holds a single lock for its whole duration, so no caller
    can observe a tentatively granted state that has not been verified.
    """

    def __init__(
        self,
        available: Sequence[int],
        maximum: Sequence[Sequence[int]],
        logger: Optional[SimulatorLogger] = None,
        event_log: Optional[EventLog] = None
    ):
        """
        Initialize the banker.

        Args:
            available: Units of each resource type [R]
            maximum: Maximum claim of each process [P][R]
            logger: Logger for decisions (silent logger if omitted; the event log still records)
            event_log: Event log to record decisions into

        Raises:
            ValueError: If the configuration is malformed
        """
        self.state = ResourceState(available, maximum)
        self.checker = SafetyChecker()
        self.logger = logger if logger is not None else SimulatorLogger(console=False)
        self.event_log = event_log if event_log is not None else EventLog()
        self._lock = threading.Lock()

        for process, resource in self.state.unsatisfiable_claims():
            self.logger.log(
                f"P{process} claims more R{resource} than exist "
                f"({self.state.maximum[process][resource]} > {self.state.total[resource]}); "
                f"it can never finish",
                "warning"
            )

    @property
    def num_processes(self) -> int:
        return self.state.num_processes

    @property
    def num_resources(self) -> int:
        return self.state.num_resources

    def request_vector(self, process: int, request: Sequence[int]) -> Decision:
        """
        Request units of several resource types in one atomic decision.

        Args:
            process: Index of the requesting process
            request: Units requested of each resource type [R]

        Returns:
            Decision (granted only if the resulting state is safe)
        """
        with self._lock:
            decision = self.checker.evaluate(self.state, process, request)
            if decision.granted:
                self.state.assert_invariants(f"after granting {list(decision.request)} to P{process}")
                self.logger.log(
                    f"  Available now: {self.state.available.tolist()}", "debug"
                )
            return self._record(decision, "request")

    def request_decision(self, process: int, resource: int, amount: int) -> Decision:
        """Request a single resource type; other types are zero-filled."""
        vector = self._single(resource, amount)
        if vector is None:
            with self._lock:
                return self._record(self._invalid_resource(process, resource, amount), "request")
        return self.request_vector(process, vector)

    def request(self, process: int, resource: int, amount: int) -> bool:
        """
        Request `amount` units of `resource` for `process`.

        Returns:
            True if granted
        """
        return self.request_decision(process, resource, amount).granted

    def release_vector(self, process: int, release: Sequence[int]) -> Decision:
        """
        Release units of several resource types. Never runs the safety check.

        Args:
            process: Index of the releasing process
            release: Units released of each resource type [R]

        Returns:
            Decision (OK unless the release exceeds the allocation or is malformed)
        """
        release_tuple = tuple(int(amount) for amount in release)

        with self._lock:
            outcome = self.state.release(process, release_tuple)
            if outcome is Outcome.OK:
                self.state.assert_invariants(f"after P{process} released {list(release_tuple)}")
                reason = ""
            elif outcome is Outcome.OVER_RELEASE:
                reason = (
                    f"Release exceeds allocation (releasing: {list(release_tuple)}, "
                    f"holding: {self.state.allocation[process].tolist()})"
                )
            else:
                reason = self.state.invalid_reason(process, release_tuple)

            decision = Decision(outcome=outcome, process=process, request=release_tuple, reason=reason)
            return self._record(decision, "release")

    def release(self, process: int, resource: int, amount: int) -> Decision:
        """Release `amount` units of `resource` held by `process`."""
        vector = self._single(resource, amount)
        if vector is None:
            with self._lock:
                return self._record(self._invalid_resource(process, resource, amount), "release")
        return self.release_vector(process, vector)

    def snapshot(self) -> StateSnapshot:
        """Immutable copy of the current state for display."""
        with self._lock:
            return self.state.snapshot()

    def is_safe(self) -> bool:
        """Check whether the current state is safe (it always should be)."""
        with self._lock:
            return is_safe(self.state)

    def _single(self, resource: int, amount: int) -> Optional[List[int]]:
        """Build a zero-filled vector, or None if the resource index is out of range."""
        if not 0 <= resource < self.num_resources:
            return None
        vector = [0] * self.num_resources
        vector[resource] = amount
        return vector

    def _invalid_resource(self, process: int, resource: int, amount: int) -> Decision:
        # Nothing is charged, so the recorded vector stays all zeros
        return Decision(
            outcome=Outcome.INVALID_INDEX,
            process=process,
            request=tuple([0] * self.num_resources),
            reason=(
                f"Resource index {resource} out of range (0..{self.num_resources - 1}), "
                f"amount {amount}"
            ),
        )

    def _record(self, decision: Decision, action: str) -> Decision:
        self.logger.log_decision(decision, action)
        self.event_log.record(decision, action)
        return decision
