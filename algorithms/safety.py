"""
Safety Check (Banker's Algorithm) for the Resource Allocator.

Decides whether granting a request leaves the system in a safe state and
commits or rolls back the tentative grant accordingly.
"""

import numpy as np
from typing import List, Optional, Sequence

from models.decision import Decision, Outcome
from models.resource_state import ResourceState


def find_safe_sequence(state: ResourceState) -> Optional[List[int]]:
    """
    Search for a completion order of all processes.

    Algorithm:
    1. Initialize Work = Available, Finish = [False] * num_processes
    2. Find the lowest-index process i where Finish[i] == False and Need[i] <= Work
    3. If found: Finish[i] = True, Work += Allocation[i], append i, restart at index 0
    4. Stop when every process finished (SAFE) or a full pass finds none (UNSAFE)

    Time Complexity: O(P²×R)

    Args:
        state: Current resource state (not modified)

    Returns:
        Process indices in completion order, or None if the state is unsafe

    References:
        Silberschatz, A., Galvin, P. B., & Gagne, G. (2018).
        Operating System Concepts (10th ed.). Chapter 7.5: Deadlock Avoidance.
    """
    work = state.available
    need = state.need
    allocation = state.allocation
    finish = np.zeros(state.num_processes, dtype=bool)
    safe_sequence = []

    made_progress = True
    while made_progress:
        made_progress = False

        for i in range(state.num_processes):
            if finish[i]:
                continue

            if np.all(need[i] <= work):
                # Simulate completion: process returns everything it holds
                work += allocation[i]
                finish[i] = True
                safe_sequence.append(i)
                made_progress = True
                break  # Restart search from beginning for determinism

    if np.all(finish):
        return safe_sequence
    return None


def is_safe(state: ResourceState) -> bool:
    """Check whether the current state admits a completion order."""
    return find_safe_sequence(state) is not None


class SafetyChecker:
    """
    Grants or denies requests so the system never leaves a safe state.

    Steps:
    1. Tentatively allocate (state checks request <= need and <= available)
    2. Run the safety algorithm on the new state
    3. If safe: keep the allocation
       If unsafe: roll back to the exact prior state
    """

    def evaluate(self, state: ResourceState, process: int, request: Sequence[int]) -> Decision:
        """
        Decide a single request.

        Args:
            state: Resource state, mutated only if the request is granted
            process: Index of the requesting process
            request: Units requested of each resource type [R]

        Returns:
            Decision describing the outcome
        """
        request_tuple = tuple(int(amount) for amount in request)

        outcome = state.tentative_grant(process, request_tuple)
        if outcome is not Outcome.OK:
            return Decision(
                outcome=outcome,
                process=process,
                request=request_tuple,
                reason=_rejection_reason(state, process, request_tuple, outcome),
            )

        safe_sequence = find_safe_sequence(state)

        if safe_sequence is None:
            state.rollback(process, request_tuple)
            return Decision(
                outcome=Outcome.UNSAFE_STATE,
                process=process,
                request=request_tuple,
                reason="Unsafe state detected - request rolled back",
            )

        seq_str = " -> ".join([f"P{i}" for i in safe_sequence])
        return Decision(
            outcome=Outcome.OK,
            process=process,
            request=request_tuple,
            reason=f"Safe state maintained, sequence: {seq_str}",
            safe_sequence=tuple(safe_sequence),
        )


def _rejection_reason(state: ResourceState, process: int, request: tuple, outcome: Outcome) -> str:
    """Explain why tentative_grant refused the request."""
    if outcome is Outcome.INVALID_INDEX:
        return state.invalid_reason(process, request)
    return (
        f"Request exceeds need or availability (requested: {list(request)}, "
        f"need: {state.need[process].tolist()}, available: {state.available.tolist()})"
    )
