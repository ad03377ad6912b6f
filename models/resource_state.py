"""
Resource State model for the Banker's Resource Allocator.

Holds the available vector and the maximum, allocation and need matrices
required by Banker's Algorithm, and provides the primitive mutations the
safety checker builds on.
"""

import numpy as np
from typing import List, Sequence, Tuple
from dataclasses import dataclass

from models.decision import Outcome


Matrix = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class StateSnapshot:
    """
    Immutable copy of the resource state for display and comparison.

    Attributes:
        available: Free units per resource type [R]
        maximum: Declared maximum claim per process [P][R]
        allocation: Units currently held per process [P][R]
        need: Remaining claim per process [P][R] (maximum - allocation)
    """
    available: Tuple[int, ...]
    maximum: Matrix
    allocation: Matrix
    need: Matrix

    @property
    def num_processes(self) -> int:
        return len(self.maximum)

    @property
    def num_resources(self) -> int:
        return len(self.available)

    def display(self) -> str:
        """
        Generate readable string representation of the state.

        Returns:
            Formatted string showing all matrices and the available vector
        """
        output = []
        output.append("\n" + "="*60)
        output.append("SYSTEM STATE")
        output.append("="*60)

        header = "     " + " ".join([f"R{j:2}" for j in range(self.num_resources)])

        for title, matrix in (
            ("Claim Matrix (Maximum):", self.maximum),
            ("Allocation Matrix:", self.allocation),
            ("Need Matrix (Max - Allocation):", self.need),
        ):
            output.append(f"\n{title}")
            output.append(header)
            for i, row in enumerate(matrix):
                output.append(f"  P{i}: " + " ".join([f"{value:3}" for value in row]))

        output.append("\nAvailable Resources:")
        output.append(
            "  [" + ", ".join(f"R{j}:{value:2}" for j, value in enumerate(self.available)) + "]"
        )

        output.append("\n" + "="*60)
        return "\n".join(output)


def _freeze(array: np.ndarray) -> Matrix:
    return tuple(tuple(int(value) for value in row) for row in array)


class ResourceState:
    """
    Authoritative state for Banker's Algorithm.

    Attributes:
        available: [R] Free resource units by type
        maximum: [P][R] Maximum claim declared by each process (never mutated)
        allocation: [P][R] Units currently held by each process
        need: [P][R] Maximum - Allocation, maintained incrementally
        total: [R] Units per type fixed at construction (conservation target)

    Allocation starts at zero, so the initial available vector is also the
    total for each resource type.
    """

    def __init__(self, available: Sequence[int], maximum: Sequence[Sequence[int]]):
        """
        Initialize state from already-parsed configuration.

        Args:
            available: Units of each resource type [R]
            maximum: Maximum claim of each process [P][R]

        Raises:
            ValueError: If shapes are inconsistent or any value is negative
        """
        available_vector = np.array(available, dtype=int)
        max_matrix = np.array(maximum, dtype=int)

        if available_vector.ndim != 1 or available_vector.size == 0:
            raise ValueError("available must be a non-empty vector")
        if max_matrix.ndim != 2 or max_matrix.shape[0] == 0:
            raise ValueError("maximum must be a non-empty [P][R] matrix")
        if max_matrix.shape[1] != available_vector.size:
            raise ValueError(
                f"maximum has {max_matrix.shape[1]} columns but there are "
                f"{available_vector.size} resource types"
            )
        if np.any(available_vector < 0):
            raise ValueError("available cannot contain negative values")
        if np.any(max_matrix < 0):
            raise ValueError("maximum cannot contain negative values")

        self._available = available_vector
        self._total = available_vector.copy()
        self._maximum = max_matrix
        self._maximum.setflags(write=False)
        self._allocation = np.zeros_like(max_matrix)
        self._need = max_matrix.copy()

    @property
    def num_processes(self) -> int:
        """Number of processes in the system."""
        return self._maximum.shape[0]

    @property
    def num_resources(self) -> int:
        """Number of resource types in the system."""
        return self._available.size

    @property
    def available(self) -> np.ndarray:
        """Copy of the available vector [R]."""
        return self._available.copy()

    @property
    def total(self) -> np.ndarray:
        """Copy of the per-type totals [R]."""
        return self._total.copy()

    @property
    def maximum(self) -> np.ndarray:
        """Copy of the maximum claim matrix [P][R]."""
        return self._maximum.copy()

    @property
    def allocation(self) -> np.ndarray:
        """Copy of the allocation matrix [P][R]."""
        return self._allocation.copy()

    @property
    def need(self) -> np.ndarray:
        """Copy of the need matrix [P][R]."""
        return self._need.copy()

    def unsatisfiable_claims(self) -> List[Tuple[int, int]]:
        """
        Find (process, resource) pairs whose maximum claim exceeds the total.

        Such a process can never finish, so no grant that leaves it unfinished
        will ever pass the safety check.
        """
        rows, cols = np.nonzero(self._maximum > self._total)
        return [(int(i), int(j)) for i, j in zip(rows, cols)]

    def validate(self, process: int, request: Sequence[int]) -> Outcome:
        """
        Check indices and amounts shared by every operation.

        Args:
            process: Process index
            request: Request or release vector [R]

        Returns:
            Outcome.OK or INVALID_INDEX (bad index, length or negative amount)
        """
        if not 0 <= process < self.num_processes:
            return Outcome.INVALID_INDEX
        if len(request) != self.num_resources:
            return Outcome.INVALID_INDEX
        if any(amount < 0 for amount in request):
            return Outcome.INVALID_INDEX
        return Outcome.OK

    def invalid_reason(self, process: int, request: Sequence[int]) -> str:
        """Explain why validate rejected a vector."""
        if 0 <= process < self.num_processes and len(request) == self.num_resources:
            return f"Negative amount in {list(request)}"
        return (
            f"Index out of range (process {process} of {self.num_processes}, "
            f"{len(request)} of {self.num_resources} resource types)"
        )

    def tentative_grant(self, process: int, request: Sequence[int]) -> Outcome:
        """
        Apply a request without any safety check.

        Args:
            process: Process index
            request: Units requested of each resource type [R]

        Returns:
            Outcome.OK if applied, otherwise the reason nothing was changed
        """
        outcome = self.validate(process, request)
        if outcome is not Outcome.OK:
            return outcome

        vector = np.array(request, dtype=int)

        # Request must fit both the remaining claim and the free pool
        if np.any(vector > self._need[process]) or np.any(vector > self._available):
            return Outcome.INSUFFICIENT_CLAIM_OR_SUPPLY

        self._available -= vector
        self._allocation[process] += vector
        self._need[process] -= vector
        return Outcome.OK

    def rollback(self, process: int, request: Sequence[int]) -> None:
        """
        Undo a previous tentative_grant with the same request vector.

        Args:
            process: Process index
            request: The exact vector passed to tentative_grant

        Raises:
            ValueError: If the request was never applied to this process
        """
        if self.validate(process, request) is not Outcome.OK:
            raise ValueError(f"P{process}: cannot roll back malformed request {list(request)}")

        vector = np.array(request, dtype=int)
        if np.any(vector > self._allocation[process]):
            raise ValueError(
                f"P{process}: rollback of {vector.tolist()} exceeds allocation "
                f"{self._allocation[process].tolist()}"
            )

        self._available += vector
        self._allocation[process] -= vector
        self._need[process] += vector

    def release(self, process: int, request: Sequence[int]) -> Outcome:
        """
        Return held units to the available pool.

        Releasing can only enlarge the set of processes able to finish, so no
        safety check is needed.

        Args:
            process: Process index
            request: Units released of each resource type [R]

        Returns:
            Outcome.OK if applied, otherwise the reason nothing was changed
        """
        outcome = self.validate(process, request)
        if outcome is not Outcome.OK:
            return outcome

        vector = np.array(request, dtype=int)
        if np.any(vector > self._allocation[process]):
            return Outcome.OVER_RELEASE

        self._allocation[process] -= vector
        self._available += vector
        self._need[process] += vector
        return Outcome.OK

    def snapshot(self) -> StateSnapshot:
        """Create an immutable copy of the current state."""
        return StateSnapshot(
            available=tuple(int(value) for value in self._available),
            maximum=_freeze(self._maximum),
            allocation=_freeze(self._allocation),
            need=_freeze(self._need),
        )

    def assert_invariants(self, context: str = "") -> None:
        """Verify non-negativity, need consistency and resource conservation.

        Args:
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If any invariant is violated
        """
        assert np.all(self._allocation >= 0), (
            f"Negative allocation {context}\n{self._allocation}"
        )
        assert np.all(self._need >= 0), (
            f"Negative need {context}\n{self._need}"
        )
        assert np.array_equal(self._allocation + self._need, self._maximum), (
            f"Allocation + Need != Maximum {context}"
        )

        for r_idx in range(self.num_resources):
            allocated = self._allocation[:, r_idx].sum()
            available = self._available[r_idx]
            total = self._total[r_idx]

            assert available >= 0, (
                f"Negative available resources for R{r_idx} {context}\n"
                f"  Available: {available}"
            )
            assert allocated + available == total, (
                f"Resource conservation violated for R{r_idx} {context}\n"
                f"  Allocated: {allocated}, Available: {available}, Total: {total}\n"
                f"  Allocated + Available = {allocated + available} != {total}"
            )
