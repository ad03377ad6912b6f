"""
Decision model for the Banker's Resource Allocator.

Every core operation reports its result as an explicit value instead of
raising: an Outcome saying what happened and a Decision carrying the details.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Outcome(Enum):
    """Result kinds for grant, release and safety decisions."""
    OK = "OK"
    INSUFFICIENT_CLAIM_OR_SUPPLY = "INSUFFICIENT_CLAIM_OR_SUPPLY"
    OVER_RELEASE = "OVER_RELEASE"
    UNSAFE_STATE = "UNSAFE_STATE"
    INVALID_INDEX = "INVALID_INDEX"


@dataclass(frozen=True)
class Decision:
    """
    Result of a single request or release.

    Attributes:
        outcome: What happened (OK when granted/released)
        process: Index of the process that issued the call
        request: Request (or release) vector [R]
        reason: Human-readable explanation for logs
        safe_sequence: Completion order found by the safety check (grants only)
    """
    outcome: Outcome
    process: int
    request: Tuple[int, ...]
    reason: str = ""
    safe_sequence: Optional[Tuple[int, ...]] = None

    @property
    def granted(self) -> bool:
        """True if the operation was applied to the state."""
        return self.outcome is Outcome.OK

    def __bool__(self) -> bool:
        return self.granted

    def __str__(self) -> str:
        status = "GRANTED" if self.granted else f"DENIED: {self.outcome.value}"
        if self.reason:
            return f"{status} ({self.reason})"
        return status
