"""
Event Model for the Banker's Resource Allocator.

Defines event types for tracking request and release decisions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from models.decision import Decision, Outcome


class EventType(Enum):
    """Types of recorded decisions."""
    GRANT = "grant"
    DENIAL = "denial"
    RELEASE = "release"
    REJECTED = "rejected"


@dataclass
class DecisionEvent:
    """
    Represents a single decision made by the banker.

    Attributes:
        sequence: Position of the call in the session (0-based)
        event_type: Type of event
        process_id: Process index involved
        request: Request or release vector
        outcome: Outcome reported by the core
        reason: Explanation of the decision
    """
    sequence: int
    event_type: EventType
    process_id: int
    request: Tuple[int, ...]
    outcome: Outcome
    reason: str = ""

    def __str__(self) -> str:
        """Format event for logging."""
        base = f"#{self.sequence}: P{self.process_id}"

        if self.event_type == EventType.GRANT:
            return f"{base} requests {list(self.request)} - GRANTED ({self.reason})"
        elif self.event_type == EventType.DENIAL:
            return f"{base} requests {list(self.request)} - DENIED ({self.outcome.value})"
        elif self.event_type == EventType.RELEASE:
            return f"{base} releases {list(self.request)}"
        else:
            return f"{base} - REJECTED {self.outcome.value}: {self.reason}"


def classify(decision: Decision, action: str) -> EventType:
    """Map a decision from a request or release call to its event type."""
    if decision.outcome in (Outcome.INVALID_INDEX, Outcome.OVER_RELEASE):
        return EventType.REJECTED
    if action == "release":
        return EventType.RELEASE
    return EventType.GRANT if decision.granted else EventType.DENIAL


@dataclass
class EventLog:
    """Collection of decision events."""
    events: List[DecisionEvent] = field(default_factory=list)

    def record(self, decision: Decision, action: str) -> DecisionEvent:
        """Append the event for a decision and return it."""
        event = DecisionEvent(
            sequence=len(self.events),
            event_type=classify(decision, action),
            process_id=decision.process,
            request=decision.request,
            outcome=decision.outcome,
            reason=decision.reason,
        )
        self.events.append(event)
        return event

    def get_events_by_type(self, event_type: EventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_by_process(self, process_id: int) -> list:
        """Get all events issued by a specific process."""
        return [e for e in self.events if e.process_id == process_id]

    def display(self) -> str:
        """Format all events for display."""
        return "\n".join(str(event) for event in self.events)
