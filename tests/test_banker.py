"""
Banker Tests

Tests the request/release command surface, the event log it feeds, and the
invariants that must hold across any sequence of calls.
"""

import random
import sys
import threading
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.decision import Outcome
from algorithms.banker import Banker
from analysis.events import EventLog, EventType
from utils.logger import SimulatorLogger


TEXTBOOK_MAXIMUM = [[7, 5, 3], [3, 2, 2], [9, 0, 2], [2, 2, 2], [4, 3, 3]]


def _reference_banker() -> Banker:
    """Drive the textbook instance to available = [3, 3, 2] via single-resource calls."""
    banker = Banker([10, 5, 7], TEXTBOOK_MAXIMUM)
    for process, resource, amount in [
        (0, 1, 1),
        (1, 0, 2),
        (2, 0, 3), (2, 2, 2),
        (3, 0, 2), (3, 1, 1), (3, 2, 1),
        (4, 2, 2),
    ]:
        assert banker.request(process, resource, amount), (
            f"request({process}, {resource}, {amount}) should be granted"
        )
    return banker


def _check_invariants(banker: Banker, totals) -> None:
    snapshot = banker.snapshot()
    for j in range(snapshot.num_resources):
        allocated = sum(row[j] for row in snapshot.allocation)
        assert snapshot.available[j] >= 0, "available must stay non-negative"
        assert snapshot.available[j] + allocated == totals[j], f"R{j} not conserved"
    for i in range(snapshot.num_processes):
        for j in range(snapshot.num_resources):
            assert snapshot.allocation[i][j] >= 0
            assert snapshot.need[i][j] >= 0
            assert snapshot.allocation[i][j] + snapshot.need[i][j] == snapshot.maximum[i][j]


def test_reference_scenario():
    """The textbook scenario: request(1, 0, 1) granted, request(4, 1, 5) denied."""
    print("\n" + "="*60)
    print("TEST: Textbook Reference Scenario")
    print("="*60)

    banker = _reference_banker()
    snapshot = banker.snapshot()
    print(snapshot.display())

    assert snapshot.available == (3, 3, 2)
    assert snapshot.allocation == ((0, 1, 0), (2, 0, 0), (3, 0, 2), (2, 1, 1), (0, 0, 2))

    assert banker.request(1, 0, 1) is True, "request(1, 0, 1) is a known-safe grant"
    print("  ✓ request(1, 0, 1) granted")

    before = banker.snapshot()
    decision = banker.request_decision(4, 1, 5)
    assert not decision.granted
    assert decision.outcome is Outcome.INSUFFICIENT_CLAIM_OR_SUPPLY
    assert banker.snapshot() == before, "Denied request must leave state unchanged"
    print("  ✓ request(4, 1, 5) denied (insufficient claim or supply)")


def test_request_vector_is_atomic():
    """A multi-resource request is decided as one unit."""
    banker = _reference_banker()

    decision = banker.request_vector(1, [1, 0, 2])

    assert decision.granted
    assert banker.snapshot().available == (2, 3, 0)

    denied = banker.request_vector(0, [0, 2, 0])
    assert denied.outcome is Outcome.UNSAFE_STATE
    assert banker.snapshot().available == (2, 3, 0)


def test_release_never_denied_within_allocation():
    """Releases within allocation always succeed and raise availability."""
    banker = _reference_banker()
    before = banker.snapshot()

    decision = banker.release(2, 0, 3)

    assert decision.granted
    after = banker.snapshot()
    assert after.available[0] == before.available[0] + 3
    assert after.allocation[2] == (0, 0, 2)
    assert after.need[2] == (9, 0, 0)


def test_over_release_rejected():
    """Releasing more than held is rejected without mutation."""
    banker = _reference_banker()
    before = banker.snapshot()

    decision = banker.release(4, 2, 3)

    assert decision.outcome is Outcome.OVER_RELEASE
    assert "exceeds allocation" in decision.reason
    assert banker.snapshot() == before


def test_invalid_indices_reported():
    """Out-of-range process or resource indices give INVALID_INDEX."""
    banker = _reference_banker()
    before = banker.snapshot()

    assert banker.request_decision(5, 0, 1).outcome is Outcome.INVALID_INDEX
    assert banker.request_decision(0, 3, 1).outcome is Outcome.INVALID_INDEX
    assert banker.release(0, -1, 1).outcome is Outcome.INVALID_INDEX
    assert banker.release(-2, 0, 1).outcome is Outcome.INVALID_INDEX
    assert banker.request(5, 0, 1) is False
    assert banker.snapshot() == before


def test_negative_amounts_are_invalid_input():
    """A negative amount is an INVALID_INDEX rejection with its own reason."""
    banker = Banker([3, 3], [[2, 2], [1, 1]])
    before = banker.snapshot()

    decision = banker.request_decision(0, 0, -1)
    assert decision.outcome is Outcome.INVALID_INDEX
    assert decision.reason.startswith("Negative amount"), decision.reason

    decision = banker.release(1, 1, -2)
    assert decision.outcome is Outcome.INVALID_INDEX
    assert decision.reason == "Negative amount in [0, -2]"

    assert banker.snapshot() == before, "Negative amounts must not change state"
    assert [e.event_type for e in banker.event_log.events] == [EventType.REJECTED] * 2


def test_out_of_range_resource_records_zero_vector():
    """A call on an unknown resource charges nothing and logs a full-width vector."""
    banker = Banker([3, 3], [[2, 2], [1, 1]])

    decision = banker.request_decision(0, 9, 1)

    assert decision.outcome is Outcome.INVALID_INDEX
    assert decision.request == (0, 0), "Recorded vector must cover every resource type"
    assert "Resource index 9 out of range (0..1)" in decision.reason
    assert "amount 1" in decision.reason
    assert banker.event_log.events[-1].request == (0, 0)


def test_event_log_records_every_call():
    """Each call produces exactly one event of the right type."""
    event_log = EventLog()
    banker = Banker([2], [[2], [2]], event_log=event_log)

    banker.request(0, 0, 1)        # grant
    banker.request(1, 0, 1)        # unsafe -> denial
    banker.release(0, 0, 1)        # release
    banker.release(0, 0, 1)        # over-release -> rejected
    banker.request(3, 0, 1)        # invalid index -> rejected

    types = [e.event_type for e in event_log.events]
    print(event_log.display())
    assert types == [
        EventType.GRANT,
        EventType.DENIAL,
        EventType.RELEASE,
        EventType.REJECTED,
        EventType.REJECTED,
    ]
    assert [e.sequence for e in event_log.events] == [0, 1, 2, 3, 4]
    assert len(event_log.get_events_by_process(0)) == 3


def test_logger_levels(capsys):
    """Grants log at info, denials at warning, invalid input at error."""
    logger = SimulatorLogger()
    banker = Banker([2], [[2], [2]], logger=logger)

    banker.request(0, 0, 1)
    banker.request(1, 0, 1)
    banker.request(7, 0, 1)

    out = capsys.readouterr().out
    assert "P0 requests [1] - GRANTED" in out
    assert "[WARNING] P1 requests [1] - DENIED UNSAFE_STATE" in out
    assert "[ERROR] P7 requests [1] - DENIED INVALID_INDEX" in out


def test_unsatisfiable_claim_warning(capsys):
    """A claim above the total is accepted with a warning."""
    Banker([1], [[2]], logger=SimulatorLogger())

    out = capsys.readouterr().out
    assert "[WARNING] P0 claims more R0 than exist" in out


def test_default_logger_stays_silent(capsys):
    """Without a logger the banker prints nothing; the event log still records."""
    banker = Banker([1], [[2], [1]])

    banker.request(0, 0, 1)
    banker.request(7, 0, 1)
    banker.release(1, 0, 1)

    assert capsys.readouterr().out == "", "Embedded use must not write to stdout"
    types = [e.event_type for e in banker.event_log.events]
    assert types == [EventType.DENIAL, EventType.REJECTED, EventType.REJECTED]


def test_log_file_mirrors_output(tmp_path):
    """The optional log file receives every message."""
    log_path = tmp_path / "banker.log"
    logger = SimulatorLogger(log_file=str(log_path), quiet=True)
    banker = Banker([2], [[2], [2]], logger=logger)

    banker.request(0, 0, 1)
    logger.close()

    content = log_path.read_text(encoding="utf-8")
    assert content.startswith("Banker Session Log")
    assert "P0 requests [1] - GRANTED" in content


def test_random_sequences_preserve_invariants():
    """Invariants hold across a long random mix of requests and releases."""
    rng = random.Random(7)
    maximum = [[rng.randint(0, 5) for _ in range(4)] for _ in range(6)]
    available = [8, 6, 7, 5]
    banker = Banker(available, maximum)

    for _ in range(500):
        process = rng.randrange(6)
        resource = rng.randrange(4)
        amount = rng.randint(0, 3)
        before = banker.snapshot()

        if rng.random() < 0.6:
            decision = banker.request_decision(process, resource, amount)
            if not decision.granted:
                assert banker.snapshot() == before, "Denial must restore state exactly"
            assert banker.is_safe(), "A granted request must leave the state safe"
        else:
            held = before.allocation[process][resource]
            decision = banker.release(process, resource, amount)
            if amount <= held:
                assert decision.granted, "Release within allocation is never denied"
                assert banker.snapshot().available[resource] == before.available[resource] + amount
            else:
                assert decision.outcome is Outcome.OVER_RELEASE

        _check_invariants(banker, available)


def test_concurrent_callers_keep_state_consistent():
    """The banker's lock serializes callers from several threads."""
    available = [6, 6]
    banker = Banker(available, [[3, 3]] * 4)
    errors = []

    def worker(process: int) -> None:
        rng = random.Random(process)
        try:
            for _ in range(200):
                resource = rng.randrange(2)
                if rng.random() < 0.5:
                    banker.request(process, resource, 1)
                else:
                    held = banker.snapshot().allocation[process][resource]
                    if held:
                        banker.release(process, resource, 1)
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(p,)) for p in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors, f"Invariant violated under concurrency: {errors[0]}"
    _check_invariants(banker, available)
    assert banker.is_safe()


def main():
    """Run tests that do not need pytest fixtures."""
    test_reference_scenario()
    test_request_vector_is_atomic()
    test_release_never_denied_within_allocation()
    test_over_release_rejected()
    test_invalid_indices_reported()
    test_negative_amounts_are_invalid_input()
    test_out_of_range_resource_records_zero_vector()
    test_event_log_records_every_call()
    test_random_sequences_preserve_invariants()
    test_concurrent_callers_keep_state_consistent()
    print("\n✅ Banker Tests PASSED")
    return 0


if __name__ == '__main__':
    sys.exit(main())
