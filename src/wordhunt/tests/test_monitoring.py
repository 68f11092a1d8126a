"""Tests for exported metrics."""
import pytest
from prometheus_client import REGISTRY

from wordhunt.services.progress_tracker import ProgressTracker


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


def test_answer_and_box_metrics(tracker: ProgressTracker) -> None:
    """Test that answers and box moves are counted."""
    correct = _sample("wordhunt_answers_recorded_total", {"result": "correct"})
    wrong = _sample("wordhunt_answers_recorded_total", {"result": "wrong"})
    up = _sample("wordhunt_box_transitions_total", {"direction": "up"})
    down = _sample("wordhunt_box_transitions_total", {"direction": "down"})

    tracker.record_correct("cat", 1000)
    tracker.record_correct("cat", 1000)
    tracker.record_wrong("cat", 1000)
    tracker.record_wrong("cat", 1000)

    assert _sample("wordhunt_answers_recorded_total", {"result": "correct"}) == correct + 2
    assert _sample("wordhunt_answers_recorded_total", {"result": "wrong"}) == wrong + 2
    assert _sample("wordhunt_box_transitions_total", {"direction": "up"}) == up + 1
    assert _sample("wordhunt_box_transitions_total", {"direction": "down"}) == down + 1


def test_session_metrics(tracker: ProgressTracker) -> None:
    """Test that completed sessions are counted by difficulty."""
    before = _sample("wordhunt_sessions_completed_total", {"difficulty": "letters"})
    session = tracker.start_session("word-hunt", "letters")
    tracker.end_session(session, 10, 75)
    assert _sample("wordhunt_sessions_completed_total", {"difficulty": "letters"}) == before + 1


def test_corrupt_read_metric(tracker: ProgressTracker) -> None:
    """Test that corrupt reads are counted by record type."""
    before = _sample("wordhunt_corrupt_reads_total", {"kind": "WordRecord"})
    tracker.store.write_raw("word-record:cat", "{oops")
    tracker.get_word_data("cat")
    assert _sample("wordhunt_corrupt_reads_total", {"kind": "WordRecord"}) == before + 1


if __name__ == "__main__":
    pytest.main([__file__])
