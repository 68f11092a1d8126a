"""Tests for session service."""
import pytest
from faker import Faker

from wordhunt.models.records import GameSession, LoadOutcome, ProgressSummary
from wordhunt.services.progress_tracker import ProgressTracker
from wordhunt.services.session_service import SessionService
from wordhunt.services.storage_service import SESSION_PREFIX

fake = Faker()


@pytest.fixture
def session_service(tracker: ProgressTracker) -> SessionService:
    """Session service of the test tracker."""
    return tracker.sessions


def _play(tracker: ProgressTracker, clock, difficulty: str = "words", score: int = 50) -> GameSession:
    session = tracker.start_session("word-hunt", difficulty)
    tracker.add_session_result(session, "cat", True, 1, 1200)
    clock.advance(seconds=90)
    return tracker.end_session(session, score, 90.4)


def test_start_session(session_service: SessionService, clock) -> None:
    """Test that a new session starts empty and is not stored."""
    session = session_service.start_session(None, "letters")
    assert session.date == clock.now
    assert session.mode == "word-hunt"
    assert session.difficulty == "letters"
    assert session.words_attempted == 0
    assert session.results == []
    assert session_service.store.keys(SESSION_PREFIX) == []


def test_add_session_result(session_service: SessionService) -> None:
    """Test that results accumulate in order, repeats included."""
    session = session_service.start_session("word-hunt", "words")
    session_service.add_session_result(session, "cat", True, 1, 900)
    session_service.add_session_result(session, "dog", False, 3, 4100)
    session_service.add_session_result(session, "cat", True, 2, 1500)

    assert session.words_attempted == 3
    assert session.words_correct == 2
    assert session.words == ["cat", "dog", "cat"]
    assert [result.word for result in session.results] == ["cat", "dog", "cat"]
    assert session.results[1].attempts == 3
    assert session_service.store.keys(SESSION_PREFIX) == []


def test_end_session_persists(session_service: SessionService, clock) -> None:
    """Test that ending a session stores it under its start time."""
    session = session_service.start_session("word-hunt", "words")
    session_service.add_session_result(session, "sun", True, 1, 800)
    score = fake.random_int(min=0, max=500)

    ended = session_service.end_session(session, score, 61.5)
    assert ended.score == score
    assert ended.total_time == 62
    assert ended.ended is True

    key = f"{SESSION_PREFIX}{session.date}"
    assert session_service.store.keys(SESSION_PREFIX) == [key]
    loaded = session_service.store.load(key, GameSession, lambda: None)
    assert loaded.outcome is LoadOutcome.FOUND
    assert loaded.value == ended


def test_ended_session_is_frozen(session_service: SessionService) -> None:
    """Test that an ended session cannot be changed or stored again."""
    session = session_service.start_session("word-hunt", "words")
    session_service.end_session(session, 10, 30)

    with pytest.raises(ValueError):
        session_service.add_session_result(session, "cat", True, 1, 1000)
    with pytest.raises(ValueError):
        session_service.end_session(session, 20, 40)


def test_progress_defaults(session_service: SessionService) -> None:
    """Test the zeroed summary before any session."""
    loaded = session_service.load_progress()
    assert loaded.outcome is LoadOutcome.MISSING
    assert loaded.value == ProgressSummary()


def test_two_sessions_count_twice(tracker: ProgressTracker, clock) -> None:
    """Test that each ended session increments the counter once."""
    first = _play(tracker, clock)
    clock.advance(minutes=5)
    second = _play(tracker, clock)

    progress = tracker.get_progress()
    assert progress.total_sessions == 2
    assert progress.last_session == second.date
    assert first.date != second.date


def test_words_learned_recomputed(tracker: ProgressTracker, session_service: SessionService, clock, mocker) -> None:
    """Test that words learned is recounted over every pool on each session end."""
    spy = mocker.spy(session_service.mastery_service, "calculate_mastery")
    vocabulary = sum(len(words) for words in tracker.word_sets.values())

    tracker.record_correct("cat", 1000)
    _play(tracker, clock)
    assert spy.call_count == vocabulary
    assert tracker.get_progress().total_words_learned == 1

    for _ in range(3):
        tracker.record_wrong("cat", 2000)
    clock.advance(minutes=5)
    _play(tracker, clock)
    assert spy.call_count == 2 * vocabulary
    progress = tracker.get_progress()
    assert progress.total_sessions == 2
    assert progress.total_words_learned == 0


def test_words_learned_counts_each_pool(db, clock) -> None:
    """Test that a word listed in two pools counts once per pool."""
    tracker = ProgressTracker(db, {"alphabet": ["A", "B"], "sound-match": ["A", "B"]}, clock=clock)
    tracker.record_correct("A", 1000)
    _play(tracker, clock, difficulty="alphabet")
    assert tracker.get_progress().total_words_learned == 2


def test_old_sessions_are_pruned(tracker: ProgressTracker, session_service: SessionService, clock) -> None:
    """Test that session logs older than 90 days are deleted."""
    oldest = _play(tracker, clock)
    clock.advance(days=2)
    kept = _play(tracker, clock)

    clock.advance(days=89)
    latest = _play(tracker, clock)

    keys = session_service.store.keys(SESSION_PREFIX)
    assert f"{SESSION_PREFIX}{oldest.date}" not in keys
    assert f"{SESSION_PREFIX}{kept.date}" in keys
    assert f"{SESSION_PREFIX}{latest.date}" in keys
    assert tracker.get_progress().total_sessions == 3


def test_prune_skips_malformed_keys(session_service: SessionService, clock) -> None:
    """Test that session keys without a timestamp are left alone."""
    session_service.store.write_raw(f"{SESSION_PREFIX}draft", "{}")
    session = session_service.start_session("word-hunt", "words")
    session_service.end_session(session, 0, 0)

    assert f"{SESSION_PREFIX}draft" in session_service.store.keys(SESSION_PREFIX)


if __name__ == "__main__":
    pytest.main([__file__])
