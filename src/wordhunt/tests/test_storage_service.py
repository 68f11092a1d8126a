"""Tests for the key-value progress store."""
import json

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from wordhunt.models.records import LoadOutcome, ProgressSummary, WordRecord
from wordhunt.services.storage_service import ProgressStore


@pytest.fixture
def store(db: Session) -> ProgressStore:
    """Create a store on the test database."""
    return ProgressStore(db)


def _default_record() -> WordRecord:
    return WordRecord(word="cat")


def test_missing_key(store: ProgressStore) -> None:
    """Test that a missing key yields the default tagged as missing."""
    loaded = store.load("word-record:cat", WordRecord, _default_record)
    assert loaded.outcome is LoadOutcome.MISSING
    assert loaded.used_default is True
    assert loaded.value == WordRecord(word="cat")


def test_save_and_load(store: ProgressStore) -> None:
    """Test writing then reading a record, including overwrites."""
    store.save("progress-summary", ProgressSummary(total_sessions=1))
    store.save("progress-summary", ProgressSummary(total_sessions=2, last_session=99))

    loaded = store.load("progress-summary", ProgressSummary, ProgressSummary)
    assert loaded.outcome is LoadOutcome.FOUND
    assert loaded.used_default is False
    assert loaded.value == ProgressSummary(total_sessions=2, last_session=99)
    assert store.keys() == ["progress-summary"]


def test_values_are_versioned_json(store: ProgressStore, db: Session) -> None:
    """Test the stored envelope and camelCase fields."""
    from wordhunt.models.models import StoredEntry

    store.save("word-record:cat", WordRecord(word="cat", wrong_first=2))
    entry = db.get(StoredEntry, "word-record:cat")
    payload = json.loads(entry.value)
    assert payload["version"] == 1
    assert payload["data"]["wrongFirst"] == 2
    assert payload["data"]["sessions"] == []


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[]",
        json.dumps({"version": 1, "data": {"word": "cat", "box": 9}}),
        json.dumps({"version": 1, "data": {"word": "cat", "attempts": "three"}}),
        json.dumps({"version": 7, "data": {"word": "cat"}}),
        json.dumps({"attempts": 1}),
    ],
)
def test_corrupt_value(store: ProgressStore, raw: str) -> None:
    """Test that unreadable values yield the default tagged as corrupt."""
    store.write_raw("word-record:cat", raw)
    loaded = store.load("word-record:cat", WordRecord, _default_record)
    assert loaded.outcome is LoadOutcome.CORRUPT
    assert loaded.value == WordRecord(word="cat")


def test_legacy_value(store: ProgressStore) -> None:
    """Test that the game's unversioned records are still read."""
    legacy = {
        "word": "cat",
        "attempts": 3,
        "correct": 2,
        "wrongFirst": 1,
        "streak": 0,
        "bestStreak": 2,
        "lastSeen": 1700000000000,
        "lastCorrect": 1699999990000,
        "box": 1,
        "avgResponseMs": 1500,
        "sessions": [{"date": 1700000000000, "correct": False, "ms": 3000.5}],
    }
    store.write_raw("word-record:cat", json.dumps(legacy))

    loaded = store.load("word-record:cat", WordRecord, _default_record)
    assert loaded.outcome is LoadOutcome.FOUND
    record = loaded.value
    assert record.wrong_first == 1
    assert record.best_streak == 2
    assert record.sessions[0].ms == 3000.5
    assert record.sessions[0].correct is False


def test_keys_and_delete(store: ProgressStore) -> None:
    """Test prefix listing and deletion."""
    store.write_raw("session:1", "{}")
    store.write_raw("session:2", "{}")
    store.write_raw("word-record:a_b", "{}")
    store.write_raw("word-record:axb", "{}")

    assert store.keys("session:") == ["session:1", "session:2"]
    assert store.keys("word-record:a_") == ["word-record:a_b"]

    assert store.delete(["session:1", "session:3"]) == 1
    assert store.delete([]) == 0
    assert store.keys("session:") == ["session:2"]
    assert store.load("session:1", ProgressSummary, ProgressSummary).outcome is LoadOutcome.MISSING


def test_load_prefix_skips_corrupt(store: ProgressStore) -> None:
    """Test that prefix loads only return readable records."""
    store.save("word-record:cat", WordRecord(word="cat"))
    store.write_raw("word-record:dog", "{broken")

    records = store.load_prefix("word-record:", WordRecord)
    assert records == [("word-record:cat", WordRecord(word="cat"))]


def test_write_failure_propagates(store: ProgressStore, db: Session, mocker) -> None:
    """Test that a failed write rolls back and raises."""
    mocker.patch.object(db, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full")))
    rollback = mocker.spy(db, "rollback")

    with pytest.raises(OperationalError):
        store.save("progress-summary", ProgressSummary(total_sessions=1))
    rollback.assert_called_once()

    mocker.stopall()
    loaded = store.load("progress-summary", ProgressSummary, ProgressSummary)
    assert loaded.outcome is LoadOutcome.MISSING


if __name__ == "__main__":
    pytest.main([__file__])
