"""Typed records kept in the progress store and their JSON codec.

Every value is written as ``{"version": 1, "data": {...}}`` with camelCase
field names. A bare object without the envelope is the game's original
untyped format and is read as version 0; the fields are the same.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Type, TypeVar

SCHEMA_VERSION = 1
SUPPORTED_VERSIONS = (0, 1)

T = TypeVar("T")

_MISSING = object()


class RecordFormatError(ValueError):
    """A stored value could not be decoded into a record."""


class LoadOutcome(Enum):
    """How a record was obtained from the store."""
    FOUND = "found"  # decoded from a stored value
    MISSING = "missing"  # no stored value, default used
    CORRUPT = "corrupt"  # stored value unreadable, default used


@dataclass
class Loaded(Generic[T]):
    """A record together with the outcome of reading it."""
    value: T
    outcome: LoadOutcome

    @property
    def used_default(self) -> bool:
        return self.outcome is not LoadOutcome.FOUND


def _get(data: Dict[str, Any], name: str, default: Any = _MISSING) -> Any:
    value = data.get(name, default)
    if value is _MISSING:
        raise RecordFormatError(f"Missing field '{name}'")
    return value


def _int(data: Dict[str, Any], name: str, default: Any = _MISSING) -> int:
    value = _get(data, name, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordFormatError(f"Field '{name}' must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise RecordFormatError(f"Field '{name}' must be an integer, got {value!r}")
        value = int(value)
    return value


def _number(data: Dict[str, Any], name: str, default: Any = _MISSING) -> float:
    value = _get(data, name, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordFormatError(f"Field '{name}' must be a number, got {value!r}")
    return value


def _bool(data: Dict[str, Any], name: str, default: Any = _MISSING) -> bool:
    value = _get(data, name, default)
    if not isinstance(value, bool):
        raise RecordFormatError(f"Field '{name}' must be a boolean, got {value!r}")
    return value


def _str(data: Dict[str, Any], name: str, default: Any = _MISSING) -> str:
    value = _get(data, name, default)
    if not isinstance(value, str):
        raise RecordFormatError(f"Field '{name}' must be a string, got {value!r}")
    return value


def _list(data: Dict[str, Any], name: str, default: Any = _MISSING) -> list:
    value = _get(data, name, default)
    if not isinstance(value, list):
        raise RecordFormatError(f"Field '{name}' must be a list, got {value!r}")
    return value


def _object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise RecordFormatError(f"{what} must be an object, got {value!r}")
    return value


@dataclass
class AnswerEvent:
    """One answer in a word's bounded answer log."""
    date: int
    correct: bool
    ms: float

    def to_data(self) -> Dict[str, Any]:
        return {"date": self.date, "correct": self.correct, "ms": self.ms}

    @classmethod
    def from_data(cls, data: Any) -> "AnswerEvent":
        data = _object(data, "Answer event")
        return cls(date=_int(data, "date"), correct=_bool(data, "correct"), ms=_number(data, "ms", 0))


@dataclass
class WordRecord:
    """Per-word learning state."""
    word: str
    attempts: int = 0
    correct: int = 0
    wrong_first: int = 0
    streak: int = 0
    best_streak: int = 0
    last_seen: int = 0
    last_correct: int = 0
    box: int = 1
    avg_response_ms: float = 0
    sessions: List[AnswerEvent] = field(default_factory=list)

    @property
    def accuracy(self) -> float:
        """Lifetime share of correct answers, 0 when never attempted."""
        return self.correct / self.attempts if self.attempts else 0.0

    def to_data(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "attempts": self.attempts,
            "correct": self.correct,
            "wrongFirst": self.wrong_first,
            "streak": self.streak,
            "bestStreak": self.best_streak,
            "lastSeen": self.last_seen,
            "lastCorrect": self.last_correct,
            "box": self.box,
            "avgResponseMs": self.avg_response_ms,
            "sessions": [event.to_data() for event in self.sessions],
        }

    @classmethod
    def from_data(cls, data: Any) -> "WordRecord":
        data = _object(data, "Word record")
        box = _int(data, "box", 1) or 1
        if box < 1 or box > 4:
            raise RecordFormatError(f"Box {box} is out of range")
        return cls(
            word=_str(data, "word"),
            attempts=_int(data, "attempts", 0),
            correct=_int(data, "correct", 0),
            wrong_first=_int(data, "wrongFirst", 0),
            streak=_int(data, "streak", 0),
            best_streak=_int(data, "bestStreak", 0),
            last_seen=_int(data, "lastSeen", 0),
            last_correct=_int(data, "lastCorrect", 0),
            box=box,
            avg_response_ms=_number(data, "avgResponseMs", 0),
            sessions=[AnswerEvent.from_data(item) for item in _list(data, "sessions", [])],
        )


@dataclass
class SessionResult:
    """Outcome of one target word within a game."""
    word: str
    correct: bool
    attempts: int
    ms: float

    def to_data(self) -> Dict[str, Any]:
        return {"word": self.word, "correct": self.correct, "attempts": self.attempts, "ms": self.ms}

    @classmethod
    def from_data(cls, data: Any) -> "SessionResult":
        data = _object(data, "Session result")
        return cls(
            word=_str(data, "word"),
            correct=_bool(data, "correct"),
            attempts=_int(data, "attempts", 0),
            ms=_number(data, "ms", 0),
        )


@dataclass
class GameSession:
    """One playthrough, keyed by its start time."""
    date: int
    mode: str
    difficulty: str
    words_attempted: int = 0
    words_correct: int = 0
    total_time: int = 0
    score: float = 0
    words: List[str] = field(default_factory=list)
    results: List[SessionResult] = field(default_factory=list)
    ended: bool = field(default=False, compare=False)

    def to_data(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "mode": self.mode,
            "difficulty": self.difficulty,
            "wordsAttempted": self.words_attempted,
            "wordsCorrect": self.words_correct,
            "totalTime": self.total_time,
            "score": self.score,
            "words": list(self.words),
            "results": [result.to_data() for result in self.results],
        }

    @classmethod
    def from_data(cls, data: Any) -> "GameSession":
        data = _object(data, "Session")
        words = _list(data, "words", [])
        if not all(isinstance(word, str) for word in words):
            raise RecordFormatError("Session words must be strings")
        return cls(
            date=_int(data, "date"),
            mode=_str(data, "mode", "word-hunt"),
            difficulty=_str(data, "difficulty", ""),
            words_attempted=_int(data, "wordsAttempted", 0),
            words_correct=_int(data, "wordsCorrect", 0),
            total_time=_int(data, "totalTime", 0),
            score=_number(data, "score", 0),
            words=list(words),
            results=[SessionResult.from_data(item) for item in _list(data, "results", [])],
            ended=True,
        )


@dataclass
class ProgressSummary:
    """Global progress counters."""
    total_sessions: int = 0
    total_words_learned: int = 0
    last_session: int = 0

    def to_data(self) -> Dict[str, Any]:
        return {
            "totalSessions": self.total_sessions,
            "totalWordsLearned": self.total_words_learned,
            "lastSession": self.last_session,
        }

    @classmethod
    def from_data(cls, data: Any) -> "ProgressSummary":
        data = _object(data, "Progress summary")
        return cls(
            total_sessions=_int(data, "totalSessions", 0),
            total_words_learned=_int(data, "totalWordsLearned", 0),
            last_session=_int(data, "lastSession", 0),
        )


@dataclass
class PlayerSettings:
    """Preferences owned by the game's settings screen."""
    music_enabled: bool = True
    last_difficulty: str = "alphabet"

    def to_data(self) -> Dict[str, Any]:
        return {"musicEnabled": self.music_enabled, "lastDifficulty": self.last_difficulty}

    @classmethod
    def from_data(cls, data: Any) -> "PlayerSettings":
        data = _object(data, "Settings")
        return cls(
            music_enabled=_bool(data, "musicEnabled", True),
            last_difficulty=_str(data, "lastDifficulty", "alphabet"),
        )


def encode(record: Any) -> Dict[str, Any]:
    """Wrap a record in the versioned envelope."""
    return {"version": SCHEMA_VERSION, "data": record.to_data()}


def decode(record_type: Type[T], payload: Any) -> T:
    """Decode a stored payload into a record, raising RecordFormatError on bad data."""
    payload = _object(payload, "Stored value")
    if "version" in payload and "data" in payload:
        version = payload["version"]
        if version not in SUPPORTED_VERSIONS:
            raise RecordFormatError(f"Unsupported record version {version!r}")
        payload = payload["data"]
    try:
        return record_type.from_data(payload)
    except (TypeError, AttributeError) as e:
        raise RecordFormatError(str(e)) from e
