"""Test configuration."""
import os
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from wordhunt.models.base import create_session_factory, init_db
from wordhunt.services.progress_tracker import ProgressTracker


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = int(start.timestamp() * 1000)

    def __call__(self) -> int:
        return self.now

    def advance(self, **kwargs) -> int:
        self.now += int(timedelta(**kwargs).total_seconds() * 1000)
        return self.now


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory database shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = create_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at local noon so day arithmetic stays on calendar days."""
    return FakeClock(datetime(2026, 3, 2, 12, 0))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def word_sets() -> dict:
    return {
        "letters": ["A", "B", "C", "D", "E", "F", "G", "H"],
        "words": ["cat", "dog", "sun", "hat", "red"],
    }


@pytest.fixture
def tracker(db: Session, word_sets: dict, clock: FakeClock, rng: random.Random) -> ProgressTracker:
    """Tracker wired to the in-memory store and the fake clock."""
    return ProgressTracker(db, word_sets, clock=clock, rng=rng)
