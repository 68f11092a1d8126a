"""Small helpers shared by the services."""
import math
from datetime import UTC, date, datetime
from typing import Iterable

MS_PER_DAY = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(datetime.now(UTC).timestamp() * 1000)


def normalize_word(word: str) -> str:
    """Key form of a word or letter."""
    return word.lower()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like a browser's Math.round."""
    return math.floor(value + 0.5)


def calendar_day(timestamp_ms: int) -> date:
    """Local calendar day of a millisecond timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def count_unique_days(timestamps: Iterable[int]) -> int:
    """Number of distinct local calendar days among the timestamps."""
    return len({calendar_day(ts) for ts in timestamps})
