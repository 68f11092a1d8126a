"""Leitner box scheduling."""
import logging
from typing import Optional

from wordhunt.config import LearningSettings, settings
from wordhunt.models.records import WordRecord
from wordhunt.monitoring import box_transitions
from wordhunt.utils import count_unique_days

logger = logging.getLogger(__name__)


class LeitnerScheduler:
    """Box membership, promotion, demotion and review eligibility.

    Box cadences gate whether a word may be picked for a session; they say
    nothing about mastery. The scheduler holds no state: the session number
    is always passed in.
    """

    def __init__(self, learning: Optional[LearningSettings] = None):
        """Initialize the scheduler with learning settings."""
        self.learning = learning or settings.learning

    def get_box_label(self, box: int) -> str:
        """Human label of a box."""
        return self.learning.boxes[box][0]

    def review_every(self, box: int) -> int:
        """Number of sessions between reviews for a box."""
        return self.learning.boxes[box][1]

    def advance_box(self, record: WordRecord) -> bool:
        """Promote the word by one box if it meets the next box's criteria.

        Called only after a correct answer. Returns True when the box changed.
        """
        if record.box >= self.learning.max_box:
            return False

        next_box = record.box + 1
        criteria = self.learning.box_advance.get(next_box)
        if criteria is None:
            return False

        correct_needed, days_needed = criteria
        if record.correct < correct_needed:
            return False

        if days_needed:
            days = count_unique_days(event.date for event in record.sessions)
            if days < days_needed:
                return False

        record.box = next_box
        box_transitions.labels(direction="up").inc()
        logger.debug(f"Word '{record.word}' promoted to box {next_box}")
        return True

    def demote_box(self, record: WordRecord) -> bool:
        """Drop the word one box after a wrong answer, never below the first box."""
        if record.box <= self.learning.min_box:
            return False

        record.box -= 1
        box_transitions.labels(direction="down").inc()
        logger.debug(f"Word '{record.word}' demoted to box {record.box}")
        return True

    def is_due(self, record: WordRecord, session_number: int) -> bool:
        """Whether the word may be selected for the given session number."""
        if record.attempts == 0 or record.box == self.learning.min_box:
            return True
        return session_number % self.review_every(record.box) == 0
