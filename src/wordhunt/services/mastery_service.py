"""Mastery scoring for words."""
import math
from typing import Callable, Optional

from wordhunt.config import LearningSettings, settings
from wordhunt.models.records import WordRecord
from wordhunt.services.word_service import WordService
from wordhunt.utils import MS_PER_DAY, count_unique_days, now_ms, round_half_up


class MasteryService:
    """Scores words 0-100 as accuracy x recency x consistency."""

    def __init__(
        self,
        word_service: WordService,
        clock: Callable[[], int] = now_ms,
        learning: Optional[LearningSettings] = None,
    ):
        """Initialize the service with the word store."""
        self.word_service = word_service
        self.clock = clock
        self.learning = learning or settings.learning

    def score_record(self, record: WordRecord, now: Optional[int] = None) -> int:
        """Mastery of a record at the given time.

        Recency decays from 1.0 towards 0.5 with idle days; consistency adds
        a bonus per distinct day with a correct answer in the answer log.
        """
        if record.attempts == 0:
            return 0
        now = self.clock() if now is None else now

        accuracy = record.correct / record.attempts

        if record.last_seen:
            days_since_seen = (now - record.last_seen) / MS_PER_DAY
        else:
            days_since_seen = self.learning.unseen_days_default
        recency = 0.5 + 0.5 * math.exp(-days_since_seen / self.learning.recency_decay_days)

        correct_days = count_unique_days(event.date for event in record.sessions if event.correct)
        consistency = min(
            self.learning.consistency_cap,
            1 + correct_days * self.learning.consistency_step,
        )

        return min(100, round_half_up(accuracy * recency * consistency * 100))

    def calculate_mastery(self, word: str, now: Optional[int] = None) -> int:
        """Mastery score 0-100 of a word."""
        return self.score_record(self.word_service.get_word_data(word), now)

    def get_mastery_label(self, score: int) -> str:
        """Human label for a mastery score."""
        if score >= self.learning.mastery_almost_there:
            return "Mastered"
        if score >= self.learning.mastery_practising:
            return "Almost there"
        if score >= self.learning.mastery_learning:
            return "Practising"
        return "Learning"

    def get_distractor_count(self, score: int) -> int:
        """Total buttons to show, target included, for a mastery score."""
        learning_count, practising_count, almost_count, mastered_count = self.learning.distractor_counts
        if score < self.learning.mastery_learning:
            return learning_count
        if score < self.learning.mastery_practising:
            return practising_count
        if score < self.learning.mastery_almost_there:
            return almost_count
        return mastered_count
