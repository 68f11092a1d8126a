"""Service for per-word learning records."""
import logging
from typing import Callable, Optional

from wordhunt.config import LearningSettings, settings
from wordhunt.models.records import AnswerEvent, Loaded, WordRecord
from wordhunt.monitoring import answers_recorded
from wordhunt.services.scheduler_service import LeitnerScheduler
from wordhunt.services.storage_service import WORD_PREFIX, ProgressStore
from wordhunt.utils import normalize_word, now_ms, round_half_up

logger = logging.getLogger(__name__)


class WordService:
    """Reads and updates word records, one read-modify-write per answer."""

    def __init__(
        self,
        store: ProgressStore,
        scheduler: LeitnerScheduler,
        clock: Callable[[], int] = now_ms,
        learning: Optional[LearningSettings] = None,
    ):
        """Initialize the service with its store and scheduler."""
        self.store = store
        self.scheduler = scheduler
        self.clock = clock
        self.learning = learning or settings.learning

    @staticmethod
    def word_key(word: str) -> str:
        """Store key of a word."""
        return WORD_PREFIX + normalize_word(word)

    def load_word_data(self, word: str) -> Loaded[WordRecord]:
        """Get a word's record together with how it was obtained."""
        return self.store.load(
            self.word_key(word),
            WordRecord,
            lambda: WordRecord(word=normalize_word(word)),
        )

    def get_word_data(self, word: str) -> WordRecord:
        """Get a word's record, or a fresh one if none is stored."""
        return self.load_word_data(word).value

    def save_word_data(self, record: WordRecord) -> None:
        """Persist a word's record."""
        self.store.save(self.word_key(record.word), record)

    def _log_answer(self, record: WordRecord, now: int, correct: bool, response_ms: float) -> None:
        record.sessions.append(AnswerEvent(date=now, correct=correct, ms=response_ms))
        if len(record.sessions) > self.learning.answer_log_size:
            record.sessions = record.sessions[-self.learning.answer_log_size:]

    def _smooth_response(self, record: WordRecord, response_ms: float) -> None:
        if record.avg_response_ms == 0:
            record.avg_response_ms = response_ms
        else:
            weight = self.learning.response_smoothing_weight
            record.avg_response_ms = round_half_up(
                record.avg_response_ms * (1 - weight) + response_ms * weight
            )

    def record_correct(self, word: str, response_ms: float) -> WordRecord:
        """Record a correct first-tap answer."""
        record = self.get_word_data(word)
        now = self.clock()

        record.attempts += 1
        record.correct += 1
        record.streak += 1
        record.best_streak = max(record.best_streak, record.streak)
        record.last_seen = now
        record.last_correct = now

        self._smooth_response(record, response_ms)
        self._log_answer(record, now, True, response_ms)
        self.scheduler.advance_box(record)

        self.save_word_data(record)
        answers_recorded.labels(result="correct").inc()
        logger.debug(
            f"Correct answer for '{record.word}': streak {record.streak}, box {record.box}"
        )
        return record

    def record_wrong(self, word: str, response_ms: float) -> WordRecord:
        """Record a wrong answer."""
        record = self.get_word_data(word)
        now = self.clock()

        record.attempts += 1
        record.wrong_first += 1
        record.streak = 0
        record.last_seen = now

        self._log_answer(record, now, False, response_ms)
        self.scheduler.demote_box(record)

        self.save_word_data(record)
        answers_recorded.labels(result="wrong").inc()
        logger.debug(f"Wrong answer for '{record.word}': box {record.box}")
        return record
