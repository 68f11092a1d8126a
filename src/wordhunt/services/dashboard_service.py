"""Read-only progress views and full reset."""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from wordhunt.config import LearningSettings, settings
from wordhunt.models.records import GameSession, WordRecord
from wordhunt.services.mastery_service import MasteryService
from wordhunt.services.storage_service import PROGRESS_KEY, SESSION_PREFIX, WORD_PREFIX, ProgressStore
from wordhunt.services.word_service import WordService
from wordhunt.utils import now_ms
from wordhunt.word_sets import WordSets

logger = logging.getLogger(__name__)


@dataclass
class WordOverview:
    """A pool word with its record and current mastery."""
    record: WordRecord
    mastery: int
    difficulty: str

    @property
    def word(self) -> str:
        return self.record.word


class DashboardService:
    """Views derived from word records and session logs."""

    def __init__(
        self,
        store: ProgressStore,
        word_service: WordService,
        mastery_service: MasteryService,
        word_sets: WordSets,
        clock: Callable[[], int] = now_ms,
        learning: Optional[LearningSettings] = None,
    ):
        """Initialize the service with its store and scorer."""
        self.store = store
        self.word_service = word_service
        self.mastery_service = mastery_service
        self.word_sets = word_sets
        self.clock = clock
        self.learning = learning or settings.learning

    def get_all_word_data(self) -> List[WordOverview]:
        """Every pool word with its mastery, lowest mastery first.

        A word listed in several pools appears once per pool.
        """
        now = self.clock()
        overviews = []
        for difficulty, words in self.word_sets.items():
            for word in words:
                record = self.word_service.get_word_data(word)
                overviews.append(WordOverview(
                    record=record,
                    mastery=self.mastery_service.score_record(record, now),
                    difficulty=difficulty,
                ))
        return sorted(overviews, key=lambda overview: overview.mastery)

    def get_words_by_status(self) -> Dict[str, List[WordOverview]]:
        """Words grouped into mastered, almost_there, practising, learning and unseen."""
        learning = self.learning
        status: Dict[str, List[WordOverview]] = {
            "mastered": [],
            "almost_there": [],
            "practising": [],
            "learning": [],
            "unseen": [],
        }
        for overview in self.get_all_word_data():
            if overview.record.attempts == 0:
                status["unseen"].append(overview)
            elif overview.mastery >= learning.mastery_almost_there:
                status["mastered"].append(overview)
            elif overview.mastery >= learning.mastery_practising:
                status["almost_there"].append(overview)
            elif overview.mastery >= learning.mastery_learning:
                status["practising"].append(overview)
            else:
                status["learning"].append(overview)
        return status

    def get_struggling_words(self) -> List[WordOverview]:
        """Words answered wrong often and mostly wrong."""
        return [
            overview for overview in self.get_all_word_data()
            if overview.record.wrong_first > self.learning.struggling_wrong_above
            and overview.record.attempts > 0
            and overview.record.accuracy < self.learning.struggling_max_accuracy
        ]

    def _load_sessions(self) -> List[GameSession]:
        return [session for _, session in self.store.load_prefix(SESSION_PREFIX, GameSession)]

    def get_recent_sessions(self, limit: int = 10) -> List[GameSession]:
        """Stored sessions, newest first."""
        sessions = sorted(self._load_sessions(), key=lambda session: session.date, reverse=True)
        return sessions[:limit]

    def get_total_time_played(self) -> int:
        """Total seconds across stored sessions."""
        return sum(session.total_time for session in self._load_sessions())

    def reset_all_progress(self) -> int:
        """Delete every word record, session and the progress summary."""
        keys = self.store.keys(WORD_PREFIX) + self.store.keys(SESSION_PREFIX) + [PROGRESS_KEY]
        removed = self.store.delete(keys)
        logger.info(f"Progress reset: removed {removed} stored entries")
        return removed
