"""Progress tracker: the engine's entry point for the game loop."""
import logging
import random
import threading
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from wordhunt.models.records import GameSession, Loaded, PlayerSettings, ProgressSummary, WordRecord
from wordhunt.services.dashboard_service import DashboardService, WordOverview
from wordhunt.services.learning_service import LearningService
from wordhunt.services.mastery_service import MasteryService
from wordhunt.services.scheduler_service import LeitnerScheduler
from wordhunt.services.session_service import SessionService
from wordhunt.services.settings_service import SettingsService
from wordhunt.services.storage_service import ProgressStore
from wordhunt.services.word_service import WordService
from wordhunt.utils import now_ms
from wordhunt.word_sets import WordSets, validate_word_sets

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Wires the services around one store.

    Build one tracker per store at startup and hand it to the game loop.
    Writes go through a single lock; the store assumes one player at a time.
    """

    def __init__(
        self,
        db: Session,
        word_sets: WordSets,
        clock: Callable[[], int] = now_ms,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the tracker and its services."""
        self.word_sets = validate_word_sets(word_sets)
        self._lock = threading.Lock()

        self.store = ProgressStore(db)
        self.scheduler = LeitnerScheduler()
        self.words = WordService(self.store, self.scheduler, clock)
        self.mastery = MasteryService(self.words, clock)
        self.sessions = SessionService(self.store, self.mastery, self.word_sets, clock)
        self.learning = LearningService(
            self.words, self.mastery, self.scheduler, self.sessions, self.word_sets, rng
        )
        self.dashboard = DashboardService(self.store, self.words, self.mastery, self.word_sets, clock)
        self.settings = SettingsService(self.store)
        logger.debug(f"Progress tracker ready with word sets: {', '.join(self.word_sets)}")

    # Per-word tracking

    def get_word_data(self, word: str) -> WordRecord:
        return self.words.get_word_data(word)

    def load_word_data(self, word: str) -> Loaded[WordRecord]:
        return self.words.load_word_data(word)

    def record_correct(self, word: str, response_ms: float) -> WordRecord:
        with self._lock:
            return self.words.record_correct(word, response_ms)

    def record_wrong(self, word: str, response_ms: float) -> WordRecord:
        with self._lock:
            return self.words.record_wrong(word, response_ms)

    # Mastery

    def calculate_mastery(self, word: str) -> int:
        return self.mastery.calculate_mastery(word)

    def get_mastery_label(self, score: int) -> str:
        return self.mastery.get_mastery_label(score)

    def get_box_label(self, box: int) -> str:
        return self.scheduler.get_box_label(box)

    # Sessions

    def start_session(self, mode: Optional[str], difficulty: str) -> GameSession:
        return self.sessions.start_session(mode, difficulty)

    def add_session_result(
        self, session: GameSession, word: str, correct: bool, attempts: int, ms: float
    ) -> None:
        self.sessions.add_session_result(session, word, correct, attempts, ms)

    def end_session(self, session: GameSession, score: float, total_time_seconds: float) -> GameSession:
        with self._lock:
            return self.sessions.end_session(session, score, total_time_seconds)

    def get_progress(self) -> ProgressSummary:
        return self.sessions.get_progress()

    # Adaptive selection

    def select_adaptive_words(self, difficulty: str, count: int) -> List[str]:
        return self.learning.select_adaptive_words(difficulty, count)

    def get_distractor_count(self, word: str) -> int:
        return self.learning.get_distractor_count(word)

    def get_mode_mastery(self, difficulty: str) -> int:
        return self.learning.get_mode_mastery(difficulty)

    # Dashboard

    def get_all_word_data(self) -> List[WordOverview]:
        return self.dashboard.get_all_word_data()

    def get_words_by_status(self) -> Dict[str, List[WordOverview]]:
        return self.dashboard.get_words_by_status()

    def get_struggling_words(self) -> List[WordOverview]:
        return self.dashboard.get_struggling_words()

    def get_recent_sessions(self, limit: int = 10) -> List[GameSession]:
        return self.dashboard.get_recent_sessions(limit)

    def get_total_time_played(self) -> int:
        return self.dashboard.get_total_time_played()

    def reset_all_progress(self) -> int:
        with self._lock:
            return self.dashboard.reset_all_progress()

    # Settings

    def get_settings(self) -> PlayerSettings:
        return self.settings.get_settings()

    def save_settings(self, player_settings: PlayerSettings) -> None:
        with self._lock:
            self.settings.save_settings(player_settings)

    def update_setting(self, name: str, value: Any) -> PlayerSettings:
        with self._lock:
            return self.settings.update_setting(name, value)
