"""Service for game sessions and the global progress summary."""
import logging
from typing import Callable, Optional

from wordhunt.config import GameSettings, settings
from wordhunt.models.records import GameSession, Loaded, ProgressSummary, SessionResult
from wordhunt.monitoring import session_duration, sessions_completed, sessions_pruned
from wordhunt.services.mastery_service import MasteryService
from wordhunt.services.storage_service import PROGRESS_KEY, SESSION_PREFIX, ProgressStore
from wordhunt.utils import MS_PER_DAY, now_ms, round_half_up
from wordhunt.word_sets import WordSets

logger = logging.getLogger(__name__)


class SessionService:
    """Session lifecycle: start and fill in memory, persist once at the end."""

    def __init__(
        self,
        store: ProgressStore,
        mastery_service: MasteryService,
        word_sets: WordSets,
        clock: Callable[[], int] = now_ms,
        game: Optional[GameSettings] = None,
    ):
        """Initialize the service with its store and scorer."""
        self.store = store
        self.mastery_service = mastery_service
        self.word_sets = word_sets
        self.clock = clock
        self.game = game or settings.game

    @staticmethod
    def session_key(session: GameSession) -> str:
        """Store key of a session."""
        return f"{SESSION_PREFIX}{session.date}"

    def start_session(self, mode: Optional[str], difficulty: str) -> GameSession:
        """Start a new session. It is kept in memory until end_session."""
        return GameSession(
            date=self.clock(),
            mode=mode or self.game.default_mode,
            difficulty=difficulty,
        )

    def add_session_result(
        self,
        session: GameSession,
        word: str,
        correct: bool,
        attempts: int,
        ms: float,
    ) -> None:
        """Record one word's result into the active session."""
        if session.ended:
            raise ValueError(f"Session {session.date} has already ended")

        session.words_attempted += 1
        if correct:
            session.words_correct += 1
        session.words.append(word)
        session.results.append(SessionResult(word=word, correct=correct, attempts=attempts, ms=ms))

    def end_session(self, session: GameSession, score: float, total_time_seconds: float) -> GameSession:
        """Finish and persist a session, then refresh the summary and prune old logs."""
        if session.ended:
            raise ValueError(f"Session {session.date} has already ended")

        session.score = score
        session.total_time = round_half_up(total_time_seconds)

        self.store.save(self.session_key(session), session)
        session.ended = True

        self._update_progress_summary(session)
        self._prune_old_sessions()

        sessions_completed.labels(difficulty=session.difficulty).inc()
        session_duration.labels(difficulty=session.difficulty).observe(session.total_time)
        logger.info(
            f"Session {session.date} ended: {session.words_correct}/{session.words_attempted} correct, "
            f"score {session.score}, {session.total_time}s"
        )
        return session

    def load_progress(self) -> Loaded[ProgressSummary]:
        """Get the progress summary together with how it was obtained."""
        return self.store.load(PROGRESS_KEY, ProgressSummary, ProgressSummary)

    def get_progress(self) -> ProgressSummary:
        """Get the global progress summary."""
        return self.load_progress().value

    def count_words_learned(self) -> int:
        """Words across every pool at or above the practising threshold."""
        now = self.clock()
        threshold = self.mastery_service.learning.mastery_practising
        learned = 0
        for words in self.word_sets.values():
            for word in words:
                if self.mastery_service.calculate_mastery(word, now) >= threshold:
                    learned += 1
        return learned

    def _update_progress_summary(self, session: GameSession) -> None:
        progress = self.get_progress()
        progress.total_sessions += 1
        progress.last_session = session.date
        progress.total_words_learned = self.count_words_learned()
        self.store.save(PROGRESS_KEY, progress)

    def _prune_old_sessions(self) -> int:
        cutoff = self.clock() - self.game.session_retention_days * MS_PER_DAY
        expired = []
        for key in self.store.keys(SESSION_PREFIX):
            try:
                started = int(key[len(SESSION_PREFIX):])
            except ValueError:
                logger.warning(f"Skipping session key with no timestamp: '{key}'")
                continue
            if started < cutoff:
                expired.append(key)

        removed = self.store.delete(expired)
        if removed:
            sessions_pruned.inc(removed)
            logger.info(f"Pruned {removed} sessions older than {self.game.session_retention_days} days")
        return removed
