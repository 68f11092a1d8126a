"""Learning service for adaptive word selection."""
import logging
import random
from typing import Dict, List, Optional, Set

from wordhunt.config import LearningSettings, settings
from wordhunt.services.mastery_service import MasteryService
from wordhunt.services.scheduler_service import LeitnerScheduler
from wordhunt.services.session_service import SessionService
from wordhunt.services.word_service import WordService
from wordhunt.utils import normalize_word, round_half_up
from wordhunt.word_sets import WordSets

logger = logging.getLogger(__name__)


class LearningService:
    """Chooses a game's words by Leitner box and sizes each round by mastery."""

    def __init__(
        self,
        word_service: WordService,
        mastery_service: MasteryService,
        scheduler: LeitnerScheduler,
        session_service: SessionService,
        word_sets: WordSets,
        rng: Optional[random.Random] = None,
        learning: Optional[LearningSettings] = None,
    ):
        """Initialize the service with its collaborators."""
        self.word_service = word_service
        self.mastery_service = mastery_service
        self.scheduler = scheduler
        self.session_service = session_service
        self.word_sets = word_sets
        self.rng = rng or random.Random()
        self.learning = learning or settings.learning

    def _shuffled(self, words: List[str]) -> List[str]:
        words = list(words)
        self.rng.shuffle(words)
        return words

    def box_targets(self, count: int) -> Dict[int, int]:
        """Words wanted from each box for a game of the given size."""
        targets = {
            box: round_half_up(count * share)
            for box, share in self.learning.box_distribution.items()
        }
        targets[self.learning.min_box] = max(1, targets[self.learning.min_box])
        return targets

    def due_buckets(self, words: List[str], session_number: int) -> Dict[int, List[str]]:
        """Group the words due in the given session by their current box."""
        buckets: Dict[int, List[str]] = {box: [] for box in self.learning.boxes}
        for word in words:
            record = self.word_service.get_word_data(word)
            if self.scheduler.is_due(record, session_number):
                buckets[record.box].append(word)
        return buckets

    def select_adaptive_words(self, difficulty: str, count: int) -> List[str]:
        """Select the words for the next game of a difficulty."""
        words = self.word_sets.get(difficulty)
        if not words:
            logger.warning(f"No words configured for difficulty '{difficulty}'")
            return []

        session_number = self.session_service.get_progress().total_sessions + 1
        buckets = self.due_buckets(words, session_number)
        targets = self.box_targets(count)

        selected: List[str] = []
        used: Set[str] = set()

        # Pull from each bucket according to its target
        for box in sorted(buckets):
            needed = targets[box]
            for word in self._shuffled(buckets[box]):
                if needed <= 0:
                    break
                key = normalize_word(word)
                if key in used:
                    continue
                selected.append(word)
                used.add(key)
                needed -= 1

        # Fill any remainder from the whole pool, due or not
        if len(selected) < count:
            for word in self._shuffled(words):
                if len(selected) >= count:
                    break
                key = normalize_word(word)
                if key in used:
                    continue
                selected.append(word)
                used.add(key)

        logger.info(
            f"Selected {min(len(selected), count)} words for '{difficulty}' session {session_number} "
            f"(due per box: {', '.join(f'{box}={len(b)}' for box, b in buckets.items())})"
        )
        # Shuffle again so the order does not reveal box membership
        return self._shuffled(selected)[:count]

    def get_distractor_count(self, word: str) -> int:
        """Total buttons to show for a word, target included."""
        return self.mastery_service.get_distractor_count(self.mastery_service.calculate_mastery(word))

    def get_mode_mastery(self, difficulty: str) -> int:
        """Average mastery over a difficulty's pool, 0 for an unknown or empty pool."""
        words = self.word_sets.get(difficulty)
        if not words:
            return 0

        now = self.session_service.clock()
        total = sum(self.mastery_service.calculate_mastery(word, now) for word in words)
        return round_half_up(total / len(words))
