"""Word pools per difficulty.

Alphabet and sound-match use the letters A-Z, easy holds Dolch pre-primer
sight words, harder mixes kindergarten Dolch words with CVC words and
word-builder holds the CVC words used for blending practice.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from wordhunt.config import settings
from wordhunt.utils import normalize_word

logger = logging.getLogger(__name__)

WordSets = Dict[str, List[str]]

_LETTERS = [chr(code) for code in range(ord("A"), ord("Z") + 1)]

DEFAULT_WORD_SETS: WordSets = {
    "alphabet": list(_LETTERS),
    "sound-match": list(_LETTERS),
    "easy": [
        "the", "a", "I", "is", "it",
        "in", "to", "and", "can", "see",
        "go", "me", "my", "we", "up",
        "at", "on", "no", "yes", "he",
    ],
    "harder": [
        "cat", "dog", "mat", "hat", "sat",
        "run", "sun", "big", "red", "blue",
        "green", "like", "look", "come", "play",
        "said", "good", "want", "this", "that",
        "was", "are", "have", "they", "with",
    ],
    "word-builder": [
        # Continuous consonants
        "sat", "man", "fan", "sun", "fin", "van", "run", "fun", "win", "ran",
        # Stop consonants
        "cat", "bat", "hat", "dog", "big", "bed", "bug", "cup", "pot", "pig",
        # Mixed consonants
        "red", "log", "zip", "fox", "wet", "hop", "jet", "tag", "kid", "mud",
    ],
}


def validate_word_sets(word_sets: WordSets) -> WordSets:
    """Check that every pool is a non-empty list of distinct words."""
    if not isinstance(word_sets, dict) or not word_sets:
        raise ValueError("Word sets must be a non-empty mapping of difficulty to words")

    for difficulty, words in word_sets.items():
        if not isinstance(words, list) or not words:
            raise ValueError(f"Word set '{difficulty}' must be a non-empty list")
        if not all(isinstance(word, str) and word for word in words):
            raise ValueError(f"Word set '{difficulty}' must contain only non-empty strings")
        keys = [normalize_word(word) for word in words]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Word set '{difficulty}' contains duplicate words")

    return word_sets


def load_word_sets(path: Optional[str] = None) -> WordSets:
    """Load word sets from a JSON file, falling back to the built-in table."""
    path = path or settings.paths.word_sets_file
    if not path:
        return {difficulty: list(words) for difficulty, words in DEFAULT_WORD_SETS.items()}

    with open(Path(path), "r", encoding="utf-8") as f:
        word_sets = json.load(f)

    validate_word_sets(word_sets)
    logger.info(f"Loaded {len(word_sets)} word sets from {path}")
    return word_sets
