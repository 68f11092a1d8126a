"""Configuration settings for the progress engine."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Holds the default SQLite database
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))

# Leitner boxes: box -> (label, review every N sessions)
BOXES = {
    1: ("New / Struggling", 1),
    2: ("Learning", 2),
    3: ("Familiar", 3),
    4: ("Known", 5),
}
MIN_BOX = 1
MAX_BOX = 4

# Promotion into a box: box -> (lifetime correct answers, distinct days in the answer log)
BOX_ADVANCE = {
    2: (2, 0),
    3: (4, 2),
    4: (6, 3),
}

# Share of a game's words drawn from each box
BOX_DISTRIBUTION = {1: 0.2, 2: 0.3, 3: 0.3, 4: 0.2}

# Mastery thresholds (inclusive lower bounds of the next band)
MASTERY_LEARNING = 40
MASTERY_PRACTISING = 70
MASTERY_ALMOST_THERE = 90

# Buttons shown per mastery band, target included
DISTRACTOR_COUNTS = (4, 6, 8, 10)

RESPONSE_SMOOTHING_WEIGHT = 0.3  # weight of the newest latency sample
RECENCY_DECAY_DAYS = 7
UNSEEN_DAYS_DEFAULT = 14  # days assumed when a word has never been seen
CONSISTENCY_STEP = 0.1
CONSISTENCY_CAP = 1.3
ANSWER_LOG_SIZE = 10

STRUGGLING_WRONG_ABOVE = 3  # struggling once first-try misses exceed this
STRUGGLING_MAX_ACCURACY = 0.5


@dataclass
class PathSettings:
    """Path configuration settings."""
    data_dir: Path = DATA_DIR
    word_sets_file: Optional[str] = os.getenv("WORD_SETS_FILE")


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'wordhunt.db'}")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


@dataclass
class GameSettings:
    """Game-level settings."""
    words_per_game: int = int(os.getenv("WORDS_PER_GAME", "10"))
    default_mode: str = "word-hunt"
    session_retention_days: int = int(os.getenv("SESSION_RETENTION_DAYS", "90"))


@dataclass
class LearningSettings:
    """Spaced repetition and mastery tuning."""
    boxes: dict[int, tuple[str, int]] = field(default_factory=lambda: dict(BOXES))
    min_box: int = MIN_BOX
    max_box: int = MAX_BOX
    box_advance: dict[int, tuple[int, int]] = field(default_factory=lambda: dict(BOX_ADVANCE))
    box_distribution: dict[int, float] = field(default_factory=lambda: dict(BOX_DISTRIBUTION))
    mastery_learning: int = MASTERY_LEARNING
    mastery_practising: int = MASTERY_PRACTISING
    mastery_almost_there: int = MASTERY_ALMOST_THERE
    distractor_counts: tuple[int, int, int, int] = DISTRACTOR_COUNTS
    response_smoothing_weight: float = RESPONSE_SMOOTHING_WEIGHT
    recency_decay_days: float = RECENCY_DECAY_DAYS
    unseen_days_default: float = UNSEEN_DAYS_DEFAULT
    consistency_step: float = CONSISTENCY_STEP
    consistency_cap: float = CONSISTENCY_CAP
    answer_log_size: int = ANSWER_LOG_SIZE
    struggling_wrong_above: int = STRUGGLING_WRONG_ABOVE
    struggling_max_accuracy: float = STRUGGLING_MAX_ACCURACY


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


def get_game_settings() -> GameSettings:
    """Get game settings."""
    return GameSettings()


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)
    game: GameSettings = field(default_factory=get_game_settings)
    learning: LearningSettings = field(default_factory=get_learning_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        learning = self.learning

        if self.game.words_per_game < 1:
            raise ValueError("WORDS_PER_GAME must be positive")

        if self.game.session_retention_days < 1:
            raise ValueError("SESSION_RETENTION_DAYS must be positive")

        if set(learning.boxes) != set(range(learning.min_box, learning.max_box + 1)):
            raise ValueError("Leitner boxes must cover every box from min_box to max_box")

        if any(every < 1 for _, every in learning.boxes.values()):
            raise ValueError("Box review cadence must be at least one session")

        if set(learning.box_distribution) != set(learning.boxes):
            raise ValueError("Box distribution must name every box")

        if any(share < 0 or share > 1 for share in learning.box_distribution.values()):
            raise ValueError("Box distribution shares must be between 0 and 1")

        if not (0 < learning.mastery_learning < learning.mastery_practising
                < learning.mastery_almost_there <= 100):
            raise ValueError("Mastery thresholds must be increasing and within 1..100")

        if list(learning.distractor_counts) != sorted(learning.distractor_counts):
            raise ValueError("Distractor counts must be non-decreasing")

        if learning.response_smoothing_weight <= 0 or learning.response_smoothing_weight > 1:
            raise ValueError("Response smoothing weight must be in (0, 1]")

        if learning.answer_log_size < 1:
            raise ValueError("Answer log size must be positive")


def ensure_directories(config: Optional[Settings] = None) -> None:
    """Ensure the data and log directories exist."""
    config = config or settings
    directories = [config.paths.data_dir]
    if config.logging.dir:
        directories.append(Path(config.logging.dir))

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


# Create global settings instance
settings = Settings()
settings.validate()
