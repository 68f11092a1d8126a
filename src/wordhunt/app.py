"""Main application object."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from wordhunt.config import settings
from wordhunt.models.base import create_db_engine, create_session_factory, init_db
from wordhunt.monitoring import start_monitoring
from wordhunt.services.progress_tracker import ProgressTracker
from wordhunt.word_sets import WordSets, load_word_sets


class WordHunt:
    """Owns the database and the single progress tracker."""

    def __init__(self, database_url: Optional[str] = None, word_sets: Optional[WordSets] = None):
        """Initialize the application."""
        self.database_url = database_url or settings.database.url
        self.word_sets = word_sets
        self.engine: Optional[Engine] = None
        self.db: Optional[Session] = None
        self.tracker: Optional[ProgressTracker] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    def start(self) -> ProgressTracker:
        """Start the application and return its tracker."""
        if self.running:
            return self.tracker

        try:
            # Initialize database
            self.engine = create_db_engine(self.database_url)
            init_db(self.engine)
            self.db = create_session_factory(self.engine)()
            self.logger.info("Database initialized")

            if self.word_sets is None:
                self.word_sets = load_word_sets()
            self.tracker = ProgressTracker(self.db, self.word_sets)

            if settings.monitoring.enabled:
                start_monitoring(settings.monitoring.port)
                self.logger.info(f"Metrics exposed on port {settings.monitoring.port}")

            self.running = True
            return self.tracker

        except Exception as e:
            self.logger.error("Failed to start application: %s", str(e))
            self.stop()
            raise

    def stop(self) -> None:
        """Stop the application and release the database."""
        if self.engine is None:
            return

        self.logger.info("Stopping application...")
        if self.db is not None:
            self.db.close()
            self.db = None
        self.engine.dispose()
        self.engine = None
        self.tracker = None
        self.running = False
