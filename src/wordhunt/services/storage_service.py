"""Key-value progress store backed by a SQLAlchemy session."""
import json
import logging
from typing import Any, Callable, Iterable, List, Tuple, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordhunt.models.models import StoredEntry
from wordhunt.models.records import Loaded, LoadOutcome, RecordFormatError, decode, encode
from wordhunt.monitoring import corrupt_reads, storage_errors

logger = logging.getLogger(__name__)

T = TypeVar("T")

WORD_PREFIX = "word-record:"
SESSION_PREFIX = "session:"
PROGRESS_KEY = "progress-summary"
SETTINGS_KEY = "settings"


class ProgressStore:
    """String keys, JSON values, one row per key.

    Reads never fail: a missing key or an undecodable value yields the
    caller's default, tagged with the outcome. Write failures roll back the
    session and propagate.
    """

    def __init__(self, db: Session):
        """Initialize the store with a database session."""
        self.db = db

    def _get_entry(self, key: str) -> StoredEntry | None:
        return self.db.get(StoredEntry, key)

    def load(self, key: str, record_type: Type[T], default: Callable[[], T]) -> Loaded[T]:
        """Read and decode a record, substituting the default when absent or corrupt."""
        entry = self._get_entry(key)
        if entry is None:
            return Loaded(default(), LoadOutcome.MISSING)

        try:
            return Loaded(decode(record_type, json.loads(entry.value)), LoadOutcome.FOUND)
        except (json.JSONDecodeError, RecordFormatError) as e:
            logger.warning(f"Stored value for '{key}' is unreadable, using default: {e}")
            corrupt_reads.labels(kind=record_type.__name__).inc()
            return Loaded(default(), LoadOutcome.CORRUPT)

    def load_prefix(self, prefix: str, record_type: Type[T]) -> List[Tuple[str, T]]:
        """Decode every readable record under a key prefix, skipping corrupt ones."""
        records = []
        for key in self.keys(prefix):
            loaded = self.load(key, record_type, lambda: None)
            if loaded.outcome is LoadOutcome.FOUND:
                records.append((key, loaded.value))
        return records

    def save(self, key: str, record: Any) -> None:
        """Encode and write a record."""
        self.write_raw(key, json.dumps(encode(record)))

    def write_raw(self, key: str, value: str) -> None:
        """Write a JSON text value as-is."""
        entry = self._get_entry(key)
        if entry is None:
            self.db.add(StoredEntry(key=key, value=value))
        else:
            entry.value = value
        self._commit(f"write '{key}'")

    def delete(self, keys: Iterable[str]) -> int:
        """Delete the given keys, returning how many rows were removed."""
        keys = list(keys)
        if not keys:
            return 0
        entries = self.db.query(StoredEntry).filter(StoredEntry.key.in_(keys)).all()
        for entry in entries:
            self.db.delete(entry)
        self._commit(f"delete {len(entries)} keys")
        return len(entries)

    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with the prefix."""
        query = self.db.query(StoredEntry.key)
        if prefix:
            query = query.filter(StoredEntry.key.startswith(prefix, autoescape=True))
        return [key for (key,) in query.order_by(StoredEntry.key).all()]

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            storage_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Failed to {action}: {e}")
            raise
