"""Database models for the progress store."""
from sqlalchemy import Column, String, Text

from wordhunt.models.base import Base, TimestampMixin


class StoredEntry(Base, TimestampMixin):
    """One key-value pair of the progress store.

    Keys are namespaced strings (``word-record:cat``, ``session:<ms>``,
    ``progress-summary``, ``settings``) and values are JSON text.
    """

    __tablename__ = "stored_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
