"""
In-memory session storage implementation.

Provides non-persistent session storage for testing and temporary use.
"""
import copy
from typing import Optional

from .protocols import SessionStorage
from .models import SessionRecord


class MemorySession(SessionStorage):
    """
    In-memory session storage.

    Keeps a private copy of the record so later mutation by the caller
    does not leak into storage. Data is lost when the object is destroyed.

    Example:
        >>> storage = MemorySession()
        >>> storage.save(record)
        >>> loaded = storage.load()
    """

    def __init__(self):
        self._record: Optional[SessionRecord] = None

    def load(self) -> Optional[SessionRecord]:
        return copy.copy(self._record)

    def save(self, record: SessionRecord) -> None:
        self._record = copy.copy(record)

    def delete(self) -> None:
        self._record = None

    def exists(self) -> bool:
        return self._record is not None

    def close(self) -> None:
        pass

    def __enter__(self) -> 'MemorySession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
