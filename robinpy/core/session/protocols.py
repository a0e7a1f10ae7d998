"""
Session storage protocols.

Defines the interface for session storage implementations.
"""
from typing import Protocol, Optional, runtime_checkable
from .models import SessionRecord


@runtime_checkable
class SessionStorage(Protocol):
    """
    Protocol for session storage implementations.

    Implementations can use a JSON file, memory, a keyring or any other
    backend. SessionManager depends only on this protocol.
    """

    def load(self) -> Optional[SessionRecord]:
        """
        Load the persisted record.

        Returns:
            SessionRecord if one exists, None otherwise

        Raises:
            FileSystemError: If the backend exists but cannot be read
        """
        ...

    def save(self, record: SessionRecord) -> None:
        """
        Replace the persisted record.

        Implementations must either write the whole record or leave the
        previous one untouched.
        """
        ...

    def delete(self) -> None:
        """Delete the persisted record (no-op if absent)."""
        ...

    def exists(self) -> bool:
        """Check if a record is persisted."""
        ...

    def close(self) -> None:
        """Release resources."""
        ...
