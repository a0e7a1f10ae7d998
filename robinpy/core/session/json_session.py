"""
JSON file session storage implementation.

Provides persistent session storage in a single JSON document. Writes go
to a temporary file in the same directory which then replaces the target,
so a crash mid-write never leaves a truncated session behind.
"""
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

from .protocols import SessionStorage
from .models import SessionRecord
from ..exceptions import FileSystemError
from ..logging import get_logger


class JSONSession(SessionStorage):
    """
    JSON-file session storage.

    Example:
        >>> storage = JSONSession("my_account")
        >>> # Uses my_account.json in the working directory
        >>>
        >>> storage.save(record)
        >>> loaded = storage.load()
    """

    EXTENSION = '.json'

    def __init__(
        self,
        session_name: Union[str, Path],
        base_path: Optional[Path] = None
    ):
        """
        Initialize JSON session storage.

        Args:
            session_name: Session name (without extension) or full path
            base_path: Optional base directory for session files
        """
        self._lock = threading.Lock()
        self._logger = get_logger('robinpy.session')

        if isinstance(session_name, Path) or str(session_name).endswith(self.EXTENSION):
            self._path = Path(session_name)
        elif base_path:
            self._path = Path(base_path) / f"{session_name}{self.EXTENSION}"
        else:
            self._path = Path(f"{session_name}{self.EXTENSION}")

    @property
    def path(self) -> Path:
        """Get session file path."""
        return self._path

    def load(self) -> Optional[SessionRecord]:
        """
        Load the record from disk.

        Returns:
            SessionRecord if the file exists, None otherwise

        Raises:
            FileSystemError: If the file cannot be read or parsed
        """
        with self._lock:
            try:
                raw = self._path.read_bytes()
            except FileNotFoundError:
                self._logger.debug(f"No saved session at {self._path}")
                return None
            except OSError as e:
                raise FileSystemError(f"Cannot read session file {self._path}: {e}") from e

        try:
            return SessionRecord.from_json(raw.decode('utf-8'))
        except (UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            raise FileSystemError(f"Corrupt session file {self._path}: {e}") from e

    def save(self, record: SessionRecord) -> None:
        """
        Atomically replace the session file.

        Args:
            record: Record to persist

        Raises:
            FileSystemError: If the file cannot be written
        """
        payload = record.to_json()

        with self._lock:
            tmp_name = None
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self._path.name}.",
                    suffix='.tmp',
                    dir=str(self._path.parent)
                )
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                # may contain a password
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, self._path)
                tmp_name = None
            except OSError as e:
                raise FileSystemError(f"Cannot write session file {self._path}: {e}") from e
            finally:
                if tmp_name is not None:
                    try:
                        os.unlink(tmp_name)
                    except OSError:
                        self._logger.debug(f"Could not remove temporary file {tmp_name}")

        self._logger.debug(f"Session saved to {self._path}")

    def delete(self) -> None:
        """Delete the session file if present."""
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                return
            except OSError as e:
                raise FileSystemError(f"Cannot delete session file {self._path}: {e}") from e
        self._logger.debug(f"Session file {self._path} deleted")

    def exists(self) -> bool:
        return self._path.is_file()

    def close(self) -> None:
        """Close storage (no-op for file storage)."""
        pass

    def __enter__(self) -> 'JSONSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
