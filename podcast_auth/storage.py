"""Session file storage for Podcast Tracker OAuth"""

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional, Union

from .exceptions import StorageError
from .models import SessionRecord


logger = logging.getLogger(__name__)

DEFAULT_SESSION_FILE = Path.home() / ".podcast-tracker" / "session.json"

FILE_MODE = 0o600
DIR_MODE = 0o700


class SessionStore:
    """Persists the current session to a single owner-only JSON file"""

    def __init__(self, session_file: Optional[Union[str, Path]] = None):
        """Initialize session storage

        Args:
            session_file: Path to session file (default: ~/.podcast-tracker/session.json)
        """
        if session_file is None:
            session_file = DEFAULT_SESSION_FILE

        self.session_file = Path(session_file).expanduser()

    def _ensure_secure_directory(self) -> None:
        """Create parent directory and restrict it to the owner"""
        parent_dir = self.session_file.parent
        parent_dir.mkdir(parents=True, exist_ok=True, mode=DIR_MODE)
        # mkdir's mode is masked by umask and ignored for existing directories
        if platform.system() != "Windows":
            os.chmod(parent_dir, DIR_MODE)

    def load(self) -> Optional[SessionRecord]:
        """Load the session from disk

        Returns:
            SessionRecord, or None if the file is missing or the record is
            incomplete

        Raises:
            StorageError: If the file exists but cannot be read
        """
        try:
            raw = self.session_file.read_bytes()
        except FileNotFoundError:
            logger.debug("No session file found")
            return None
        except OSError as e:
            raise StorageError(f"Failed to read session file {self.session_file}: {e}") from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring malformed session file {self.session_file}: {e}")
            return None

        record = SessionRecord.from_dict(data)
        if record is None:
            logger.debug("Session file is incomplete, treating as signed out")
        return record

    def save(self, record: SessionRecord) -> None:
        """Write the session atomically with owner-only permissions

        The record is written to a temp file in the same directory and
        renamed over the target, so readers never see a partial file.

        Raises:
            StorageError: If the file cannot be written
        """
        payload = json.dumps(record.to_dict(), indent=2) + "\n"

        try:
            self._ensure_secure_directory()
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.session_file.name}.",
                suffix=".tmp",
                dir=str(self.session_file.parent),
            )
        except OSError as e:
            raise StorageError(f"Failed to prepare session file {self.session_file}: {e}") from e

        try:
            # mkstemp creates the file 0600 already
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.session_file)
            if platform.system() != "Windows":
                os.chmod(self.session_file, FILE_MODE)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to save session file {self.session_file}: {e}") from e

        logger.debug(f"Saved session to {self.session_file}")

    def clear(self) -> None:
        """Remove the session file; a missing file is not an error

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        try:
            self.session_file.unlink()
            logger.info("Cleared local session")
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to clear session file {self.session_file}: {e}") from e
