"""File-backed storage for the browser session snapshot."""

import json
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from asken_sync.domain.errors import UnconfirmedSessionError
from asken_sync.domain.sessions import SessionState
from asken_sync.services.sessions import SessionStore

_logger = logging.getLogger(__name__)


@dataclass
class FileSessionStore(SessionStore):
    """Keeps the Playwright storage state as JSON at a fixed path."""

    path: Path

    def modified_at(self) -> datetime | None:
        """Return the file's modification time, or None if absent."""
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        return datetime.fromtimestamp(mtime, tz=UTC)

    def load(self) -> SessionState | None:
        """Read the persisted session, if present."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            storage = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Session file %s is unreadable, ignoring it", self.path)
            return None
        if not isinstance(storage, dict):
            _logger.warning("Session file %s is not a storage state", self.path)
            return None
        # Only confirmed sessions are ever written.
        return SessionState(storage=storage, confirmed=True)

    def save(self, state: SessionState) -> None:
        """Atomically replace the session file with a confirmed state."""
        if not state.confirmed:
            raise UnconfirmedSessionError("Refusing to persist an unconfirmed session")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(f"{self.path.suffix}.{os.getpid()}.tmp")
        tmp_path.write_text(json.dumps(state.storage), encoding="utf-8")
        tmp_path.replace(self.path)

    def discard(self) -> None:
        """Delete the session file."""
        self.path.unlink(missing_ok=True)
