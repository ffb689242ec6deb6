"""Record of the most recent sync."""

from dataclasses import dataclass
from typing import Protocol

from asken_sync.domain.batch import SyncLogEntry


class SyncLogRepository(Protocol):
    """Persistence interface for the last sync summary."""

    def record(self, entry: SyncLogEntry) -> None:
        """Replace the stored summary with ``entry``."""

    def latest(self) -> SyncLogEntry | None:
        """Return the stored summary, if any."""


@dataclass
class InMemorySyncLog(SyncLogRepository):
    """Process-local sync log used when no database is configured."""

    _entry: SyncLogEntry | None

    def __init__(self) -> None:
        self._entry = None

    def record(self, entry: SyncLogEntry) -> None:
        self._entry = entry

    def latest(self) -> SyncLogEntry | None:
        return self._entry
