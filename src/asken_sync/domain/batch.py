"""Domain models for multi-date backfills."""

from dataclasses import dataclass, field
from datetime import date, datetime

from asken_sync.domain.models import DayResult


@dataclass(frozen=True)
class DateOutcome:
    """Result of one date's pipeline run inside a batch."""

    day: date
    result: DayResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class BatchReport:
    """Aggregated outcomes of a batch, ordered by date."""

    outcomes: list[DateOutcome]

    @property
    def succeeded(self) -> list[DateOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[DateOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def errors(self) -> list[str]:
        return [
            f"{outcome.day.isoformat()}: {outcome.error}" for outcome in self.failed
        ]


@dataclass(frozen=True)
class SyncLogEntry:
    """Summary of the most recent sync."""

    timestamp: datetime
    success_count: int
    failure_count: int
    errors: list[str] = field(default_factory=list)
