"""Cross-date backfill over a bounded pool of worker processes."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from asken_sync.domain.batch import BatchReport, DateOutcome, SyncLogEntry
from asken_sync.domain.models import DayResult
from asken_sync.services.sinks import DayResultSink
from asken_sync.services.sync_log import SyncLogRepository

_logger = logging.getLogger(__name__)


class DateRunner(Protocol):
    """Runs one date's pipeline in isolation."""

    async def run(self, day: date) -> DayResult:
        """Return the day result or raise on an unrecovered failure."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class BatchService:
    """Scrapes many dates with at most ``width`` runs in flight.

    Each run owns its browser session; a failed date is reported and the
    batch carries on.
    """

    runner: DateRunner
    sink: DayResultSink
    sync_log: SyncLogRepository | None = None
    width: int = 5
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def run(self, days: Sequence[date], width: int | None = None) -> BatchReport:
        """Scrape ``days`` and store every successful result."""
        resolved_width = self.width if width is None else width
        if resolved_width < 1:
            raise ValueError("width must be at least 1")
        semaphore = asyncio.Semaphore(resolved_width)

        async def run_one(day: date) -> DateOutcome:
            async with semaphore:
                try:
                    result = await self.runner.run(day)
                    self.sink.save(result)
                except Exception as exc:
                    _logger.exception("Date %s not recovered", day.isoformat())
                    return DateOutcome(day=day, error=str(exc) or type(exc).__name__)
            _logger.info(
                "Date %s synced (%s items)", day.isoformat(), len(result.items)
            )
            return DateOutcome(day=day, result=result)

        outcomes = await asyncio.gather(*(run_one(day) for day in sorted(set(days))))
        report = BatchReport(outcomes=list(outcomes))
        if self.sync_log is not None:
            self.sync_log.record(
                SyncLogEntry(
                    timestamp=self.clock(),
                    success_count=len(report.succeeded),
                    failure_count=len(report.failed),
                    errors=report.errors,
                )
            )
        _logger.info(
            "Batch finished: %s succeeded, %s failed",
            len(report.succeeded),
            len(report.failed),
        )
        return report
