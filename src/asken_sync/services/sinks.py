"""Destinations for scraped day results."""

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from asken_sync.domain.models import DayResult


class DayResultSink(Protocol):
    """Persistence interface keyed by date; the last write wins."""

    def save(self, result: DayResult) -> None:
        """Store a day result, replacing any earlier one for the same date."""


def dump_result(result: DayResult) -> str:
    """Serialize a day result as the JSON payload."""
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)


@dataclass
class FileDayResultSink(DayResultSink):
    """Writes one JSON file per date."""

    path_for: Callable[[date], Path]

    def save(self, result: DayResult) -> None:
        path = self.path_for(result.day)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_result(result), encoding="utf-8")
