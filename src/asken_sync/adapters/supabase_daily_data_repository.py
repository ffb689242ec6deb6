"""Supabase-backed sink for scraped days."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from asken_sync.domain.models import DayResult
from asken_sync.services.sinks import DayResultSink


@dataclass
class SupabaseDailyDataRepository(DayResultSink):
    """Upserts one ``daily_data`` row per date."""

    client: Client

    def save(self, result: DayResult) -> None:
        """Insert or replace the row for the result's date."""
        payload = result.to_dict()
        row: dict[str, object] = {
            "date": payload["date"],
            "asken_items": payload["items"],
            "asken_nutrients": payload["nutrients"],
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        if result.exercise is not None:
            row["steps"] = result.exercise.steps
            row["exercise_calories"] = result.exercise.calories
        self.client.table("daily_data").upsert(row, on_conflict="date").execute()

