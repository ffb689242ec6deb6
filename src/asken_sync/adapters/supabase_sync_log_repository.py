"""Supabase-backed sync log."""

import json
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from asken_sync.domain.batch import SyncLogEntry
from asken_sync.services.sync_log import SyncLogRepository

_ROW_ID = 1


@dataclass
class SupabaseSyncLogRepository(SyncLogRepository):
    """Keeps the last sync summary in a single ``sync_log`` row."""

    client: Client

    def record(self, entry: SyncLogEntry) -> None:
        self.client.table("sync_log").upsert(
            {
                "id": _ROW_ID,
                "timestamp": entry.timestamp.isoformat(),
                "success_count": entry.success_count,
                "failure_count": entry.failure_count,
                "errors": json.dumps(entry.errors, ensure_ascii=False),
            }
        ).execute()

    def latest(self) -> SyncLogEntry | None:
        response = (
            self.client.table("sync_log")
            .select("timestamp, success_count, failure_count, errors")
            .eq("id", _ROW_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        raw_errors = row.get("errors")
        errors = []
        if isinstance(raw_errors, str) and raw_errors:
            errors = json.loads(raw_errors)
        return SyncLogEntry(
            timestamp=datetime.fromisoformat(str(row["timestamp"])),
            success_count=int(row.get("success_count", 0)),
            failure_count=int(row.get("failure_count", 0)),
            errors=[str(error) for error in errors],
        )
