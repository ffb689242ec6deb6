"""Runs single-date scrapes as separate worker processes."""

import asyncio
import json
import os
import sys
from dataclasses import dataclass, field
from datetime import date

from asken_sync.domain.errors import DateRunFailed
from asken_sync.domain.models import DayResult
from asken_sync.services.batch import DateRunner

_STDERR_TAIL = 500


@dataclass
class SubprocessDateRunner(DateRunner):
    """Spawns ``python -m asken_sync DATE`` and parses its JSON payload.

    Each worker loads its own copy of the persisted session file.
    """

    timeout_seconds: float = 300
    command: list[str] = field(
        default_factory=lambda: [sys.executable, "-m", "asken_sync"]
    )

    async def run(self, day: date) -> DayResult:
        process = await asyncio.create_subprocess_exec(
            *self.command,
            day.isoformat(),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, "HEADLESS": "true", "PYTHONIOENCODING": "utf-8"},
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            raise DateRunFailed(
                f"Worker timed out after {self.timeout_seconds}s"
            ) from exc

        if process.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace")[-_STDERR_TAIL:].strip()
            raise DateRunFailed(f"Worker exited with {process.returncode}: {tail}")
        try:
            payload = json.loads(stdout.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise DateRunFailed("Worker produced no JSON payload") from exc
        return DayResult.from_dict(payload)
