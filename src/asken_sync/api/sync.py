"""Sync trigger endpoints with optional shared-secret auth."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel, Field

from asken_sync.services.dates import effective_today

if TYPE_CHECKING:
    from asken_sync.containers import AppContainer

router = APIRouter(prefix="/sync", tags=["sync"])


class SyncRequest(BaseModel):
    """Dates to sync; empty means the effective today."""

    dates: list[date] = []
    width: int | None = Field(default=None, ge=1)


def _get_sync_secret(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.sync_secret


async def require_sync_secret(
    x_sync_secret: str | None = Header(default=None),
    sync_secret: str | None = Depends(_get_sync_secret),
) -> None:
    """Check the shared secret when one is configured."""
    if sync_secret and x_sync_secret != sync_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("", dependencies=[Depends(require_sync_secret)])
async def trigger_sync(
    request: Request, body: SyncRequest | None = None
) -> dict[str, object]:
    """Scrape the requested dates and store the results."""
    container: AppContainer = request.app.state.container
    settings = container.settings
    days = (body.dates if body else []) or [
        effective_today(
            boundary_hour=settings.day_boundary_hour, timezone=settings.timezone
        )
    ]
    report = await container.batch_service.run(days, width=body.width if body else None)
    return {
        "success": not report.failed,
        "successCount": len(report.succeeded),
        "failureCount": len(report.failed),
        "dates": [outcome.day.isoformat() for outcome in report.succeeded],
        "errors": report.errors,
    }


@router.get("/status")
async def sync_status(request: Request) -> dict[str, object]:
    """Return the last sync summary."""
    container: AppContainer = request.app.state.container
    entry = container.sync_log.latest()
    if entry is None:
        return {"status": "never"}
    return {
        "status": "ok" if entry.failure_count == 0 else "partial",
        "timestamp": entry.timestamp.isoformat(),
        "successCount": entry.success_count,
        "failureCount": entry.failure_count,
        "errors": entry.errors,
    }
