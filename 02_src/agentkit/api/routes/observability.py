"""Observability API routes."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import Application
from ...models import EventKind


class TraceEventResponse(BaseModel):
    """Response model for trace event."""

    id: str
    event_type: str
    actor: str
    data: dict[str, Any]
    timestamp: datetime


def parse_after(value: str | None) -> datetime | None:
    """Parse the ``after`` filter; naive timestamps are UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid after timestamp format")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def create_observability_router(app: Application) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/event-kinds", response_model=list[str])
    async def list_event_kinds() -> list[str]:
        """Event kinds that can appear as trace event types."""
        return [kind.value for kind in EventKind]

    @router.get("/trace-events", response_model=list[TraceEventResponse])
    async def get_trace_events(
        after: str | None = Query(None, description="ISO timestamp filter"),
        limit: int = Query(100, ge=1, le=1000),
        event_type: str | None = Query(
            None, description="Event type, or several separated by commas"
        ),
        actor: str | None = Query(None, description="Publishing component"),
    ) -> list[dict]:
        """Recorded trace events, newest first."""
        after_dt = parse_after(after)
        event_types = None
        if event_type:
            event_types = [t.strip() for t in event_type.split(",") if t.strip()]

        try:
            events = await app.storage.get_trace_events(
                after=after_dt,
                event_types=event_types,
                actor=actor,
                limit=limit,
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return [
            {
                "id": e.id,
                "event_type": e.event_type,
                "actor": e.actor,
                "data": e.data,
                "timestamp": e.timestamp.isoformat(),
            }
            for e in events
        ]

    return router
