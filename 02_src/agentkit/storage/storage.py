"""SQLite storage implementation."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger
from ..models import AccountingSnapshot, TraceEvent
from ..models.timestamps import from_iso, to_iso

logger = get_logger(__name__)

ACCOUNTING_KEY = "accounting_snapshot"
STATE_CHECKPOINT_KEY = "state_checkpoint"


class IStorage(Protocol):
    """Persistent storage for accounting, checkpoints and traces (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Accounting
    async def load_accounting_snapshot(self) -> AccountingSnapshot | None:
        """Load the saved accounting snapshot."""
        ...

    async def save_accounting_snapshot(self, snapshot: AccountingSnapshot) -> None:
        """Save the accounting snapshot."""
        ...

    # State checkpoint
    async def load_state_checkpoint(self) -> str | None:
        """Load serialized StateStore contents."""
        ...

    async def save_state_checkpoint(self, raw: str) -> None:
        """Save serialized StateStore contents."""
        ...

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    # Key-value
    async def _get_value(self, key: str) -> str | None:
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    async def _set_value(self, key: str, value: str) -> None:
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO kv_store (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            """,
            (key, value),
        )
        await self._conn.commit()

    # Accounting
    async def load_accounting_snapshot(self) -> AccountingSnapshot | None:
        """Load the saved accounting snapshot.

        A stored value that cannot be decoded is logged and treated as absent.
        """
        raw = await self._get_value(ACCOUNTING_KEY)
        if raw is None:
            return None
        try:
            return AccountingSnapshot.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Failed to load accounting snapshot: %s", e)
            return None

    async def save_accounting_snapshot(self, snapshot: AccountingSnapshot) -> None:
        """Save the accounting snapshot."""
        await self._set_value(ACCOUNTING_KEY, json.dumps(snapshot.to_dict()))

    # State checkpoint
    async def load_state_checkpoint(self) -> str | None:
        """Load serialized StateStore contents."""
        return await self._get_value(STATE_CHECKPOINT_KEY)

    async def save_state_checkpoint(self, raw: str) -> None:
        """Save serialized StateStore contents."""
        await self._set_value(STATE_CHECKPOINT_KEY, raw)

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, data, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                json.dumps(event.data, default=str),
                to_iso(event.timestamp),
            ),
        )
        await self._conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters (newest first)."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        conditions = []
        params = []

        if after:
            conditions.append("timestamp > ?")
            params.append(to_iso(after))
        if event_types:
            placeholders = ",".join("?" * len(event_types))
            conditions.append(f"event_type IN ({placeholders})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, event_type, actor, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            TraceEvent(
                id=row[0],
                event_type=row[1],
                actor=row[2],
                data=json.loads(row[3]) if row[3] else {},
                timestamp=from_iso(row[4]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        for table in ["kv_store", "trace_events"]:
            await self._conn.execute(f"DELETE FROM {table}")

        await self._conn.commit()
