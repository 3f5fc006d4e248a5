"""AccountingStore implementation."""

import asyncio
import copy
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Protocol

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import AccountingSnapshot, AgentRole, Budget, EventKind, TokenUsage, utc_now
from .pricing import calculate_cost

logger = get_logger(__name__)

DAILY_WINDOW = timedelta(hours=24)


class IAccountingPersistence(Protocol):
    """Durable storage for the accounting snapshot."""

    async def load_accounting_snapshot(self) -> AccountingSnapshot | None:
        """Load the last saved snapshot, if any."""
        ...

    async def save_accounting_snapshot(self, snapshot: AccountingSnapshot) -> None:
        """Persist a snapshot."""
        ...


class AccountingStore:
    """Cumulative, per-role and daily token accounting with budget alerts."""

    SOURCE = "accounting_store"

    def __init__(
        self,
        event_bus: IEventBus,
        persistence: IAccountingPersistence | None = None,
        clock: Callable[[], datetime] = utc_now,
        snapshot: AccountingSnapshot | None = None,
    ):
        self._event_bus = event_bus
        self._persistence = persistence
        self._clock = clock
        now = clock()
        self._snapshot = snapshot or AccountingSnapshot(
            last_updated=now, session_started_at=now, last_reset_at=now
        )
        self._pending_saves: set[asyncio.Task] = set()

    async def load(self) -> None:
        """Restore the persisted snapshot and start a new session."""
        if self._persistence is None:
            return
        saved = await self._persistence.load_accounting_snapshot()
        if saved is not None:
            self._snapshot = saved
            logger.info(
                "Loaded accounting snapshot: %s tokens, %.4f USD",
                saved.total_tokens,
                saved.total_cost,
            )
        self._snapshot.session_started_at = self._clock()

    def snapshot(self) -> AccountingSnapshot:
        """Get a copy of the current snapshot."""
        return copy.deepcopy(self._snapshot)

    def record_usage(self, role: AgentRole, usage: TokenUsage, model: str | None) -> TokenUsage:
        """Add one invocation's usage; return the usage with its cost filled in."""
        cost = usage.cost
        if cost is None:
            cost = calculate_cost(model, usage.input_tokens, usage.output_tokens)
        recorded = replace(usage, cost=cost)

        self._check_daily_reset()

        stats = self._snapshot
        stats.total_input_tokens += recorded.input_tokens
        stats.total_output_tokens += recorded.output_tokens
        stats.total_tokens += recorded.total_tokens
        stats.total_cost += cost
        stats.session_count += 1
        stats.last_updated = self._clock()
        stats.daily_tokens += recorded.total_tokens

        per_role = stats.by_role.setdefault(role.value, TokenUsage(cost=0.0))
        per_role.input_tokens += recorded.input_tokens
        per_role.output_tokens += recorded.output_tokens
        per_role.total_tokens += recorded.total_tokens
        per_role.cost = (per_role.cost or 0.0) + cost

        self._changed()
        self._check_budget()
        return recorded

    def set_budget(self, daily_limit: int, warning_fraction: float = 0.8) -> None:
        """Enable a daily token budget."""
        if daily_limit <= 0:
            raise ValueError("daily_limit must be positive")
        if not 0 < warning_fraction <= 1:
            raise ValueError("warning_fraction must be in (0, 1]")
        self._snapshot.budget = Budget(
            daily_limit=daily_limit, warning_fraction=warning_fraction, enabled=True
        )
        self._changed()

    def disable_budget(self) -> None:
        """Turn off budget checks, keeping the configured limit."""
        if self._snapshot.budget is None:
            return
        self._snapshot.budget.enabled = False
        self._changed()

    def budget_status(self) -> dict | None:
        """Get daily budget usage, or None when no budget is enabled."""
        budget = self._snapshot.budget
        if budget is None or not budget.enabled:
            return None
        daily = self._snapshot.daily_tokens
        return {
            "enabled": True,
            "percentage": daily / budget.daily_limit,
            "remaining": max(0, budget.daily_limit - daily),
        }

    def reset_all(self) -> None:
        """Zero every counter; the budget configuration is kept."""
        now = self._clock()
        self._snapshot = AccountingSnapshot(
            last_updated=now,
            session_started_at=now,
            last_reset_at=now,
            budget=self._snapshot.budget,
        )
        self._changed()

    async def flush(self) -> None:
        """Wait for scheduled saves to finish."""
        if self._pending_saves:
            await asyncio.gather(*list(self._pending_saves), return_exceptions=True)

    def _check_daily_reset(self) -> None:
        # Lazy: only evaluated on write
        now = self._clock()
        last_reset = self._snapshot.daily_reset_at
        if last_reset is None or now - last_reset > DAILY_WINDOW:
            self._snapshot.daily_tokens = 0
            self._snapshot.daily_reset_at = now

    def _check_budget(self) -> None:
        budget = self._snapshot.budget
        if budget is None or not budget.enabled:
            return

        daily = self._snapshot.daily_tokens
        percentage = daily / budget.daily_limit
        payload = {
            "daily_tokens": daily,
            "daily_limit": budget.daily_limit,
            "percentage": percentage,
        }
        if percentage >= 1:
            logger.warning("Daily token budget exceeded: %s/%s", daily, budget.daily_limit)
            self._event_bus.publish(EventKind.BUDGET_EXCEEDED, payload, self.SOURCE)
        elif percentage >= budget.warning_fraction:
            logger.info("Daily token budget at %.0f%%", percentage * 100)
            self._event_bus.publish(EventKind.BUDGET_WARNING, payload, self.SOURCE)

    def _changed(self) -> None:
        self._schedule_save()
        self._event_bus.publish(
            EventKind.ACCOUNTING_CHANGED, self._snapshot.to_dict(), self.SOURCE
        )

    def _schedule_save(self) -> None:
        if self._persistence is None:
            return
        task = asyncio.get_running_loop().create_task(
            self._persistence.save_accounting_snapshot(self.snapshot())
        )
        self._pending_saves.add(task)
        task.add_done_callback(self._save_done)

    def _save_done(self, task: asyncio.Task) -> None:
        self._pending_saves.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Failed to save accounting snapshot: %s", task.exception())
